"""Command-line interface for the creation registry.

Each invocation loads registry state from a JSON checkpoint, performs
one operation as the given sender at the given block height, prints
the result as JSON, and saves the checkpoint again after a successful
mutation.

Usage:
    python run.py register c1 --title T --description D \\
        --content-hash <64 hex chars> --category art --block-height 100
    python run.py get c1
    python run.py update c1 --title T2 --description D2 --category craft
    python run.py list-by-creator ST1PQHQKV0RJXZFY1DGX8MNSNYVE3VGZJSRTPGZGM

Exit codes: 0 success, 1 registry error or missing creation, 2 bad input.
"""

from __future__ import annotations

import argparse
import json
import logging
from typing import Any

from dotenv import load_dotenv

from .config import get_validated_config, load_config
from .registry import (
    CreationRegistry,
    EventLogger,
    ExecutionContext,
    load_checkpoint,
    locked_checkpoint,
    restore_registry,
    save_checkpoint,
)


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Creation registry")
    parser.add_argument("--config", default=None, help="Path to config file")
    parser.add_argument(
        "--state", default=None,
        help="Checkpoint file holding registry state (default: registry.checkpoint_file)",
    )
    parser.add_argument(
        "--events", default=None,
        help="JSONL event log (default: logging.output_file)",
    )
    parser.add_argument(
        "--sender", default=None,
        help="Calling principal (default: registry.default_sender)",
    )
    parser.add_argument(
        "--block-height", type=int, default=None,
        help="Current block height (default: height stored in the checkpoint)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    register = sub.add_parser("register", help="Register a new creation")
    register.add_argument("creation_id")
    register.add_argument("--title", required=True)
    register.add_argument("--description", required=True)
    register.add_argument("--content-hash", required=True, help="Hex-encoded digest")
    register.add_argument("--category", required=True)

    get = sub.add_parser("get", help="Show a creation")
    get.add_argument("creation_id")

    update = sub.add_parser("update", help="Update title, description and category")
    update.add_argument("creation_id")
    update.add_argument("--title", required=True)
    update.add_argument("--description", required=True)
    update.add_argument("--category", required=True)

    by_creator = sub.add_parser("list-by-creator", help="List creation IDs of a creator")
    by_creator.add_argument("creator")

    return parser


def parse_content_hash(value: str, expected_size: int) -> bytes:
    """Decode a hex digest and check its length.

    Raises:
        ValueError: If value is not hex or has the wrong length
    """
    digest = bytes.fromhex(value)
    if len(digest) != expected_size:
        raise ValueError(
            f"content hash must be {expected_size} bytes, got {len(digest)}"
        )
    return digest


def _run_command(
    args: argparse.Namespace,
    registry: CreationRegistry,
    ctx: ExecutionContext,
) -> tuple[Any, bool, bool]:
    """Run one command. Returns (output, success, state_changed).

    For ``register``, ``args.content_hash`` has already been decoded to bytes.
    """
    if args.command == "register":
        result = registry.register_in(
            ctx, args.creation_id, args.title, args.description,
            args.content_hash, args.category,
        )
        return result.to_dict(), result.success, result.success

    if args.command == "update":
        result = registry.update_in(
            ctx, args.creation_id, args.title, args.description, args.category,
        )
        return result.to_dict(), result.success, result.success

    if args.command == "get":
        record = registry.get(args.creation_id)
        if record is None:
            return None, False, False
        return record.to_dict(), True, False

    ids = registry.get_creation_ids_by_creator(args.creator)
    return {"creator": args.creator, "creation_ids": ids}, True, False


def main(argv: list[str] | None = None) -> int:
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)

    load_config(args.config)
    config = get_validated_config()
    logging.basicConfig(level=config.logging.level)

    if args.command == "register":
        try:
            args.content_hash = parse_content_hash(
                args.content_hash, config.registry.content_hash_size
            )
        except ValueError as e:
            parser.error(f"--content-hash: {e}")

    state_file: str = args.state or config.registry.checkpoint_file

    # Load, mutate and save under one exclusive lock so concurrent CLI
    # processes see each other's changes
    with locked_checkpoint(state_file):
        try:
            checkpoint = load_checkpoint(state_file)
        except ValueError as e:
            parser.error(str(e))

        stored_height = checkpoint["block_height"] if checkpoint is not None else 0
        block_height = stored_height if args.block_height is None else args.block_height
        if block_height < stored_height:
            parser.error(
                f"--block-height {block_height} is behind the checkpoint height {stored_height}"
            )

        events_file = args.events or config.logging.output_file
        try:
            event_logger = EventLogger(output_file=events_file)
        except ValueError as e:
            parser.error(f"corrupt event log {events_file}: {e}")

        try:
            registry = restore_registry(checkpoint, event_logger=event_logger)
        except (ValueError, KeyError) as e:
            parser.error(f"corrupt checkpoint {state_file}: {e}")

        ctx = ExecutionContext(
            sender=args.sender or config.registry.default_sender,
            block_height=block_height,
        )

        output, success, state_changed = _run_command(args, registry, ctx)

        if state_changed:
            path = save_checkpoint(registry, state_file, ctx.block_height)
            logger.info("Saved registry state to %s", path)

    print(json.dumps(output, indent=2))
    return 0 if success else 1
