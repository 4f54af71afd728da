"""Checkpoint save/load for registry state.

A checkpoint is a JSON file holding the registry snapshot and the block
height it was taken at. Writes are atomic (temp file + rename) so an
interrupted save leaves the previous checkpoint intact.
"""

from __future__ import annotations

import fcntl
import json
import os
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Iterator, TypedDict, TYPE_CHECKING

from .constants import CHECKPOINT_VERSION, LOCK_SUFFIX
from .creation_registry import CreationRegistry

if TYPE_CHECKING:
    from .logger import EventLogger


class CheckpointData(TypedDict):
    """Structure for checkpoint file data."""

    version: int
    block_height: int
    timestamp: str
    state: dict[str, Any]


@contextmanager
def locked_checkpoint(checkpoint_file: str | Path) -> Iterator[None]:
    """Hold an exclusive lock on a checkpoint for a load/modify/save cycle.

    The lock lives in a ``<checkpoint>.lock`` sidecar because the
    checkpoint itself is replaced on every save.
    """
    lock_path = Path(f"{checkpoint_file}{LOCK_SUFFIX}")
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    with lock_path.open("a+", encoding="utf-8") as lock_handle:
        fcntl.flock(lock_handle.fileno(), fcntl.LOCK_EX)
        try:
            yield
        finally:
            fcntl.flock(lock_handle.fileno(), fcntl.LOCK_UN)


def save_checkpoint(
    registry: CreationRegistry,
    checkpoint_file: str | Path,
    block_height: int,
) -> str:
    """Save registry state to a checkpoint file.

    Args:
        registry: The registry to checkpoint
        checkpoint_file: Destination path
        block_height: Block height the snapshot corresponds to

    Returns:
        Path to the saved checkpoint file
    """
    path = Path(checkpoint_file)
    path.parent.mkdir(parents=True, exist_ok=True)

    checkpoint: CheckpointData = {
        "version": CHECKPOINT_VERSION,
        "block_height": block_height,
        "timestamp": datetime.now().isoformat(),
        "state": registry.to_snapshot(),
    }

    temp_file = f"{path}.tmp"
    with open(temp_file, "w") as f:
        json.dump(checkpoint, f, indent=2)

    # os.replace is atomic on POSIX; the old checkpoint survives an interrupt
    os.replace(temp_file, path)

    return str(path)


def load_checkpoint(checkpoint_file: str | Path) -> CheckpointData | None:
    """Load a checkpoint file.

    Returns:
        CheckpointData if the file exists, None otherwise.

    Raises:
        ValueError: If the checkpoint version is not supported
    """
    checkpoint_path = Path(checkpoint_file)
    if not checkpoint_path.exists():
        return None

    with open(checkpoint_path) as f:
        data: dict[str, Any] = json.load(f)

    version = int(data.get("version", 0))
    if version != CHECKPOINT_VERSION:
        raise ValueError(
            f"Unsupported checkpoint version {version} in {checkpoint_path} "
            f"(expected {CHECKPOINT_VERSION})"
        )

    checkpoint: CheckpointData = {
        "version": version,
        "block_height": int(data.get("block_height", 0)),
        "timestamp": str(data.get("timestamp", "")),
        "state": dict(data.get("state", {})),
    }
    return checkpoint


def restore_registry(
    checkpoint: CheckpointData | None,
    event_logger: "EventLogger | None" = None,
) -> CreationRegistry:
    """Build a registry from a checkpoint, or an empty one if there is none."""
    if checkpoint is None:
        return CreationRegistry(event_logger=event_logger)
    return CreationRegistry.from_snapshot(checkpoint["state"], event_logger=event_logger)
