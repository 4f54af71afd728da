"""Unit tests for registry checkpoint save/load."""

import fcntl
import json
from pathlib import Path

import pytest

from src.registry.checkpoint import (
    load_checkpoint, locked_checkpoint, restore_registry, save_checkpoint,
)
from src.registry.constants import CHECKPOINT_VERSION
from src.registry.creation_registry import CreationRegistry
from src.registry.errors import RegistryError


class TestCheckpoint:
    """Tests for save_checkpoint / load_checkpoint / restore_registry."""

    def test_save_and_restore(
        self, registry: CreationRegistry, alice: str, bob: str,
        content_hash: bytes, tmp_path: Path,
    ) -> None:
        registry.register("c2", "T", "D", content_hash, "art", caller=alice, block_height=100)
        registry.register("c1", "T", "D", content_hash, "art", caller=alice, block_height=101)
        registry.register("c3", "T", "D", content_hash, "art", caller=bob, block_height=102)
        path = tmp_path / "state.json"

        assert save_checkpoint(registry, path, block_height=102) == str(path)

        checkpoint = load_checkpoint(path)
        assert checkpoint is not None
        assert checkpoint["version"] == CHECKPOINT_VERSION
        assert checkpoint["block_height"] == 102

        restored = restore_registry(checkpoint)
        assert restored.creations == registry.creations
        assert restored.get_creation_ids_by_creator(alice) == ["c2", "c1"]
        assert restored.register("c3", "T", "D", b"", "x", caller=bob,
                                 block_height=103).error is RegistryError.ALREADY_REGISTERED

    def test_no_temp_file_left(self, registry: CreationRegistry, tmp_path: Path) -> None:
        path = tmp_path / "state.json"
        save_checkpoint(registry, path, block_height=0)

        assert not (tmp_path / "state.json.tmp").exists()

    def test_creates_parent_dirs(self, registry: CreationRegistry, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "dir" / "state.json"
        save_checkpoint(registry, path, block_height=0)

        assert path.exists()

    def test_missing_file_returns_none(self, tmp_path: Path) -> None:
        assert load_checkpoint(tmp_path / "missing.json") is None

    def test_restore_none_gives_empty_registry(self) -> None:
        registry = restore_registry(None)
        assert registry.count() == 0

    def test_unsupported_version(self, tmp_path: Path) -> None:
        path = tmp_path / "state.json"
        path.write_text(json.dumps({"version": 99, "block_height": 1, "state": {}}))

        with pytest.raises(ValueError, match="Unsupported checkpoint version"):
            load_checkpoint(path)

    def test_restore_attaches_event_logger(
        self, registry: CreationRegistry, event_logger, tmp_path: Path, alice: str,
    ) -> None:
        path = tmp_path / "state.json"
        save_checkpoint(registry, path, block_height=0)

        restored = restore_registry(load_checkpoint(path), event_logger=event_logger)
        restored.register("c1", "T", "D", b"h", "art", caller=alice, block_height=1)

        assert event_logger.read_recent()[-1]["event_type"] == "creation_registered"


class TestLockedCheckpoint:
    """Tests for locked_checkpoint()."""

    def test_lock_held_inside_block(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "state.json"
        lock_path = Path(f"{path}.lock")

        with locked_checkpoint(path):
            assert lock_path.exists()
            with lock_path.open("a+") as other:
                with pytest.raises(BlockingIOError):
                    fcntl.flock(other.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)

        with lock_path.open("a+") as other:
            fcntl.flock(other.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
            fcntl.flock(other.fileno(), fcntl.LOCK_UN)

    def test_lock_released_on_error(self, tmp_path: Path) -> None:
        path = tmp_path / "state.json"

        with pytest.raises(RuntimeError):
            with locked_checkpoint(path):
                raise RuntimeError("boom")

        with locked_checkpoint(path):
            pass
