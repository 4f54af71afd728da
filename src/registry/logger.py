"""JSONL event logger - append-only trail of registry activity"""

from __future__ import annotations

import json
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..config import get
from .constants import (
    EVENT_CREATION_REGISTERED,
    EVENT_CREATION_UPDATED,
    EVENT_REGISTRY_ERROR,
)
from .errors import RegistryError


class EventLogger:
    """Append-only JSONL event log, one file shared across runs.

    Every event carries a monotonic 'sequence' field for ordering. A new
    logger continues from the last sequence already in the file, so the
    numbering stays monotonic across CLI invocations.
    """

    output_path: Path
    _sequence: int
    _lock: threading.Lock

    def __init__(self, output_file: str | None = None) -> None:
        """Initialize the event logger.

        Args:
            output_file: File path (default: logging.output_file)

        Raises:
            ValueError: If the last line of an existing log is not valid JSON
        """
        self._lock = threading.Lock()
        resolved_file = output_file or get("logging.output_file") or "registry_events.jsonl"
        if not isinstance(resolved_file, str):
            resolved_file = "registry_events.jsonl"
        self.output_path = Path(resolved_file)
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self.output_path.touch()
        self._sequence = self._last_sequence()

    def _last_sequence(self) -> int:
        """Return the sequence of the last event in the file, 0 if empty."""
        lines = [line for line in self.output_path.read_text().split("\n") if line.strip()]
        if not lines:
            return 0
        last: dict[str, Any] = json.loads(lines[-1])
        return int(last.get("sequence", 0))

    def log(self, event_type: str, data: dict[str, Any]) -> None:
        """Log an event to the JSONL file."""
        with self._lock:
            self._sequence += 1
            event: dict[str, Any] = {
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "sequence": self._sequence,
                "event_type": event_type,
                **data,
            }
            with open(self.output_path, "a") as f:
                f.write(json.dumps(event) + "\n")

    # ========== Registry event helpers ==========

    def log_creation_registered(
        self,
        creation_id: str,
        creator: str,
        block_height: int,
        category: str,
    ) -> None:
        """Log a successful registration."""
        self.log(EVENT_CREATION_REGISTERED, {
            "creation_id": creation_id,
            "creator": creator,
            "block_height": block_height,
            "category": category,
        })

    def log_creation_updated(self, creation_id: str, caller: str) -> None:
        """Log a successful detail update."""
        self.log(EVENT_CREATION_UPDATED, {
            "creation_id": creation_id,
            "caller": caller,
        })

    def log_registry_error(
        self,
        operation: str,
        creation_id: str,
        caller: str,
        error: RegistryError,
    ) -> None:
        """Log a rejected registry call.

        Args:
            operation: "register" or "update"
            creation_id: The creation the call targeted
            caller: The principal that made the call
            error: The error kind returned to the caller
        """
        self.log(EVENT_REGISTRY_ERROR, {
            "operation": operation,
            "creation_id": creation_id,
            "caller": caller,
            "error": error.value,
            "code": error.code,
        })

    def read_recent(self, n: int | None = None) -> list[dict[str, Any]]:
        """Read the last N events from the log.

        N defaults to logging.default_recent from config.
        """
        if n is None:
            default_recent = get("logging.default_recent")
            if isinstance(default_recent, int):
                n = default_recent
            else:
                n = 50
        if not self.output_path.exists():
            return []
        lines = self.output_path.read_text().strip().split("\n")
        lines = [line for line in lines if line]
        recent = lines[-n:] if len(lines) > n else lines
        return [json.loads(line) for line in recent]
