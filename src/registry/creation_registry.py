"""Creation Registry - ledger of registered creations

Maps a caller-chosen creation ID to its metadata and keeps a reverse
index from creator to the IDs they registered.

Rules:
1. A creation ID can be registered once. A second registration fails
   with ALREADY_REGISTERED and changes nothing.
2. Only the recorded creator may update title, description and category.
3. creator, content_hash and timestamp never change after registration.
4. Records are never removed.

Caller identity and block height are passed explicitly to every
mutation. Domain failures are returned as RegistryResult values, never
raised.

Usage:
    registry = CreationRegistry()

    result = registry.register("c1", "T", "D", digest, "art",
                               caller="alice", block_height=100)
    result.value  # "c1"

    registry.get("c1").timestamp  # 100

    registry.update("c1", "T2", "D2", "craft", caller="bob").error
    # RegistryError.NOT_AUTHORIZED
"""

from __future__ import annotations

import logging
import threading
from typing import Any, TYPE_CHECKING

from .errors import RegistryError
from .models import CreationRecord, RegistryResult

if TYPE_CHECKING:
    from .context import ExecutionContext
    from .logger import EventLogger


logger = logging.getLogger(__name__)


class CreationRegistry:
    """
    Tracks creations and the reverse creator index.

    - creations: {creation_id: CreationRecord}
    - creations_by_creator: {creator: [creation_id, ...]} in registration order

    Thread-safety: every public operation runs under one lock covering
    both mappings, so the read-then-write in register() and update() is
    atomic even on a multi-threaded host.

    Optionally writes one event per mutation attempt to an EventLogger.
    """

    creations: dict[str, CreationRecord]
    creations_by_creator: dict[str, list[str]]
    event_logger: "EventLogger | None"
    _lock: threading.Lock

    def __init__(self, event_logger: "EventLogger | None" = None) -> None:
        self.creations = {}
        self.creations_by_creator = {}
        self.event_logger = event_logger
        self._lock = threading.Lock()

    # ===== MUTATIONS =====

    def register(
        self,
        creation_id: str,
        title: str,
        description: str,
        content_hash: bytes,
        category: str,
        caller: str,
        block_height: int,
    ) -> RegistryResult:
        """Register a new creation owned by the caller.

        Args:
            creation_id: Unique ID chosen by the caller
            title: Human-readable title
            description: Human-readable description
            content_hash: Digest of the underlying content
            category: Classification string
            caller: Principal making the call; becomes the creator
            block_height: Current block height; stored as the timestamp

        Returns:
            ok(creation_id), or err(ALREADY_REGISTERED) if the ID is taken
        """
        with self._lock:
            if creation_id in self.creations:
                self._log_rejection("register", creation_id, caller,
                                    RegistryError.ALREADY_REGISTERED)
                return RegistryResult.err(RegistryError.ALREADY_REGISTERED)

            record = CreationRecord(
                creator=caller,
                title=title,
                description=description,
                content_hash=bytes(content_hash),
                timestamp=block_height,
                category=category,
            )
            # Build the new index list before touching either mapping
            ids = self.creations_by_creator.get(caller, []) + [creation_id]
            self.creations[creation_id] = record
            self.creations_by_creator[caller] = ids

            # Events are written under the lock so the log order matches
            # the order of state changes
            logger.debug("Registered creation %s for %s at height %d",
                         creation_id, caller, block_height)
            if self.event_logger is not None:
                self.event_logger.log_creation_registered(
                    creation_id, caller, block_height, category
                )
            return RegistryResult.ok(creation_id)

    def update(
        self,
        creation_id: str,
        title: str,
        description: str,
        category: str,
        caller: str,
    ) -> RegistryResult:
        """Replace the mutable details of a creation.

        Only title, description and category change. The reverse index
        is not touched.

        Returns:
            ok(True), err(NOT_FOUND) if the ID is unknown, or
            err(NOT_AUTHORIZED) if the caller is not the creator
        """
        with self._lock:
            record = self.creations.get(creation_id)
            if record is None:
                error = RegistryError.NOT_FOUND
            elif record.creator != caller:
                error = RegistryError.NOT_AUTHORIZED
            else:
                record.title = title
                record.description = description
                record.category = category
                logger.debug("Updated creation %s", creation_id)
                if self.event_logger is not None:
                    self.event_logger.log_creation_updated(creation_id, caller)
                return RegistryResult.ok(True)

            self._log_rejection("update", creation_id, caller, error)
            return RegistryResult.err(error)

    def register_in(
        self,
        ctx: "ExecutionContext",
        creation_id: str,
        title: str,
        description: str,
        content_hash: bytes,
        category: str,
    ) -> RegistryResult:
        """register() with caller and block height taken from ctx."""
        return self.register(
            creation_id, title, description, content_hash, category,
            caller=ctx.sender, block_height=ctx.block_height,
        )

    def update_in(
        self,
        ctx: "ExecutionContext",
        creation_id: str,
        title: str,
        description: str,
        category: str,
    ) -> RegistryResult:
        """update() with caller taken from ctx."""
        return self.update(creation_id, title, description, category, caller=ctx.sender)

    def _log_rejection(
        self, operation: str, creation_id: str, caller: str, error: RegistryError
    ) -> None:
        logger.info("%s %s by %s rejected: %s",
                    operation, creation_id, caller, error.value)
        if self.event_logger is not None:
            self.event_logger.log_registry_error(operation, creation_id, caller, error)

    # ===== READS =====

    def get(self, creation_id: str) -> CreationRecord | None:
        """Get a creation by ID.

        Returns a copy; mutating it does not affect the registry.
        """
        with self._lock:
            record = self.creations.get(creation_id)
            return record.copy() if record is not None else None

    def get_creation_ids_by_creator(self, creator: str) -> list[str]:
        """Get the IDs a creator registered, oldest first."""
        with self._lock:
            return list(self.creations_by_creator.get(creator, []))

    def exists(self, creation_id: str) -> bool:
        with self._lock:
            return creation_id in self.creations

    def count(self) -> int:
        """Get total number of registered creations."""
        with self._lock:
            return len(self.creations)

    # ===== SNAPSHOTS =====

    def to_snapshot(self) -> dict[str, Any]:
        """Export state as a JSON-safe dict."""
        with self._lock:
            return {
                "creations": {
                    cid: record.to_dict() for cid, record in self.creations.items()
                },
                "creations_by_creator": {
                    creator: list(ids) for creator, ids in self.creations_by_creator.items()
                },
            }

    @classmethod
    def from_snapshot(
        cls,
        snapshot: dict[str, Any],
        event_logger: "EventLogger | None" = None,
    ) -> CreationRegistry:
        """Rebuild a registry from to_snapshot() output.

        Raises:
            ValueError: If the reverse index does not list every creation
                exactly once under its creator
            KeyError: If a record is missing a field
        """
        creations = {
            str(cid): CreationRecord.from_dict(data)
            for cid, data in snapshot.get("creations", {}).items()
        }
        by_creator = {
            str(creator): [str(cid) for cid in ids]
            for creator, ids in snapshot.get("creations_by_creator", {}).items()
        }

        seen: set[str] = set()
        for creator, ids in by_creator.items():
            for cid in ids:
                if cid in seen:
                    raise ValueError(f"Creation '{cid}' listed more than once in creator index")
                seen.add(cid)
                record = creations.get(cid)
                if record is None:
                    raise ValueError(f"Creator index lists unknown creation '{cid}'")
                if record.creator != creator:
                    raise ValueError(
                        f"Creation '{cid}' indexed under '{creator}' "
                        f"but created by '{record.creator}'"
                    )
        missing = set(creations) - seen
        if missing:
            raise ValueError(f"Creations missing from creator index: {sorted(missing)}")

        registry = cls(event_logger=event_logger)
        registry.creations = creations
        registry.creations_by_creator = by_creator
        return registry
