"""Data types for the creation registry."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from .errors import RegistryError, error_response


@dataclass
class CreationRecord:
    """A registered creation.

    ``creator``, ``content_hash`` and ``timestamp`` are fixed at
    registration. Only ``title``, ``description`` and ``category`` may be
    changed afterwards, and only by the creator.
    """

    creator: str
    title: str
    description: str
    content_hash: bytes
    timestamp: int  # Block height at registration
    category: str

    def copy(self) -> CreationRecord:
        return replace(self)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-safe dict (content_hash as hex)."""
        return {
            "creator": self.creator,
            "title": self.title,
            "description": self.description,
            "content_hash": self.content_hash.hex(),
            "timestamp": self.timestamp,
            "category": self.category,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CreationRecord:
        """Rebuild a record from to_dict() output.

        Raises:
            KeyError: If a field is missing
            ValueError: If content_hash is not valid hex
        """
        return cls(
            creator=str(data["creator"]),
            title=str(data["title"]),
            description=str(data["description"]),
            content_hash=bytes.fromhex(data["content_hash"]),
            timestamp=int(data["timestamp"]),
            category=str(data["category"]),
        )


@dataclass(frozen=True)
class RegistryResult:
    """Tagged result of a registry operation.

    Exactly one of ``value`` (on success) or ``error`` (on failure) is
    meaningful. Callers must check ``success`` or ``error``.
    """

    success: bool
    value: Any = None
    error: RegistryError | None = None

    @classmethod
    def ok(cls, value: Any = True) -> RegistryResult:
        return cls(success=True, value=value)

    @classmethod
    def err(cls, error: RegistryError) -> RegistryResult:
        return cls(success=False, error=error)

    def to_dict(self) -> dict[str, Any]:
        if self.success:
            return {"success": True, "value": self.value}
        if self.error is None:
            raise RuntimeError("Failed RegistryResult has no error kind")
        return dict(error_response(self.error))
