"""Closed error taxonomy for the creation registry.

Registry operations never raise for domain failures. They return a
RegistryResult tagged with one of the three RegistryError kinds, and
callers switch on the kind (or its numeric code).

Usage:
    from src.registry.errors import RegistryError, error_response

    result = registry.update("c1", "T2", "D2", "craft", caller="bob")
    if result.error is RegistryError.NOT_AUTHORIZED:
        ...

    error_response(RegistryError.NOT_FOUND, creation_id="c1")
    # {"success": False, "error": "...", "code": 102, ...}
"""

from dataclasses import dataclass
from enum import Enum

from .constants import ERR_ALREADY_REGISTERED, ERR_NOT_AUTHORIZED, ERR_NOT_FOUND


class ErrorCategory(str, Enum):
    """Categories for error classification.

    - PERMISSION: Caller is not the creator
    - RESOURCE: Creation not found, already exists
    """

    PERMISSION = "permission"
    RESOURCE = "resource"


class RegistryError(str, Enum):
    """The three failure kinds a registry operation can return.

    Values are stable machine-readable names; ``code`` gives the numeric
    code used by the on-chain contract.
    """

    NOT_AUTHORIZED = "not_authorized"
    ALREADY_REGISTERED = "already_registered"
    NOT_FOUND = "not_found"

    @property
    def code(self) -> int:
        return _CODES[self]

    @property
    def category(self) -> ErrorCategory:
        if self is RegistryError.NOT_AUTHORIZED:
            return ErrorCategory.PERMISSION
        return ErrorCategory.RESOURCE

    @property
    def message(self) -> str:
        return _MESSAGES[self]

    @classmethod
    def from_code(cls, code: int) -> "RegistryError":
        """Look up an error kind by its numeric code.

        Raises:
            ValueError: If the code is not one of the registry's codes
        """
        for kind, kind_code in _CODES.items():
            if kind_code == code:
                return kind
        raise ValueError(f"Unknown registry error code: {code}")


_CODES: dict[RegistryError, int] = {
    RegistryError.NOT_AUTHORIZED: ERR_NOT_AUTHORIZED,
    RegistryError.ALREADY_REGISTERED: ERR_ALREADY_REGISTERED,
    RegistryError.NOT_FOUND: ERR_NOT_FOUND,
}

_MESSAGES: dict[RegistryError, str] = {
    RegistryError.NOT_AUTHORIZED: "Only the creator can update this creation",
    RegistryError.ALREADY_REGISTERED: "Creation ID is already registered",
    RegistryError.NOT_FOUND: "Creation not found",
}


@dataclass
class ErrorResponse:
    """Standardized error response.

    All error responses include:
    - success: Always False
    - error: Human-readable message
    - code: Numeric registry error code
    - kind: Machine-readable error name
    - category: Error category (permission, resource)
    - retriable: Always False; a failed call leaves state unchanged, so
      retrying the same inputs gives the same error
    - details: Optional additional context
    """

    success: bool = False
    error: str = ""
    code: int = 0
    kind: str = ""
    category: str = ""
    retriable: bool = False
    details: dict[str, object] | None = None

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for serialization."""
        result: dict[str, object] = {
            "success": self.success,
            "error": self.error,
            "code": self.code,
            "kind": self.kind,
            "category": self.category,
            "retriable": self.retriable,
        }
        if self.details:
            result["details"] = self.details
        return result


def error_response(error: RegistryError, **details: object) -> dict[str, object]:
    """Create an error response dict for a registry error.

    Args:
        error: The registry error kind
        **details: Additional context (e.g., creation_id="c1")

    Returns:
        Error response dict with success=False
    """
    return ErrorResponse(
        error=error.message,
        code=error.code,
        kind=error.value,
        category=error.category.value,
        retriable=False,
        details=dict(details) if details else None,
    ).to_dict()
