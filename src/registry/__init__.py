# Creation registry package
from .creation_registry import CreationRegistry
from .models import CreationRecord, RegistryResult
from .errors import ErrorCategory, ErrorResponse, RegistryError, error_response
from .context import ExecutionContext
from .logger import EventLogger
from .checkpoint import (
    CheckpointData, locked_checkpoint, save_checkpoint, load_checkpoint, restore_registry,
)

__all__ = [
    "CreationRegistry",
    "CreationRecord", "RegistryResult",
    "ErrorCategory", "ErrorResponse", "RegistryError", "error_response",
    "ExecutionContext",
    "EventLogger",
    "CheckpointData", "locked_checkpoint", "save_checkpoint", "load_checkpoint",
    "restore_registry",
]
