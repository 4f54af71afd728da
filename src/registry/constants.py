"""Centralized constants for the registry module.

Error codes and event names live here to avoid string literals
scattered across modules.
"""

# Numeric error codes as returned by the on-chain contract
ERR_NOT_AUTHORIZED = 100
ERR_ALREADY_REGISTERED = 101
ERR_NOT_FOUND = 102

# Event types written to the JSONL event log
EVENT_CREATION_REGISTERED = "creation_registered"
EVENT_CREATION_UPDATED = "creation_updated"
EVENT_REGISTRY_ERROR = "registry_error"

# Checkpoint format version
CHECKPOINT_VERSION = 1

# Sidecar file locked while a checkpoint is loaded, changed and saved
LOCK_SUFFIX = ".lock"
