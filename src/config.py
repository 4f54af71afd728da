"""Configuration loader for the Creation Registry

All configurable values come from config/config.yaml.

Configuration is validated at load time using Pydantic.
Typos and invalid values fail fast with clear error messages.

Usage:
    from src.config import load_config, get, get_validated_config

    # Load and validate (call once at startup)
    load_config("config/config.yaml")

    # Get values by dot-path
    sender = get("registry.default_sender")

    # Or use the typed config object (preferred)
    config = get_validated_config()
    sender = config.registry.default_sender
"""

from __future__ import annotations

import yaml
from pathlib import Path
from typing import Any

from .config_schema import AppConfig, load_validated_config


# Global config instances
_config: dict[str, Any] | None = None
_validated_config: AppConfig | None = None

# Default config path
DEFAULT_CONFIG_PATH: Path = Path(__file__).parent.parent / "config" / "config.yaml"


def load_config(config_path: str | None = None) -> dict[str, Any]:
    """Load and validate configuration from YAML file.

    Args:
        config_path: Path to config file. Defaults to config/config.yaml.

    Returns:
        Configuration dictionary.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        pydantic.ValidationError: If config is invalid.
    """
    global _config, _validated_config

    path: Path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    _validated_config = load_validated_config(path)

    with open(path) as f:
        loaded: Any = yaml.safe_load(f)
        if not isinstance(loaded, dict):
            loaded = {}
        _config = loaded

    return _config


def get_config() -> dict[str, Any]:
    """Get the loaded configuration dict. Loads default if not already loaded.

    For typed access, use get_validated_config() instead.
    """
    global _config
    if _config is None:
        load_config()
    if _config is None:
        raise RuntimeError("Config failed to load. Call load_config() first.")
    return _config


def get_validated_config() -> AppConfig:
    """Get the validated configuration object.

    Loads default config if not already loaded.
    """
    global _validated_config
    if _validated_config is None:
        load_config()
    if _validated_config is None:
        raise RuntimeError("Validated config failed to load. Call load_config() first.")
    return _validated_config


def get(key: str, default: Any = None) -> Any:
    """Get a config value by dot-separated key path.

    Falls back to the schema default when the YAML file leaves the key
    out, then to ``default``.

    Examples:
        get("registry.checkpoint_file")
        get("logging.default_recent")
    """
    value: Any = get_config()
    for k in key.split("."):
        if isinstance(value, dict) and k in value:
            value = value[k]
        else:
            break
    else:
        return value

    value = get_validated_config().model_dump()
    for k in key.split("."):
        if isinstance(value, dict) and k in value:
            value = value[k]
        else:
            return default
    return value


def reset_config() -> None:
    """Forget the loaded config so the next access reloads it. Mainly for tests."""
    global _config, _validated_config
    _config = None
    _validated_config = None
