"""Creation Registry source package.

This package contains:
- config: Configuration loading and management
- registry: Creation registry, error taxonomy, event log, checkpoints
"""

from __future__ import annotations

__all__: list[str] = []
