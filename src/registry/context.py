"""Ambient execution context for registry calls.

The host environment (a ledger node in production) supplies the caller
identity and the current block height for each call. ExecutionContext
is a small stand-in for that host so tests and the CLI can drive the
registry the same way.
"""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass
class ExecutionContext:
    """Caller identity and block height for the current call."""

    sender: str
    block_height: int = 0

    def advance(self, blocks: int = 1) -> int:
        """Advance the block height and return the new value.

        Raises:
            ValueError: If blocks is negative (height never decreases)
        """
        if blocks < 0:
            raise ValueError(f"Block height cannot go backwards (got {blocks})")
        self.block_height += blocks
        return self.block_height

    def as_sender(self, sender: str) -> ExecutionContext:
        """Return a copy acting as a different sender at the same height."""
        return replace(self, sender=sender)
