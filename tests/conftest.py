"""Pytest fixtures for creation registry tests.

Common fixtures for driving the registry with an explicit caller and
block height.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Iterator

import pytest
from dotenv import load_dotenv

from src import config as config_module
from src.registry import CreationRegistry, EventLogger, ExecutionContext

# Load environment variables from .env before any tests run
load_dotenv()


ALICE = "ST1PQHQKV0RJXZFY1DGX8MNSNYVE3VGZJSRTPGZGM"
BOB = "ST2CY5V39NHDPWSXMW9QDT3HC3GD6Q6XX4CFRK9AG"


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers",
        "scenario(name): mark test as covering a named registry scenario. "
        "Usage: @pytest.mark.scenario('A')"
    )


@pytest.fixture(autouse=True)
def fresh_config() -> Iterator[None]:
    """Reload config from disk for every test so overrides don't leak."""
    config_module.reset_config()
    yield
    config_module.reset_config()


@pytest.fixture
def alice() -> str:
    return ALICE


@pytest.fixture
def bob() -> str:
    return BOB


@pytest.fixture
def content_hash() -> bytes:
    """A 32-byte sha256 digest."""
    return hashlib.sha256(b"test-hash").digest()


@pytest.fixture
def registry() -> CreationRegistry:
    """Create a fresh CreationRegistry for each test."""
    return CreationRegistry()


@pytest.fixture
def ctx() -> ExecutionContext:
    """Execution context acting as ALICE at block height 100."""
    return ExecutionContext(sender=ALICE, block_height=100)


@pytest.fixture
def event_logger(tmp_path: Path) -> EventLogger:
    """Event logger writing to a temp file."""
    return EventLogger(output_file=str(tmp_path / "events.jsonl"))


@pytest.fixture
def logged_registry(event_logger: EventLogger) -> CreationRegistry:
    """Registry with an attached event logger."""
    return CreationRegistry(event_logger=event_logger)
