"""Shared fixtures for kubeinventory tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
import structlog

from kubeinventory.models.config import InventoryConfig
from kubeinventory.sink.memory import MemorySink


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Undo any structlog.configure() a test triggered (CLI, app start)."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def config() -> InventoryConfig:
    return InventoryConfig(url="https://127.0.0.1:6443", bearer_token_string="abc_123")


@pytest.fixture
def sink() -> MemorySink:
    return MemorySink()
