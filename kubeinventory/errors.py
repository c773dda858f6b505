"""Exceptions that propagate out of a poll cycle.

Per-collector failures never appear here: they are reported by the collector
itself through the sink's error channel.
"""

from __future__ import annotations


class InventoryError(Exception):
    """Base class for errors that fail a whole poll cycle."""


class ClientInitError(InventoryError):
    """Raised when the Kubernetes API client cannot be constructed."""


class UnknownResourceError(InventoryError):
    """Raised when the include list names a resource kind with no collector."""

    def __init__(self, names: list[str], available: list[str]) -> None:
        super().__init__(
            f"unknown resource kind(s) in include list: {', '.join(names)}. "
            f"Available: {', '.join(available)}"
        )
        self.names = names
        self.available = available
