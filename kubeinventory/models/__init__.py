"""Core data structures for kubeinventory."""

from kubeinventory.models.config import InventoryConfig, LogConfig, TLSConfig
from kubeinventory.models.metrics import FieldValue, MetricRecord, to_ns

__all__ = [
    "FieldValue",
    "InventoryConfig",
    "LogConfig",
    "MetricRecord",
    "TLSConfig",
    "to_ns",
]
