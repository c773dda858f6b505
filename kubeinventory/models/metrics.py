"""Metric record data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

FieldValue = int | float | bool | str


@dataclass(frozen=True)
class MetricRecord:
    """A single timestamped measurement produced by a collector.

    Owned by the sink once emitted: collectors and the orchestrator never
    keep a reference after handing it off.
    """

    measurement: str
    fields: dict[str, FieldValue]
    timestamp: datetime
    tags: dict[str, str] = field(default_factory=dict)


def to_ns(moment: datetime | None) -> int:
    """Nanoseconds since the epoch, 0 for a missing timestamp."""
    if moment is None:
        return 0
    return int(moment.timestamp()) * 1_000_000_000 + moment.microsecond * 1_000
