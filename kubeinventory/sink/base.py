"""Metric sink interface.

A sink receives records from many concurrently running collectors.  It is
append-only: nothing in kubeinventory reads back what was written.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from datetime import UTC, datetime

from kubeinventory.models.metrics import FieldValue, MetricRecord


class MetricSink(ABC):
    """Abstract base class for every metric sink."""

    def add_fields(
        self,
        measurement: str,
        fields: Mapping[str, FieldValue],
        tags: Mapping[str, str] | None = None,
        timestamp: datetime | None = None,
    ) -> None:
        """Build a MetricRecord and hand it to :meth:`write`.

        A missing *timestamp* is taken as the current UTC time.
        """
        self.write(
            MetricRecord(
                measurement=measurement,
                fields=dict(fields),
                tags=dict(tags or {}),
                timestamp=timestamp or datetime.now(tz=UTC),
            )
        )

    @abstractmethod
    def write(self, record: MetricRecord) -> None:
        """Accept one record.  Must not block on the event loop."""

    @abstractmethod
    def add_error(self, error: BaseException) -> None:
        """Report a collection error that did not abort the poll."""
