"""In-memory sink that keeps every record and error in order of arrival."""

from __future__ import annotations

from kubeinventory.models.metrics import MetricRecord
from kubeinventory.sink.base import MetricSink


class MemorySink(MetricSink):
    """Collects records and errors in lists.

    All collectors run on one event loop, so plain list appends are safe.
    """

    def __init__(self) -> None:
        self.records: list[MetricRecord] = []
        self.errors: list[BaseException] = []

    def write(self, record: MetricRecord) -> None:
        self.records.append(record)

    def add_error(self, error: BaseException) -> None:
        self.errors.append(error)

    def measurements(self) -> set[str]:
        """Return the distinct measurement names received so far."""
        return {record.measurement for record in self.records}

    def by_measurement(self, measurement: str) -> list[MetricRecord]:
        return [record for record in self.records if record.measurement == measurement]
