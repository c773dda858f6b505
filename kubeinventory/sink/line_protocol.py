"""InfluxDB line protocol sink.

Writes one line per record::

    kubernetes_node,node_name=n1 capacity_pods=110i,capacity_cpu_cores=4.0 1700000000000000000

Tags are sorted by key.  Integers carry the ``i`` suffix, strings are
double-quoted, timestamps are nanoseconds since the epoch.
"""

from __future__ import annotations

import sys
from typing import TextIO

import structlog

from kubeinventory.models.metrics import FieldValue, MetricRecord, to_ns
from kubeinventory.sink.base import MetricSink

_log = structlog.get_logger(component="sink.line_protocol")


def _escape_measurement(value: str) -> str:
    return value.replace(",", r"\,").replace(" ", r"\ ")


def _escape_key(value: str) -> str:
    return value.replace("\\", "\\\\").replace(",", r"\,").replace("=", r"\=").replace(" ", r"\ ")


def _format_field(value: FieldValue) -> str:
    # bool first: bool is an int subclass
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return f"{value}i"
    if isinstance(value, float):
        return repr(value)
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def format_record(record: MetricRecord) -> str:
    """Render *record* as a single line-protocol line (no trailing newline)."""
    head = _escape_measurement(record.measurement)
    for key in sorted(record.tags):
        value = record.tags[key]
        if value == "":
            continue
        head += f",{_escape_key(key)}={_escape_key(value)}"
    fields = ",".join(f"{_escape_key(key)}={_format_field(value)}" for key, value in record.fields.items())
    return f"{head} {fields} {to_ns(record.timestamp)}"


class LineProtocolSink(MetricSink):
    """Writes records to a text stream as they arrive.

    Records without fields are dropped: line protocol requires at least one.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream or sys.stdout
        self.error_count = 0

    def write(self, record: MetricRecord) -> None:
        if not record.fields:
            _log.debug("record_without_fields_dropped", measurement=record.measurement)
            return
        self._stream.write(format_record(record) + "\n")

    def add_error(self, error: BaseException) -> None:
        self.error_count += 1
        _log.error("collection_error", error=str(error), error_type=type(error).__name__)
