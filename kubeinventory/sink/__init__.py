"""Metric sinks for kubeinventory.

Exports:
    MetricSink       -- ABC every sink implements (write + add_error).
    MemorySink       -- Keeps records and errors in lists.
    LineProtocolSink -- Streams records as InfluxDB line protocol.
"""

from kubeinventory.sink.base import MetricSink
from kubeinventory.sink.line_protocol import LineProtocolSink, format_record
from kubeinventory.sink.memory import MemorySink

__all__ = ["LineProtocolSink", "MemorySink", "MetricSink", "format_record"]
