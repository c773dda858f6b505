"""Prometheus self-metrics for the inventory poller."""

from __future__ import annotations

from prometheus_client import Counter, Histogram, start_http_server

polls_total = Counter(
    "kubeinventory_polls_total",
    "Poll cycles by outcome.",
    ["outcome"],
)

collector_runs_total = Counter(
    "kubeinventory_collector_runs_total",
    "Collector executions by resource kind and outcome.",
    ["resource", "outcome"],
)

collector_duration_seconds = Histogram(
    "kubeinventory_collector_duration_seconds",
    "Wall-clock time spent in a single collector run.",
    ["resource"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)

records_total = Counter(
    "kubeinventory_records_total",
    "Metric records emitted by measurement.",
    ["measurement"],
)


def serve_metrics(port: int) -> None:
    """Expose the default registry over HTTP on *port* (0 disables it)."""
    if port:
        start_http_server(port)
