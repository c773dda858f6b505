"""Shared building blocks for collector routines.

Every collector routine has the shape::

    async def collect_x(ctx: PollContext, sink: MetricSink, config: InventoryConfig) -> None

and is wrapped with :func:`reports_errors`, which turns any failure into a
log line plus a ``sink.add_error`` call.  The orchestrator never inspects a
collector's outcome.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal, InvalidOperation
from typing import Any

import structlog

from kubeinventory.models.config import InventoryConfig
from kubeinventory.models.metrics import FieldValue
from kubeinventory.observability.metrics import (
    collector_duration_seconds,
    collector_runs_total,
    records_total,
)
from kubeinventory.sink.base import MetricSink

_log = structlog.get_logger(component="collector")


@dataclass(frozen=True)
class PollContext:
    """Per-poll state shared read-only by every collector of that poll."""

    client: Any
    started_at: datetime = field(default_factory=lambda: datetime.now(tz=UTC))


Collector = Callable[[PollContext, MetricSink, InventoryConfig], Awaitable[None]]


class CollectorError(Exception):
    """Wraps a failure inside one collector before it reaches the sink."""

    def __init__(self, resource: str, cause: BaseException) -> None:
        super().__init__(f"error collecting {resource}: {cause}")
        self.resource = resource
        self.cause = cause


def reports_errors(resource: str) -> Callable[[Collector], Collector]:
    """Make a collector routine report its own failures instead of raising.

    Cancellation is not intercepted.
    """

    def decorator(fn: Collector) -> Collector:
        @functools.wraps(fn)
        async def wrapper(ctx: PollContext, sink: MetricSink, config: InventoryConfig) -> None:
            start = time.monotonic()
            try:
                await fn(ctx, sink, config)
            except Exception as exc:  # noqa: BLE001
                collector_runs_total.labels(resource=resource, outcome="error").inc()
                _log.warning(
                    "collector_failed",
                    resource=resource,
                    error=str(exc),
                    status=getattr(exc, "status", None),
                )
                sink.add_error(CollectorError(resource, exc))
            else:
                collector_runs_total.labels(resource=resource, outcome="success").inc()
            finally:
                collector_duration_seconds.labels(resource=resource).observe(time.monotonic() - start)

        return wrapper

    return decorator


def emit(
    sink: MetricSink,
    measurement: str,
    fields: Mapping[str, FieldValue],
    tags: Mapping[str, str],
    timestamp: datetime,
) -> None:
    """Hand one record to the sink and count it."""
    sink.add_fields(measurement, fields, tags, timestamp)
    records_total.labels(measurement=measurement).inc()


# ---------------------------------------------------------------------------
# Value helpers
# ---------------------------------------------------------------------------

_BINARY_SUFFIXES = {
    "Ki": Decimal(2) ** 10,
    "Mi": Decimal(2) ** 20,
    "Gi": Decimal(2) ** 30,
    "Ti": Decimal(2) ** 40,
    "Pi": Decimal(2) ** 50,
    "Ei": Decimal(2) ** 60,
}
_DECIMAL_SUFFIXES = {
    "n": Decimal("1e-9"),
    "u": Decimal("1e-6"),
    "m": Decimal("1e-3"),
    "": Decimal(1),
    "k": Decimal("1e3"),
    "M": Decimal("1e6"),
    "G": Decimal("1e9"),
    "T": Decimal("1e12"),
    "P": Decimal("1e15"),
    "E": Decimal("1e18"),
}


def parse_quantity(value: object) -> Decimal:
    """Parse a Kubernetes resource quantity (``500m``, ``128Mi``, ``2``, ``1e3``).

    Raises:
        ValueError: if *value* is not a valid quantity.
    """
    text = str(value).strip()
    suffix = text[-2:]
    if isinstance(value, int | float):
        number, multiplier = text, Decimal(1)
    elif suffix in _BINARY_SUFFIXES:
        number, multiplier = text[:-2], _BINARY_SUFFIXES[suffix]
    elif text[-1:] in _DECIMAL_SUFFIXES and not text[-1:].isdigit():
        number, multiplier = text[:-1], _DECIMAL_SUFFIXES[text[-1:]]
    else:
        number, multiplier = text, Decimal(1)
    try:
        result = Decimal(number) * multiplier
    except InvalidOperation as exc:
        raise ValueError(f"invalid quantity: {value!r}") from exc
    if not result.is_finite():
        raise ValueError(f"invalid quantity: {value!r}")
    return result


def quantity_from(resources: Mapping[str, Any] | None, key: str) -> Decimal:
    """Return ``resources[key]`` as a Decimal, 0 when absent."""
    if not resources or resources.get(key) is None:
        return Decimal(0)
    return parse_quantity(resources[key])


def millicores(quantity: Decimal) -> int:
    return int(quantity * 1000)


def int_or_zero(value: int | None) -> int:
    return int(value) if value is not None else 0
