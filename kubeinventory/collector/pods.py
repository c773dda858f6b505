"""Pod container collector.

Emits one ``kubernetes_pod_container`` record per container status.  When
``max_age`` is set, pods that already finished (phase Succeeded or Failed)
and were created longer ago than ``max_age`` are skipped.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

from kubeinventory.collector.base import (
    PollContext,
    emit,
    int_or_zero,
    millicores,
    quantity_from,
    reports_errors,
)
from kubeinventory.models.config import InventoryConfig
from kubeinventory.sink.base import MetricSink

POD_CONTAINER_MEASUREMENT = "kubernetes_pod_container"

_TERMINAL_PHASES = frozenset({"Succeeded", "Failed"})

STATE_RUNNING = 0
STATE_TERMINATED = 1
STATE_WAITING = 2
STATE_UNKNOWN = 3


def is_stale(pod: Any, now: datetime, max_age: float) -> bool:
    """True for a finished pod created more than *max_age* seconds before *now*."""
    if max_age <= 0:
        return False
    phase = pod.status.phase if pod.status else None
    if phase not in _TERMINAL_PHASES:
        return False
    created = pod.metadata.creation_timestamp
    if created is None:
        return False
    return now - created > timedelta(seconds=max_age)


def _container_state(state: Any) -> tuple[str, int, str]:
    """Return (state name, state code, terminated reason)."""
    if state is None:
        return "unknown", STATE_UNKNOWN, ""
    if state.running is not None:
        return "running", STATE_RUNNING, ""
    if state.terminated is not None:
        return "terminated", STATE_TERMINATED, state.terminated.reason or ""
    if state.waiting is not None:
        return "waiting", STATE_WAITING, ""
    return "unknown", STATE_UNKNOWN, ""


def _container_resources(pod: Any) -> dict[str, Any]:
    containers = pod.spec.containers if pod.spec and pod.spec.containers else []
    return {container.name: container.resources for container in containers}


@reports_errors("pods")
async def collect_pods(ctx: PollContext, sink: MetricSink, config: InventoryConfig) -> None:
    for pod in await ctx.client.list_pods():
        if is_stale(pod, ctx.started_at, config.max_age):
            continue
        resources = _container_resources(pod)
        statuses = (pod.status.container_statuses if pod.status else None) or []
        for cs in statuses:
            state, code, reason = _container_state(cs.state)
            container_res = resources.get(cs.name)
            requests = container_res.requests if container_res else None
            limits = container_res.limits if container_res else None
            fields: dict[str, int | str] = {
                "restarts_total": int_or_zero(cs.restart_count),
                "state_code": code,
                "resource_requests_millicpu_units": millicores(quantity_from(requests, "cpu")),
                "resource_requests_memory_bytes": int(quantity_from(requests, "memory")),
                "resource_limits_millicpu_units": millicores(quantity_from(limits, "cpu")),
                "resource_limits_memory_bytes": int(quantity_from(limits, "memory")),
            }
            if reason:
                fields["terminated_reason"] = reason
            emit(
                sink,
                POD_CONTAINER_MEASUREMENT,
                fields,
                {
                    "namespace": pod.metadata.namespace or "",
                    "pod_name": pod.metadata.name,
                    "node_name": (pod.spec.node_name if pod.spec else None) or "",
                    "container_name": cs.name,
                    "state": state,
                    "readiness": "ready" if cs.ready else "unready",
                },
                ctx.started_at,
            )
