"""Workload controller collectors: deployments, daemonsets and statefulsets.

Records are timestamped with the poll start time; the object's creation time
is carried in the ``created`` field as nanoseconds since the epoch.
"""

from __future__ import annotations

from kubeinventory.collector.base import PollContext, emit, int_or_zero, reports_errors
from kubeinventory.models.config import InventoryConfig
from kubeinventory.models.metrics import to_ns
from kubeinventory.sink.base import MetricSink

DEPLOYMENT_MEASUREMENT = "kubernetes_deployment"
DAEMONSET_MEASUREMENT = "kubernetes_daemonset"
STATEFULSET_MEASUREMENT = "kubernetes_statefulset"


@reports_errors("deployments")
async def collect_deployments(ctx: PollContext, sink: MetricSink, config: InventoryConfig) -> None:
    for deployment in await ctx.client.list_deployments():
        meta = deployment.metadata
        status = deployment.status
        emit(
            sink,
            DEPLOYMENT_MEASUREMENT,
            {
                "replicas_available": int_or_zero(status.available_replicas if status else None),
                "replicas_unavailable": int_or_zero(status.unavailable_replicas if status else None),
                "created": to_ns(meta.creation_timestamp),
            },
            {"deployment_name": meta.name, "namespace": meta.namespace or ""},
            ctx.started_at,
        )


@reports_errors("daemonsets")
async def collect_daemonsets(ctx: PollContext, sink: MetricSink, config: InventoryConfig) -> None:
    for daemonset in await ctx.client.list_daemonsets():
        meta = daemonset.metadata
        status = daemonset.status
        fields = {
            "generation": int_or_zero(meta.generation),
            "created": to_ns(meta.creation_timestamp),
        }
        for attr in (
            "current_number_scheduled",
            "desired_number_scheduled",
            "number_available",
            "number_misscheduled",
            "number_ready",
            "number_unavailable",
            "updated_number_scheduled",
        ):
            fields[attr] = int_or_zero(getattr(status, attr, None))
        emit(
            sink,
            DAEMONSET_MEASUREMENT,
            fields,
            {"daemonset_name": meta.name, "namespace": meta.namespace or ""},
            ctx.started_at,
        )


@reports_errors("statefulsets")
async def collect_statefulsets(ctx: PollContext, sink: MetricSink, config: InventoryConfig) -> None:
    for statefulset in await ctx.client.list_statefulsets():
        meta = statefulset.metadata
        status = statefulset.status
        spec = statefulset.spec
        emit(
            sink,
            STATEFULSET_MEASUREMENT,
            {
                "created": to_ns(meta.creation_timestamp),
                "generation": int_or_zero(meta.generation),
                "replicas": int_or_zero(getattr(status, "replicas", None)),
                "replicas_current": int_or_zero(getattr(status, "current_replicas", None)),
                "replicas_ready": int_or_zero(getattr(status, "ready_replicas", None)),
                "replicas_updated": int_or_zero(getattr(status, "updated_replicas", None)),
                "spec_replicas": int_or_zero(getattr(spec, "replicas", None)),
                "observed_generation": int_or_zero(getattr(status, "observed_generation", None)),
            },
            {"statefulset_name": meta.name, "namespace": meta.namespace or ""},
            ctx.started_at,
        )
