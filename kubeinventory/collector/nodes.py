"""Node inventory collector (cluster scoped)."""

from __future__ import annotations

from typing import Any

from kubeinventory.collector.base import PollContext, emit, millicores, quantity_from, reports_errors
from kubeinventory.models.config import InventoryConfig
from kubeinventory.sink.base import MetricSink

NODE_MEASUREMENT = "kubernetes_node"


def _resource_fields(prefix: str, resources: dict[str, Any] | None) -> dict[str, int | float]:
    cpu = quantity_from(resources, "cpu")
    return {
        f"{prefix}_cpu_cores": float(cpu),
        f"{prefix}_millicpu_cores": millicores(cpu),
        f"{prefix}_memory_bytes": int(quantity_from(resources, "memory")),
        f"{prefix}_pods": int(quantity_from(resources, "pods")),
    }


@reports_errors("nodes")
async def collect_nodes(ctx: PollContext, sink: MetricSink, config: InventoryConfig) -> None:
    for node in await ctx.client.list_nodes():
        status = node.status
        fields: dict[str, int | float] = {}
        fields.update(_resource_fields("capacity", status.capacity if status else None))
        fields.update(_resource_fields("allocatable", status.allocatable if status else None))
        emit(sink, NODE_MEASUREMENT, fields, {"node_name": node.metadata.name}, ctx.started_at)
