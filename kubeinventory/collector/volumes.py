"""Persistent volume and persistent volume claim collectors."""

from __future__ import annotations

from kubeinventory.collector.base import PollContext, emit, reports_errors
from kubeinventory.models.config import InventoryConfig
from kubeinventory.sink.base import MetricSink

PV_MEASUREMENT = "kubernetes_persistentvolume"
PVC_MEASUREMENT = "kubernetes_persistentvolumeclaim"

# phase (lower-cased) -> phase_type code; anything else maps to the fallback
_PV_PHASES = {"bound": 0, "failed": 1, "pending": 2, "released": 3, "available": 4}
_PV_PHASE_OTHER = 5
_PVC_PHASES = {"bound": 0, "lost": 1, "pending": 2}
_PVC_PHASE_OTHER = 3


@reports_errors("persistentvolumes")
async def collect_persistent_volumes(ctx: PollContext, sink: MetricSink, config: InventoryConfig) -> None:
    for pv in await ctx.client.list_persistent_volumes():
        phase = (pv.status.phase if pv.status else None) or ""
        storage_class = (pv.spec.storage_class_name if pv.spec else None) or ""
        emit(
            sink,
            PV_MEASUREMENT,
            {"phase_type": _PV_PHASES.get(phase.lower(), _PV_PHASE_OTHER)},
            {"pv_name": pv.metadata.name, "phase": phase, "storageclass": storage_class},
            ctx.started_at,
        )


@reports_errors("persistentvolumeclaims")
async def collect_persistent_volume_claims(ctx: PollContext, sink: MetricSink, config: InventoryConfig) -> None:
    for pvc in await ctx.client.list_persistent_volume_claims():
        phase = (pvc.status.phase if pvc.status else None) or ""
        storage_class = (pvc.spec.storage_class_name if pvc.spec else None) or ""
        emit(
            sink,
            PVC_MEASUREMENT,
            {"phase_type": _PVC_PHASES.get(phase.lower(), _PVC_PHASE_OTHER)},
            {
                "pvc_name": pvc.metadata.name,
                "namespace": pvc.metadata.namespace or "",
                "phase": phase,
                "storageclass": storage_class,
            },
            ctx.started_at,
        )
