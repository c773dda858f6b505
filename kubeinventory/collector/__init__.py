"""Collector package for kubeinventory.

Provides the per-resource collector routines, the registry that names them,
the selector that filters them per poll, and the orchestrator that runs them
concurrently.

Submodules
----------
base         -- PollContext, reports_errors decorator, quantity helpers.
registry     -- CollectorRegistry and build_default_registry().
selector     -- select_collectors(): include/exclude resolution.
orchestrator -- InventoryPoller: client lifecycle and fan-out/join-all.
nodes, pods, workloads, volumes -- per-resource collector routines.
"""

from kubeinventory.collector.base import Collector, CollectorError, PollContext, reports_errors
from kubeinventory.collector.orchestrator import InventoryPoller
from kubeinventory.collector.registry import CollectorRegistry, build_default_registry
from kubeinventory.collector.selector import select_collectors

__all__ = [
    "Collector",
    "CollectorError",
    "CollectorRegistry",
    "InventoryPoller",
    "PollContext",
    "build_default_registry",
    "reports_errors",
    "select_collectors",
]
