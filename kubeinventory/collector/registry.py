"""Named set of collector routines.

The registry is an explicit value handed to the orchestrator.  It is filled
once at construction and then only read: poll-time filtering happens in
:func:`kubeinventory.collector.selector.select_collectors`, which builds a
separate working set.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping

from kubeinventory.collector.base import Collector
from kubeinventory.collector.nodes import collect_nodes
from kubeinventory.collector.pods import collect_pods
from kubeinventory.collector.volumes import collect_persistent_volume_claims, collect_persistent_volumes
from kubeinventory.collector.workloads import collect_daemonsets, collect_deployments, collect_statefulsets


class CollectorRegistry(Mapping[str, Collector]):
    """Read-only mapping of resource name -> collector routine."""

    def __init__(self, collectors: Mapping[str, Collector] | None = None) -> None:
        self._collectors: dict[str, Collector] = {}
        for name, fn in (collectors or {}).items():
            self.register(name, fn)

    def register(self, name: str, fn: Collector) -> None:
        """Add a collector.  Names must be unique and non-empty."""
        if not name:
            raise ValueError("Collector name must not be empty")
        if name in self._collectors:
            raise ValueError(f"Collector '{name}' is already registered")
        self._collectors[name] = fn

    def names(self) -> list[str]:
        """Registered names in sorted order."""
        return sorted(self._collectors)

    def __getitem__(self, name: str) -> Collector:
        return self._collectors[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._collectors)

    def __len__(self) -> int:
        return len(self._collectors)

    def __repr__(self) -> str:
        return f"CollectorRegistry({self.names()})"


def build_default_registry() -> CollectorRegistry:
    """Return a fresh registry holding every built-in collector."""
    return CollectorRegistry(
        {
            "daemonsets": collect_daemonsets,
            "deployments": collect_deployments,
            "nodes": collect_nodes,
            "persistentvolumes": collect_persistent_volumes,
            "persistentvolumeclaims": collect_persistent_volume_claims,
            "pods": collect_pods,
            "statefulsets": collect_statefulsets,
        }
    )
