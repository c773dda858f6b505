"""Tests for CollectorRegistry and the default registry."""

from __future__ import annotations

import pytest

from kubeinventory.collector.nodes import collect_nodes
from kubeinventory.collector.registry import CollectorRegistry, build_default_registry


async def _noop(ctx, sink, config) -> None:
    return None


class TestCollectorRegistry:
    def test_register_and_lookup(self) -> None:
        registry = CollectorRegistry()
        registry.register("nodes", _noop)
        assert registry["nodes"] is _noop
        assert "nodes" in registry
        assert len(registry) == 1

    def test_duplicate_name_rejected(self) -> None:
        registry = CollectorRegistry({"nodes": _noop})
        with pytest.raises(ValueError, match="already registered"):
            registry.register("nodes", _noop)

    def test_empty_name_rejected(self) -> None:
        with pytest.raises(ValueError):
            CollectorRegistry({"": _noop})

    def test_missing_name_raises_key_error(self) -> None:
        with pytest.raises(KeyError):
            CollectorRegistry()["pods"]

    def test_names_are_sorted(self) -> None:
        registry = CollectorRegistry({"pods": _noop, "deployments": _noop, "nodes": _noop})
        assert registry.names() == ["deployments", "nodes", "pods"]


class TestDefaultRegistry:
    def test_contains_all_builtin_kinds(self) -> None:
        assert build_default_registry().names() == [
            "daemonsets",
            "deployments",
            "nodes",
            "persistentvolumeclaims",
            "persistentvolumes",
            "pods",
            "statefulsets",
        ]

    def test_each_call_returns_an_independent_registry(self) -> None:
        first = build_default_registry()
        second = build_default_registry()
        first.register("custom", _noop)
        assert "custom" not in second

    def test_nodes_maps_to_node_collector(self) -> None:
        assert build_default_registry()["nodes"] is collect_nodes
