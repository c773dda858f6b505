"""Integration tests for a full poll over the default registry.

Wires InventoryPoller, the built-in collectors and the sinks together
against a FakeResourceClient, so no cluster is needed.
"""

from __future__ import annotations

import io
from dataclasses import replace

import pytest

from kubeinventory.collector.orchestrator import InventoryPoller
from kubeinventory.collector.registry import build_default_registry
from kubeinventory.models.config import InventoryConfig
from kubeinventory.sink.line_protocol import LineProtocolSink
from kubeinventory.sink.memory import MemorySink
from tests.factories import FakeResourceClient, make_node, make_pod

pytestmark = pytest.mark.integration

_ALL_MEASUREMENTS = {
    "kubernetes_daemonset",
    "kubernetes_deployment",
    "kubernetes_node",
    "kubernetes_persistentvolume",
    "kubernetes_persistentvolumeclaim",
    "kubernetes_pod_container",
    "kubernetes_statefulset",
}


def _poller(client: FakeResourceClient) -> InventoryPoller:
    return InventoryPoller(build_default_registry(), client_factory=lambda config: client)


class TestFullPoll:
    async def test_every_kind_emitted(self, config: InventoryConfig, sink: MemorySink) -> None:
        client = FakeResourceClient()
        await _poller(client).poll(config, sink)

        assert sink.measurements() == _ALL_MEASUREMENTS
        assert sorted(client.calls) == sorted(
            [
                "daemonsets",
                "deployments",
                "nodes",
                "persistent_volume_claims",
                "persistent_volumes",
                "pods",
                "statefulsets",
            ]
        )
        assert sink.errors == []

    async def test_forbidden_kind_does_not_stop_others(self, config: InventoryConfig, sink: MemorySink) -> None:
        client = FakeResourceClient(failures={"persistent_volumes": PermissionError("403 Forbidden")})
        await _poller(client).poll(config, sink)

        assert sink.measurements() == _ALL_MEASUREMENTS - {"kubernetes_persistentvolume"}
        assert [error.resource for error in sink.errors] == ["persistentvolumes"]

    async def test_every_kind_failing_still_returns(self, config: InventoryConfig, sink: MemorySink) -> None:
        kinds = [
            "nodes",
            "pods",
            "deployments",
            "daemonsets",
            "statefulsets",
            "persistent_volumes",
            "persistent_volume_claims",
        ]
        client = FakeResourceClient(failures={kind: TimeoutError("timed out") for kind in kinds})
        await _poller(client).poll(config, sink)

        assert sink.records == []
        assert len(sink.errors) == 7

    async def test_second_poll_with_different_exclude(self, config: InventoryConfig) -> None:
        client = FakeResourceClient(nodes=[make_node("n1"), make_node("n2")])
        poller = _poller(client)

        first = MemorySink()
        await poller.poll(replace(config, resource_exclude=("nodes",)), first)
        second = MemorySink()
        await poller.poll(replace(config, resource_exclude=()), second)

        assert "kubernetes_node" not in first.measurements()
        assert len(second.by_measurement("kubernetes_node")) == 2

    async def test_records_share_the_poll_timestamp(self, config: InventoryConfig, sink: MemorySink) -> None:
        client = FakeResourceClient(pods=[make_pod("a"), make_pod("b")])
        await _poller(client).poll(config, sink)
        assert len({record.timestamp for record in sink.records}) == 1

    async def test_line_protocol_output(self, config: InventoryConfig) -> None:
        stream = io.StringIO()
        client = FakeResourceClient()
        await _poller(client).poll(replace(config, resource_include=("nodes", "persistentvolumes")), LineProtocolSink(stream))

        lines = stream.getvalue().splitlines()
        assert len(lines) == 2
        node_line = next(line for line in lines if line.startswith("kubernetes_node,"))
        assert "node_name=node-1" in node_line
        assert "capacity_pods=110i" in node_line
