"""Collection orchestrator: one poll cycle over the selected collectors.

InventoryPoller owns the lazily created ResourceClient and runs every
selected collector as its own asyncio task, joining on all of them.

* A collector failure never cancels its siblings and never fails the poll.
* Only client construction (ClientInitError) and include-list resolution
  (UnknownResourceError) propagate out of :meth:`InventoryPoller.poll`.
* A failed client construction caches nothing; the next poll retries.
"""

from __future__ import annotations

import asyncio
import inspect
import time
from collections.abc import Callable, Mapping
from typing import Any

import structlog

from kubeinventory.client.api import ResourceClient
from kubeinventory.collector.base import Collector, CollectorError, PollContext
from kubeinventory.collector.selector import select_collectors
from kubeinventory.errors import ClientInitError, InventoryError
from kubeinventory.models.config import InventoryConfig
from kubeinventory.observability.metrics import polls_total
from kubeinventory.sink.base import MetricSink

_log = structlog.get_logger(component="collector.orchestrator")

ClientFactory = Callable[[InventoryConfig], Any]


class InventoryPoller:
    """Runs poll cycles against a fixed collector registry.

    Args:
        registry:       Name -> collector mapping.  Read, never modified.
        client_factory: Builds the shared client from configuration.
                        May return the client or an awaitable
                        of it.  Defaults to :meth:`ResourceClient.create`.
    """

    def __init__(
        self,
        registry: Mapping[str, Collector],
        client_factory: ClientFactory = ResourceClient.create,
    ) -> None:
        self._registry = registry
        self._client_factory = client_factory
        self._client: Any | None = None
        self._client_lock = asyncio.Lock()

    @property
    def client(self) -> Any | None:
        """The shared client, or None before the first successful poll."""
        return self._client

    async def poll(self, config: InventoryConfig, sink: MetricSink) -> None:
        """Run one snapshot poll, returning once every selected collector finished.

        Raises:
            ClientInitError:      the client could not be constructed.
            UnknownResourceError: the include list names an unregistered kind.
        """
        start = time.monotonic()
        try:
            client = await self._ensure_client(config)
            selected = select_collectors(self._registry, config.resource_include, config.resource_exclude)
        except InventoryError:
            polls_total.labels(outcome="error").inc()
            raise

        ctx = PollContext(client=client)
        tasks = [
            asyncio.create_task(self._run_one(name, fn, ctx, sink, config), name=f"collect-{name}")
            for name, fn in selected.items()
        ]
        await asyncio.gather(*tasks, return_exceptions=True)

        polls_total.labels(outcome="success").inc()
        _log.info(
            "poll_completed",
            collectors=sorted(selected),
            duration_ms=int((time.monotonic() - start) * 1000),
        )

    async def _ensure_client(self, config: InventoryConfig) -> Any:
        if self._client is not None:
            return self._client
        async with self._client_lock:
            if self._client is None:
                try:
                    client = self._client_factory(config)
                    if inspect.isawaitable(client):
                        client = await client
                except ClientInitError as exc:
                    _log.error("resource_client_init_failed", error=str(exc))
                    raise
                except Exception as exc:
                    _log.error("resource_client_init_failed", error=str(exc))
                    raise ClientInitError(f"cannot create Kubernetes API client: {exc}") from exc
                self._client = client
            return self._client

    async def _run_one(
        self,
        name: str,
        fn: Collector,
        ctx: PollContext,
        sink: MetricSink,
        config: InventoryConfig,
    ) -> None:
        """Run a single collector; anything it lets escape is reported, not raised."""
        try:
            await fn(ctx, sink, config)
        except Exception as exc:  # noqa: BLE001
            _log.error("collector_unexpected_error", resource=name, error=str(exc))
            sink.add_error(CollectorError(name, exc))

    async def reset(self) -> None:
        """Close and drop the shared client; the next poll builds a new one."""
        async with self._client_lock:
            client, self._client = self._client, None
        if client is None:
            return
        close = getattr(client, "close", None)
        if close is None:
            return
        try:
            result = close()
            if asyncio.iscoroutine(result):
                await result
        except Exception as exc:
            _log.debug("resource_client_close_failed", error=str(exc))
