"""Application bootstrap for kubeinventory.

Wires components in dependency order and manages the asyncio lifecycle.
Startup order: config → logging → self-metrics endpoint → registry/poller
              → poll loop

Shutdown stops the poll loop first, then closes the shared API client.
A poll cycle that fails (client construction, bad include list) is logged and
retried on the next tick; it never stops the loop.
"""

from __future__ import annotations

import asyncio
import signal
from typing import TYPE_CHECKING

from kubeinventory.collector.orchestrator import InventoryPoller
from kubeinventory.collector.registry import build_default_registry
from kubeinventory.config import load_config
from kubeinventory.errors import InventoryError
from kubeinventory.models.config import InventoryConfig
from kubeinventory.observability.logging import get_logger, setup_logging
from kubeinventory.observability.metrics import serve_metrics
from kubeinventory.sink.base import MetricSink
from kubeinventory.sink.line_protocol import LineProtocolSink

if TYPE_CHECKING:
    import structlog

_SHUTDOWN_GRACE_SECONDS = 15


class _ComponentError(Exception):
    """Raised when a mandatory component fails to start."""

    def __init__(self, component: str, cause: Exception) -> None:
        super().__init__(f"Component '{component}' failed to start: {cause}")
        self.component = component
        self.cause = cause


class KubeInventoryApp:
    """Application root.  Owns the poller, the sink and the poll loop task.

    ``stop()`` is safe to call on an app that was never started or has
    already stopped.
    """

    def __init__(self, config: InventoryConfig | None = None, sink: MetricSink | None = None) -> None:
        self.config = config
        self._sink = sink
        self._poller: InventoryPoller | None = None
        self._poll_task: asyncio.Task[None] | None = None
        self._running = False
        self._log: structlog.stdlib.BoundLogger | None = None

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Start all components in dependency order.

        Raises _ComponentError if a mandatory component cannot start.
        """
        # --- 1. Configuration -------------------------------------------
        if self.config is None:
            try:
                self.config = load_config()
            except ValueError as exc:
                raise _ComponentError("config", exc) from exc

        # --- 2. Logging -------------------------------------------------
        setup_logging(self.config.log.level)
        self._log = get_logger("app")
        self._log.info("kubeinventory starting", version=_kubeinventory_version())

        # --- 3. Self-metrics endpoint -----------------------------------
        try:
            serve_metrics(self.config.metrics_port)
        except OSError as exc:
            raise _ComponentError("metrics", exc) from exc

        # --- 4. Registry and poller -------------------------------------
        self._poller = InventoryPoller(build_default_registry())
        if self._sink is None:
            self._sink = LineProtocolSink()

        # --- 5. Poll loop -----------------------------------------------
        self._poll_task = asyncio.create_task(self._poll_loop(), name="poll-loop")

        self._running = True
        self._log.info(
            "kubeinventory started",
            url=self.config.url,
            interval=self.config.poll_interval,
            metrics_port=self.config.metrics_port,
        )

    async def _poll_loop(self) -> None:
        """Poll once per interval until cancelled."""
        assert self._log is not None
        assert self.config is not None
        assert self._poller is not None
        assert self._sink is not None
        while True:
            try:
                await self._poller.poll(self.config, self._sink)
            except InventoryError as exc:
                self._log.error("poll_failed", error=str(exc), error_type=type(exc).__name__)
            await asyncio.sleep(self.config.poll_interval)

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    async def stop(self) -> None:
        """Stop the poll loop and release the API client."""
        if not self._running and self._log is None:
            return

        log = self._log or get_logger("app")
        log.info("kubeinventory shutting down")
        self._running = False

        if self._poll_task is not None:
            if not self._poll_task.done():
                self._poll_task.cancel()
            await asyncio.gather(self._poll_task, return_exceptions=True)
            self._poll_task = None

        if self._poller is not None:
            try:
                await asyncio.wait_for(self._poller.reset(), timeout=_SHUTDOWN_GRACE_SECONDS)
            except TimeoutError:
                log.warning("client close timed out", timeout=_SHUTDOWN_GRACE_SECONDS)

        log.info("kubeinventory stopped")


def _kubeinventory_version() -> str:
    from kubeinventory import __version__

    return __version__


# ---------------------------------------------------------------------------
# Async entrypoint
# ---------------------------------------------------------------------------


async def main(config: InventoryConfig | None = None) -> None:
    """Create the app, register OS signals, run until shutdown is requested."""
    app = KubeInventoryApp(config=config)
    loop = asyncio.get_running_loop()

    shutdown_triggered = False

    def _request_shutdown() -> None:
        nonlocal shutdown_triggered
        if shutdown_triggered:
            return
        shutdown_triggered = True
        asyncio.create_task(app.stop(), name="shutdown")

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, _request_shutdown)

    try:
        await app.start()
        while app._running:
            await asyncio.sleep(1)
    except _ComponentError as exc:
        log = get_logger("app")
        log.critical(
            "fatal startup error",
            component=exc.component,
            error=str(exc.cause),
        )
        await app.stop()
        raise SystemExit(1) from exc
    finally:
        if app._running:
            await app.stop()
