"""Click commands for kubeinventory.

    kubeinv resources                 list collectable resource kinds
    kubeinv poll [--include/--exclude] one snapshot as line protocol on stdout
    kubeinv run                       poll forever (same as python -m kubeinventory)

Connection settings always come from the KUBEINV_* environment.
"""

from __future__ import annotations

import asyncio
import dataclasses
import sys

import click

from kubeinventory.collector.orchestrator import InventoryPoller
from kubeinventory.collector.registry import build_default_registry
from kubeinventory.config import load_config
from kubeinventory.errors import InventoryError
from kubeinventory.models.config import InventoryConfig
from kubeinventory.observability.logging import setup_logging
from kubeinventory.sink.line_protocol import LineProtocolSink


def _build_poller() -> InventoryPoller:
    return InventoryPoller(build_default_registry())


def _load(include: tuple[str, ...], exclude: tuple[str, ...]) -> InventoryConfig:
    try:
        config = load_config()
    except ValueError as exc:
        raise click.UsageError(str(exc)) from exc
    overrides: dict[str, tuple[str, ...]] = {}
    if include:
        overrides["resource_include"] = include
    if exclude:
        overrides["resource_exclude"] = exclude
    return dataclasses.replace(config, **overrides) if overrides else config


async def _poll_once(poller: InventoryPoller, config: InventoryConfig, sink: LineProtocolSink) -> None:
    try:
        await poller.poll(config, sink)
    finally:
        await poller.reset()


@click.group()
@click.version_option(package_name="kubeinventory")
def cli() -> None:
    """Kubernetes cluster-inventory poller."""


@cli.command()
def resources() -> None:
    """List the resource kinds that can be collected."""
    for name in build_default_registry().names():
        click.echo(name)


@cli.command()
@click.option("--include", "-i", multiple=True, help="Resource kind to collect (repeatable). Overrides --exclude.")
@click.option("--exclude", "-x", multiple=True, help="Resource kind to skip (repeatable).")
def poll(include: tuple[str, ...], exclude: tuple[str, ...]) -> None:
    """Run one poll and print records as InfluxDB line protocol."""
    config = _load(include, exclude)
    setup_logging(config.log.level)
    sink = LineProtocolSink(sys.stdout)
    try:
        asyncio.run(_poll_once(_build_poller(), config, sink))
    except InventoryError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(1)
    if sink.error_count:
        click.echo(f"{sink.error_count} resource kind(s) failed; see log for details", err=True)


@cli.command()
def run() -> None:
    """Poll on the configured interval until interrupted."""
    from kubeinventory.app import main

    asyncio.run(main(_load((), ())))
