"""Resolve which collectors run in a poll.

Selection rules:
    * non-empty include -> exactly those names; exclude is ignored.  A name
      with no registered collector fails the poll with UnknownResourceError.
    * empty include     -> every registered collector minus exclude.  Unknown
      exclude names are logged and ignored.

The result is a new dict; the registry passed in is never modified.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

import structlog

from kubeinventory.collector.base import Collector
from kubeinventory.errors import UnknownResourceError

_log = structlog.get_logger(component="collector.selector")


def select_collectors(
    registry: Mapping[str, Collector],
    include: Iterable[str] = (),
    exclude: Iterable[str] = (),
) -> dict[str, Collector]:
    """Return the poll-local working set of collectors to run."""
    include = list(dict.fromkeys(include))
    if include:
        unknown = [name for name in include if name not in registry]
        if unknown:
            raise UnknownResourceError(unknown, sorted(registry))
        return {name: registry[name] for name in include}

    excluded = set(exclude)
    unknown_excludes = sorted(excluded.difference(registry))
    if unknown_excludes:
        _log.warning("unknown_resource_exclude_ignored", names=unknown_excludes)
    return {name: fn for name, fn in registry.items() if name not in excluded}
