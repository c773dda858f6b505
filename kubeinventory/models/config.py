"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class TLSConfig:
    """Client TLS options for the Kubernetes API connection."""

    ca_file: str = ""
    cert_file: str = ""
    key_file: str = ""
    insecure_skip_verify: bool = False


@dataclass(frozen=True)
class LogConfig:
    """Logging configuration."""

    level: str = "info"


@dataclass(frozen=True)
class InventoryConfig:
    """Top-level inventory configuration.

    Immutable for the duration of a poll.  ``resource_include`` takes absolute
    precedence over ``resource_exclude`` whenever it is non-empty.  An empty
    ``namespace`` lists namespaced kinds across all namespaces.
    """

    url: str
    namespace: str = "default"
    bearer_token: str = ""
    bearer_token_string: str = ""
    response_timeout: float = 5.0
    resource_include: tuple[str, ...] = ()
    resource_exclude: tuple[str, ...] = ()
    max_age: float = 0.0
    tls: TLSConfig = field(default_factory=TLSConfig)
    poll_interval: float = 60.0
    metrics_port: int = 0
    log: LogConfig = field(default_factory=LogConfig)
