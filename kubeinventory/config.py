"""Configuration loading from environment variables."""

from __future__ import annotations

import os
import re

from kubeinventory.models.config import InventoryConfig, LogConfig, TLSConfig

_DURATION_RE = re.compile(r"^([0-9]+(?:\.[0-9]+)?)(ms|s|m|h)$")
_DURATION_UNITS = {"ms": 0.001, "s": 1.0, "m": 60.0, "h": 3600.0}


def _env(key: str, default: str = "") -> str:
    return os.environ.get(f"KUBEINV_{key}", default)


def _env_bool(key: str, default: bool = False) -> bool:
    val = _env(key, str(default).lower())
    return val.lower() in ("true", "1", "yes")


def _env_int(key: str, default: int, min_val: int | None = None, max_val: int | None = None) -> int:
    val = int(_env(key, str(default)))
    if min_val is not None:
        val = max(val, min_val)
    if max_val is not None:
        val = min(val, max_val)
    return val


def _env_list(key: str) -> tuple[str, ...]:
    raw = _env(key, "")
    return tuple(item.strip() for item in raw.split(",") if item.strip())


def parse_duration(value: str) -> float:
    """Parse a duration such as ``5s``, ``500ms``, ``1m`` or ``1h`` into seconds."""
    match = _DURATION_RE.match(value.strip())
    if not match:
        raise ValueError(f"Invalid duration format: {value!r}")
    amount, unit = match.groups()
    return float(amount) * _DURATION_UNITS[unit]


def _validate_url(value: str) -> str:
    if not value:
        raise ValueError("KUBEINV_URL must be set to the Kubernetes API base URL")
    if not value.startswith(("http://", "https://")):
        raise ValueError(f"Invalid API URL: {value!r}. Must start with http:// or https://")
    return value.rstrip("/")


def _validate_poll_interval(value: float) -> float:
    if value <= 0:
        raise ValueError(f"Invalid poll interval: {value}s. Must be greater than zero")
    return value


def _validate_log_level(value: str) -> str:
    valid = {"debug", "info", "warning", "error"}
    if value.lower() not in valid:
        raise ValueError(f"Invalid log level: {value}. Must be one of {valid}")
    return value.lower()


def load_config() -> InventoryConfig:
    """Load configuration from KUBEINV_* environment variables."""
    return InventoryConfig(
        url=_validate_url(_env("URL", "")),
        namespace=_env("NAMESPACE", "default"),
        bearer_token=_env("BEARER_TOKEN", ""),
        bearer_token_string=_env("BEARER_TOKEN_STRING", ""),
        response_timeout=parse_duration(_env("RESPONSE_TIMEOUT", "5s")),
        resource_include=_env_list("RESOURCE_INCLUDE"),
        resource_exclude=_env_list("RESOURCE_EXCLUDE"),
        max_age=parse_duration(_env("MAX_AGE", "0s")),
        tls=TLSConfig(
            ca_file=_env("TLS_CA", ""),
            cert_file=_env("TLS_CERT", ""),
            key_file=_env("TLS_KEY", ""),
            insecure_skip_verify=_env_bool("INSECURE_SKIP_VERIFY", False),
        ),
        poll_interval=_validate_poll_interval(parse_duration(_env("POLL_INTERVAL", "60s"))),
        metrics_port=_env_int("METRICS_PORT", 0, min_val=0, max_val=65535),
        log=LogConfig(
            level=_validate_log_level(_env("LOG_LEVEL", "info")),
        ),
    )
