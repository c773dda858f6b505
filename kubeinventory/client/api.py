"""Authenticated Kubernetes API client scoped to one namespace.

ResourceClient wraps a kubernetes-asyncio ``ApiClient`` together with the
namespace and per-request timeout taken from configuration.  A single
instance is shared read-only by every collector of every poll; each list
call carries its own ``_request_timeout``.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

import structlog
from kubernetes_asyncio import client as k8s_client  # type: ignore[import-untyped]

from kubeinventory.errors import ClientInitError
from kubeinventory.models.config import InventoryConfig

_log = structlog.get_logger(component="client.api")


def read_bearer_token(config: InventoryConfig) -> str:
    """Resolve the bearer token, preferring the token file over the literal string.

    Raises:
        ClientInitError: if a token file path is configured but unreadable.
    """
    if config.bearer_token:
        path = Path(config.bearer_token)
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ClientInitError(f"cannot read bearer token file {str(path)!r}: {exc.strerror or exc}") from exc
    return config.bearer_token_string


def build_configuration(config: InventoryConfig, token: str) -> k8s_client.Configuration:
    """Translate an InventoryConfig into a kubernetes-asyncio Configuration."""
    tls = config.tls
    for label, path in (("CA", tls.ca_file), ("certificate", tls.cert_file), ("key", tls.key_file)):
        if path and not Path(path).is_file():
            raise ClientInitError(f"TLS {label} file not found: {path!r}")
    if bool(tls.cert_file) != bool(tls.key_file):
        raise ClientInitError("TLS certificate and key must be configured together")

    configuration = k8s_client.Configuration()
    configuration.host = config.url
    if token:
        configuration.api_key = {"BearerToken": token}
        configuration.api_key_prefix = {"BearerToken": "Bearer"}
    configuration.verify_ssl = not tls.insecure_skip_verify
    if tls.ca_file:
        configuration.ssl_ca_cert = tls.ca_file
    if tls.cert_file:
        configuration.cert_file = tls.cert_file
        configuration.key_file = tls.key_file
    return configuration


def _prepare(config: InventoryConfig) -> tuple[str, k8s_client.Configuration]:
    token = read_bearer_token(config)
    return token, build_configuration(config, token)


class ResourceClient:
    """Lists inventory objects of each supported kind.

    Namespaced kinds are listed in ``namespace``; an empty namespace lists
    across all namespaces.  Cluster-scoped kinds (nodes, persistent volumes)
    ignore the namespace.
    """

    def __init__(self, api_client: Any, namespace: str, timeout: float) -> None:
        self._api_client = api_client
        self._core = k8s_client.CoreV1Api(api_client)
        self._apps = k8s_client.AppsV1Api(api_client)
        self.namespace = namespace
        self.timeout = timeout

    @classmethod
    def from_config(cls, config: InventoryConfig) -> ResourceClient:
        """Build a client from configuration.

        The token file, when configured, is read once here.  Must be called
        with an event loop running: the ApiClient binds its connection pool
        to it.

        Raises:
            ClientInitError: on unreadable credentials or invalid TLS setup.
        """
        token, configuration = _prepare(config)
        return cls._from_configuration(config, token, configuration)

    @classmethod
    async def create(cls, config: InventoryConfig) -> ResourceClient:
        """Like :meth:`from_config`, with token and TLS file access off the event loop."""
        token, configuration = await asyncio.to_thread(_prepare, config)
        return cls._from_configuration(config, token, configuration)

    @classmethod
    def _from_configuration(
        cls,
        config: InventoryConfig,
        token: str,
        configuration: k8s_client.Configuration,
    ) -> ResourceClient:
        try:
            api_client = k8s_client.ApiClient(configuration)
        except Exception as exc:
            raise ClientInitError(f"cannot create Kubernetes API client: {exc}") from exc
        _log.info(
            "resource_client_created",
            url=config.url,
            namespace=config.namespace or "*",
            timeout=config.response_timeout,
            authenticated=bool(token),
        )
        return cls(api_client, namespace=config.namespace, timeout=config.response_timeout)

    async def close(self) -> None:
        """Release the underlying connection pool."""
        await self._api_client.close()

    # ------------------------------------------------------------------
    # Cluster-scoped kinds
    # ------------------------------------------------------------------

    async def list_nodes(self) -> list[Any]:
        result = await self._core.list_node(_request_timeout=self.timeout)
        return list(result.items)

    async def list_persistent_volumes(self) -> list[Any]:
        result = await self._core.list_persistent_volume(_request_timeout=self.timeout)
        return list(result.items)

    # ------------------------------------------------------------------
    # Namespaced kinds
    # ------------------------------------------------------------------

    async def list_pods(self) -> list[Any]:
        if self.namespace:
            result = await self._core.list_namespaced_pod(self.namespace, _request_timeout=self.timeout)
        else:
            result = await self._core.list_pod_for_all_namespaces(_request_timeout=self.timeout)
        return list(result.items)

    async def list_persistent_volume_claims(self) -> list[Any]:
        if self.namespace:
            result = await self._core.list_namespaced_persistent_volume_claim(
                self.namespace, _request_timeout=self.timeout
            )
        else:
            result = await self._core.list_persistent_volume_claim_for_all_namespaces(_request_timeout=self.timeout)
        return list(result.items)

    async def list_deployments(self) -> list[Any]:
        if self.namespace:
            result = await self._apps.list_namespaced_deployment(self.namespace, _request_timeout=self.timeout)
        else:
            result = await self._apps.list_deployment_for_all_namespaces(_request_timeout=self.timeout)
        return list(result.items)

    async def list_daemonsets(self) -> list[Any]:
        if self.namespace:
            result = await self._apps.list_namespaced_daemon_set(self.namespace, _request_timeout=self.timeout)
        else:
            result = await self._apps.list_daemon_set_for_all_namespaces(_request_timeout=self.timeout)
        return list(result.items)

    async def list_statefulsets(self) -> list[Any]:
        if self.namespace:
            result = await self._apps.list_namespaced_stateful_set(self.namespace, _request_timeout=self.timeout)
        else:
            result = await self._apps.list_stateful_set_for_all_namespaces(_request_timeout=self.timeout)
        return list(result.items)
