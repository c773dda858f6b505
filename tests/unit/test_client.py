"""Tests for bearer-token resolution and API client construction."""

from __future__ import annotations

import inspect
from dataclasses import replace
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from kubeinventory.client.api import ResourceClient, build_configuration, read_bearer_token
from kubeinventory.errors import ClientInitError, InventoryError
from kubeinventory.models.config import InventoryConfig, TLSConfig


async def _auth_settings(configuration: Any) -> dict[str, Any]:
    """Resolve auth settings; sync or async depending on the kubernetes-asyncio release."""
    settings = configuration.auth_settings()
    if inspect.isawaitable(settings):
        settings = await settings
    return settings


# ---------------------------------------------------------------------------
# Bearer token
# ---------------------------------------------------------------------------


class TestReadBearerToken:
    def test_token_file_is_trimmed(self, tmp_path: Path, config: InventoryConfig) -> None:
        token_file = tmp_path / "token"
        token_file.write_text("  \n secret-token \n\n")
        assert read_bearer_token(replace(config, bearer_token=str(token_file))) == "secret-token"

    def test_token_file_takes_priority_over_string(self, tmp_path: Path) -> None:
        token_file = tmp_path / "token"
        token_file.write_text("from-file")
        config = InventoryConfig(url="https://k8s", bearer_token=str(token_file), bearer_token_string="literal")
        assert read_bearer_token(config) == "from-file"

    def test_literal_string_used_without_file(self, config: InventoryConfig) -> None:
        assert read_bearer_token(config) == "abc_123"

    def test_no_token_configured(self) -> None:
        assert read_bearer_token(InventoryConfig(url="https://k8s")) == ""

    def test_missing_token_file_is_descriptive_error(self, tmp_path: Path, config: InventoryConfig) -> None:
        missing = tmp_path / "does-not-exist"
        with pytest.raises(ClientInitError) as excinfo:
            read_bearer_token(replace(config, bearer_token=str(missing)))
        assert str(missing) in str(excinfo.value)
        assert isinstance(excinfo.value, InventoryError)


# ---------------------------------------------------------------------------
# Configuration translation
# ---------------------------------------------------------------------------


class TestBuildConfiguration:
    def test_host_and_verify_defaults(self, config: InventoryConfig) -> None:
        configuration = build_configuration(config, "abc_123")
        assert configuration.host == "https://127.0.0.1:6443"
        assert configuration.verify_ssl is True

    async def test_bearer_token_sent_as_authorization_header(self, config: InventoryConfig) -> None:
        settings = await _auth_settings(build_configuration(config, "abc_123"))
        assert settings["BearerToken"]["in"] == "header"
        assert settings["BearerToken"]["key"] == "authorization"
        assert settings["BearerToken"]["value"] == "Bearer abc_123"

    async def test_no_token_sends_no_authorization(self, config: InventoryConfig) -> None:
        settings = await _auth_settings(build_configuration(config, ""))
        assert "BearerToken" not in settings

    def test_insecure_skip_verify(self, config: InventoryConfig) -> None:
        configuration = build_configuration(replace(config, tls=TLSConfig(insecure_skip_verify=True)), "")
        assert configuration.verify_ssl is False

    def test_tls_files(self, tmp_path: Path, config: InventoryConfig) -> None:
        for name in ("ca.crt", "client.crt", "client.key"):
            (tmp_path / name).write_text("-----BEGIN-----")
        tls = TLSConfig(
            ca_file=str(tmp_path / "ca.crt"),
            cert_file=str(tmp_path / "client.crt"),
            key_file=str(tmp_path / "client.key"),
        )
        configuration = build_configuration(replace(config, tls=tls), "")
        assert configuration.ssl_ca_cert == str(tmp_path / "ca.crt")
        assert configuration.cert_file == str(tmp_path / "client.crt")
        assert configuration.key_file == str(tmp_path / "client.key")

    def test_missing_ca_file(self, tmp_path: Path, config: InventoryConfig) -> None:
        tls = TLSConfig(ca_file=str(tmp_path / "nope.crt"))
        with pytest.raises(ClientInitError, match="CA file not found"):
            build_configuration(replace(config, tls=tls), "")

    def test_cert_without_key(self, tmp_path: Path, config: InventoryConfig) -> None:
        (tmp_path / "client.crt").write_text("x")
        tls = TLSConfig(cert_file=str(tmp_path / "client.crt"))
        with pytest.raises(ClientInitError, match="together"):
            build_configuration(replace(config, tls=tls), "")


# ---------------------------------------------------------------------------
# ResourceClient
# ---------------------------------------------------------------------------


class TestResourceClient:
    async def test_create_uses_namespace_and_timeout(self, config: InventoryConfig) -> None:
        client = await ResourceClient.create(replace(config, namespace="monitoring", response_timeout=2.5))
        try:
            assert client.namespace == "monitoring"
            assert client.timeout == 2.5
        finally:
            await client.close()

    async def test_create_sends_trimmed_token_file(self, tmp_path: Path, config: InventoryConfig) -> None:
        token_file = tmp_path / "token"
        token_file.write_text("\n  sa-token-xyz  \n")
        client = await ResourceClient.create(replace(config, bearer_token=str(token_file)))
        try:
            settings = await _auth_settings(client._api_client.configuration)
            assert settings["BearerToken"]["value"] == "Bearer sa-token-xyz"
        finally:
            await client.close()

    async def test_create_missing_token_file(self, tmp_path: Path, config: InventoryConfig) -> None:
        with pytest.raises(ClientInitError, match="missing"):
            await ResourceClient.create(replace(config, bearer_token=str(tmp_path / "missing")))

    async def test_from_config_builds_same_client_synchronously(self, config: InventoryConfig) -> None:
        client = ResourceClient.from_config(replace(config, namespace="", response_timeout=1.0))
        try:
            assert client.namespace == ""
            settings = await _auth_settings(client._api_client.configuration)
            assert settings["BearerToken"]["value"] == "Bearer abc_123"
        finally:
            await client.close()

    async def test_namespaced_listing_passes_namespace_and_timeout(self) -> None:
        client = ResourceClient(MagicMock(), namespace="apps", timeout=3.0)
        client._core = MagicMock()
        client._core.list_namespaced_pod = AsyncMock(return_value=MagicMock(items=["p1", "p2"]))

        assert await client.list_pods() == ["p1", "p2"]
        client._core.list_namespaced_pod.assert_awaited_once_with("apps", _request_timeout=3.0)

    async def test_empty_namespace_lists_all_namespaces(self) -> None:
        client = ResourceClient(MagicMock(), namespace="", timeout=5.0)
        client._apps = MagicMock()
        client._apps.list_deployment_for_all_namespaces = AsyncMock(return_value=MagicMock(items=["d1"]))

        assert await client.list_deployments() == ["d1"]
        client._apps.list_deployment_for_all_namespaces.assert_awaited_once_with(_request_timeout=5.0)

    async def test_cluster_scoped_listing_ignores_namespace(self) -> None:
        client = ResourceClient(MagicMock(), namespace="apps", timeout=5.0)
        client._core = MagicMock()
        client._core.list_node = AsyncMock(return_value=MagicMock(items=[]))
        client._core.list_persistent_volume = AsyncMock(return_value=MagicMock(items=["pv"]))

        assert await client.list_nodes() == []
        assert await client.list_persistent_volumes() == ["pv"]
        client._core.list_node.assert_awaited_once_with(_request_timeout=5.0)

    async def test_close_closes_api_client(self) -> None:
        api_client = MagicMock()
        api_client.close = AsyncMock()
        await ResourceClient(api_client, namespace="default", timeout=5.0).close()
        api_client.close.assert_awaited_once()
