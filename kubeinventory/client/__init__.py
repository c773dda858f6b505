"""Kubernetes API client for kubeinventory.

Exports:
    ResourceClient      -- Namespace-scoped lister shared by all collectors.
    build_configuration -- InventoryConfig -> kubernetes-asyncio Configuration.
    read_bearer_token   -- Token-file / literal-token resolution.
"""

from kubeinventory.client.api import ResourceClient, build_configuration, read_bearer_token

__all__ = ["ResourceClient", "build_configuration", "read_bearer_token"]
