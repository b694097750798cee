"""Adapter registry: one lazily built adapter per network."""

import httpx

from core.config import Settings, settings
from core.log import get_logger
from core.models.domain.network import NetworkConfig
from core.networks import NetworkCatalog
from core.types import ChainKind
from .base import ChainAdapter
from .endpoints import EndpointPool
from .evm import EvmAdapter
from .stub import StubAdapter
from .tron import TronAdapter, TronGridClient

logger = get_logger(__name__)


class ChainAdapterRegistry:
    """Builds and caches chain adapters keyed by network id."""

    def __init__(
        self,
        catalog: NetworkCatalog,
        config: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize the registry.

        Args:
            catalog: Networks the registry can serve
            config: Settings for timeouts, fail-over and API keys
            client: Shared HTTP client; created on demand when omitted
        """
        self.catalog = catalog
        self.config = config or settings
        self._client = client
        self._owns_client = client is None
        self._adapters: dict[str, ChainAdapter] = {}

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.config.rpc_timeout),
                limits=httpx.Limits(max_keepalive_connections=10, max_connections=20),
            )
        return self._client

    def get(self, network_id: str) -> ChainAdapter:
        """Adapter for ``network_id``; unknown ids get a fresh, uncached stub adapter."""
        adapter = self._adapters.get(network_id)
        if adapter is not None:
            return adapter

        if network_id not in self.catalog:
            return self._unknown(network_id)

        adapter = self._build(self.catalog.get(network_id))
        self._adapters[network_id] = adapter
        return adapter

    @property
    def cached_ids(self) -> list[str]:
        return list(self._adapters)

    def register(self, adapter: ChainAdapter) -> None:
        """Install a prebuilt adapter, replacing any cached one."""
        self._adapters[adapter.network_id] = adapter

    async def aclose(self) -> None:
        for adapter in self._adapters.values():
            await adapter.aclose()
        self._adapters.clear()

        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    @staticmethod
    def _unknown(network_id: str) -> StubAdapter:
        logger.warning(f"Unknown network {network_id}, using stub adapter")
        return StubAdapter(
            NetworkConfig(
                network_id=network_id,
                name=network_id,
                kind=ChainKind.STUB,
                chain_id=network_id,
                native_token=network_id.upper(),
            )
        )

    def _build(self, network: NetworkConfig) -> ChainAdapter:
        if network.kind == ChainKind.EVM:
            return EvmAdapter(
                network,
                pool=self._pool(network),
                timeout=self.config.rpc_timeout,
                client=self.client,
            )
        if network.kind == ChainKind.TRON:
            grid = TronGridClient(
                api_key=self.config.tron_api_key,
                timeout=self.config.rpc_timeout,
                client=self.client,
            )
            return TronAdapter(network, grid=grid, pool=self._pool(network))

        logger.info(f"{network.name} uses the stub adapter")
        return StubAdapter(network)

    def _pool(self, network: NetworkConfig) -> EndpointPool:
        return EndpointPool(
            network.rpc_urls,
            failover=self.config.rpc_failover_enabled,
            cooldown=self.config.rpc_failure_cooldown,
        )
