"""Balance reader for EVM networks over JSON-RPC."""

import itertools
import re
from typing import Any

import httpx

from core.log import get_logger
from core.models.domain.network import NetworkConfig, TokenConfig
from core.utils import scale_amount
from .base import ChainAdapter
from .endpoints import EndpointPool
from .exceptions import InvalidAddressError, RpcError, RpcResponseError

logger = get_logger(__name__)

# keccak256("balanceOf(address)")[:4]
BALANCE_OF_SELECTOR = "0x70a08231"

EVM_ADDRESS_PATTERN = re.compile(r"^0x[a-fA-F0-9]{40}$")


def encode_balance_of(address: str) -> str:
    """Call data for ERC-20 ``balanceOf(address)``."""
    return BALANCE_OF_SELECTOR + address[2:].lower().rjust(64, "0")


def parse_quantity(value: Any) -> int:
    """Decode a hex quantity; an empty ``0x`` result means zero."""
    if value in (None, "", "0x"):
        return 0
    if not isinstance(value, str) or not value.startswith("0x"):
        raise RpcError(f"Unexpected RPC result: {value!r}")
    try:
        return int(value, 16)
    except ValueError:
        raise RpcError(f"Unexpected RPC result: {value!r}")


class EvmAdapter(ChainAdapter):
    """Reads balances with ``eth_getBalance`` and ERC-20 ``balanceOf``."""

    def __init__(
        self,
        network: NetworkConfig,
        pool: EndpointPool | None = None,
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        """Initialize EVM adapter.

        Args:
            network: Network configuration with at least one RPC URL
            pool: Endpoint pool; defaults to the network's RPC URLs in order
            timeout: Request timeout in seconds
            client: Shared HTTP client. Owned and closed by the caller when given.
        """
        super().__init__(network)
        self.pool = pool or EndpointPool(network.rpc_urls)
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None
        self._request_ids = itertools.count(1)

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout))
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def call(self, method: str, params: list[Any]) -> Any:
        """Send one JSON-RPC request through the endpoint pool.

        Returns:
            The ``result`` member of the response

        Raises:
            RpcResponseError: If the node returned an error object
            EndpointsExhaustedError: If no endpoint produced a response
        """
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._request_ids),
            "method": method,
            "params": params,
        }

        async def send(url: str) -> Any:
            response = await self.client.post(url, json=payload)
            response.raise_for_status()
            body = response.json()
            if not isinstance(body, dict):
                raise RpcError(f"Malformed JSON-RPC response from {url}")

            error = body.get("error")
            if error:
                if isinstance(error, dict):
                    raise RpcResponseError(
                        str(error.get("message", error)), error.get("code")
                    )
                raise RpcResponseError(str(error))
            if "result" not in body:
                raise RpcError(f"JSON-RPC response from {url} has no result")
            return body["result"]

        return await self.pool.call(send)

    def _checked(self, address: str) -> str:
        if not EVM_ADDRESS_PATTERN.match(address):
            raise InvalidAddressError(f"Invalid {self.network.name} address: {address}")
        return address

    async def _fetch_native(self, address: str) -> float:
        result = await self.call("eth_getBalance", [self._checked(address), "latest"])
        return scale_amount(parse_quantity(result), self.network.native_decimals)

    async def _fetch_token(self, address: str, token: TokenConfig) -> float:
        call = {"to": token.address, "data": encode_balance_of(self._checked(address))}
        result = await self.call("eth_call", [call, "latest"])
        return scale_amount(parse_quantity(result), token.decimals)
