"""Balance reader for TRON through the TronGrid HTTP API."""

import re
from typing import Any

import httpx

from core.log import get_logger
from core.models.domain.network import Balance, NetworkConfig, TokenConfig
from core.utils import scale_amount
from .base import ChainAdapter
from .endpoints import EndpointPool
from .exceptions import InvalidAddressError, RpcError

logger = get_logger(__name__)

TRON_ADDRESS_PATTERN = re.compile(r"^T[A-Za-z1-9]{33}$")
API_KEY_HEADER = "TRON-PRO-API-KEY"


class TronGridClient:
    """Minimal TronGrid client for account lookups."""

    def __init__(
        self,
        api_key: str = "",
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.api_key = api_key
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=httpx.Timeout(self.timeout))
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def get_account(self, base_url: str, address: str) -> dict[str, Any] | None:
        """Fetch an account; None when it has never been activated.

        Raises:
            httpx.HTTPError: On transport or HTTP status errors
            RpcError: If TronGrid reports a failure
        """
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers[API_KEY_HEADER] = self.api_key

        response = await self.client.get(
            f"{base_url.rstrip('/')}/v1/accounts/{address}", headers=headers
        )
        response.raise_for_status()
        body = response.json()

        if not body.get("success", True):
            raise RpcError(f"TronGrid error: {body.get('error', 'unknown error')}")

        data = body.get("data") or []
        return data[0] if data else None


class TronAdapter(ChainAdapter):
    """Reads TRX and TRC-20 balances from the account resource."""

    def __init__(
        self,
        network: NetworkConfig,
        grid: TronGridClient | None = None,
        pool: EndpointPool | None = None,
    ):
        super().__init__(network)
        self.grid = grid or TronGridClient()
        self.pool = pool or EndpointPool(network.rpc_urls)

    async def aclose(self) -> None:
        await self.grid.aclose()

    async def get_account(self, address: str) -> dict[str, Any] | None:
        if not TRON_ADDRESS_PATTERN.match(address):
            raise InvalidAddressError(f"Invalid TRON address: {address}")
        return await self.pool.call(lambda url: self.grid.get_account(url, address))

    async def get_balances(self, address: str) -> dict[str, Balance]:
        # One account lookup carries both TRX and every TRC-20 balance.
        symbols = self.network.balance_symbols()
        try:
            account = await self.get_account(address)
        except Exception as e:
            logger.error(f"TRON account read failed for {address}: {e}")
            return {symbol: Balance.failed(str(e)) for symbol in symbols}

        balances: dict[str, Balance] = {}
        for symbol in symbols:
            token = self.network.token(symbol)
            try:
                if token is None or token.is_native:
                    value = self._native_from(account)
                else:
                    value = self._token_from(account, token)
            except ValueError as e:
                logger.error(f"Malformed TRON balance for {symbol}: {e}")
                balances[symbol] = Balance.failed(str(e))
                continue
            balances[symbol] = Balance(value=value)
        return balances

    async def _fetch_native(self, address: str) -> float:
        return self._native_from(await self.get_account(address))

    async def _fetch_token(self, address: str, token: TokenConfig) -> float:
        return self._token_from(await self.get_account(address), token)

    def _native_from(self, account: dict[str, Any] | None) -> float:
        if account is None:
            return 0.0
        return scale_amount(account.get("balance", 0), self.network.native_decimals)

    @staticmethod
    def _token_from(account: dict[str, Any] | None, token: TokenConfig) -> float:
        if account is None:
            return 0.0
        for entry in account.get("trc20") or []:
            if token.address in entry:
                return scale_amount(entry[token.address], token.decimals)
        return 0.0

