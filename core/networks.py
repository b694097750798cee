"""Supported networks and their tokens."""

import re
from typing import Iterator

from core.config import Settings, settings
from core.log import get_logger
from core.models.domain.network import NATIVE_ADDRESS, NetworkConfig, TokenConfig
from core.types import ChainKind

logger = get_logger(__name__)

DEFAULT_NETWORK = "polygon"

DEFAULT_EMOJI = "🔗"

NETWORK_EMOJIS = {
    "polygon": "🟣",
    "tron": "🔴",
    "bsc": "🟡",
    "solana": "🟢",
    "arbitrum": "🔵",
    "avalanche": "🔶",
    "ton": "💎",
}

_ADDRESS_PATTERNS: dict[ChainKind | str, list[re.Pattern[str]]] = {
    ChainKind.EVM: [re.compile(r"^0x[a-fA-F0-9]{40}$")],
    ChainKind.TRON: [re.compile(r"^T[A-Za-z1-9]{33}$")],
    "solana": [re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,44}$")],
    "ton": [
        re.compile(r"^[A-Za-z0-9\-_]{48}$"),
        re.compile(r"^EQ[A-Za-z0-9\-_]{46}$"),
    ],
}


def network_emoji(network_id: str) -> str:
    return NETWORK_EMOJIS.get(network_id, DEFAULT_EMOJI)


def _token(symbol: str, name: str, address: str, decimals: int) -> TokenConfig:
    return TokenConfig(symbol=symbol, name=name, address=address, decimals=decimals)


def _tokens(*tokens: TokenConfig) -> dict[str, TokenConfig]:
    return {token.symbol: token for token in tokens}


def default_networks(config: Settings) -> list[NetworkConfig]:
    """Build the network table, applying RPC and contract overrides."""
    return [
        NetworkConfig(
            network_id="polygon",
            name="Polygon",
            kind=ChainKind.EVM,
            chain_id=137,
            native_token="POL",
            rpc_urls=(
                config.polygon_rpc_url,
                "https://rpc.ankr.com/polygon",
                "https://polygon-mainnet.g.alchemy.com/v2/demo",
            ),
            explorer="https://polygonscan.com",
            emoji=NETWORK_EMOJIS["polygon"],
            tokens=_tokens(
                _token("CES", "CES Token", config.ces_contract_address, 18),
                _token(
                    "USDT",
                    "Tether USD (PoS)",
                    "0xc2132D05D31c914a87C6611C10748AEb04B58e8F",
                    6,
                ),
            ),
            fee_params={
                "min_gas_price_gwei": 30,
                "max_gas_price_gwei": 200,
                "default_gas_limit": 100000,
                "native_fee": 0.001,
                "token_fee": 0.002,
                "minimums": {"CES": 0.0001, "USDT": 0.01, "POL": 0.001},
            },
        ),
        NetworkConfig(
            network_id="tron",
            name="TRON",
            kind=ChainKind.TRON,
            chain_id="mainnet",
            native_token="TRX",
            native_decimals=6,
            rpc_urls=("https://api.trongrid.io",),
            explorer="https://tronscan.org",
            emoji=NETWORK_EMOJIS["tron"],
            tokens=_tokens(
                _token("TRX", "TRON", NATIVE_ADDRESS, 6),
                _token(
                    "USDT",
                    "Tether USD (TRC20)",
                    "TR7NHqjeKQxGTCi8q8ZY4pL8otSzgjLj6t",
                    6,
                ),
            ),
            fee_params={
                "fee_limit_sun": 100_000_000,
                "default_bandwidth": 1000,
                "native_fee": 0,
                "token_fee": 15,
                "minimums": {"TRX": 1, "USDT": 1},
            },
        ),
        NetworkConfig(
            network_id="bsc",
            name="BNB Smart Chain",
            kind=ChainKind.EVM,
            chain_id=56,
            native_token="BNB",
            rpc_urls=(
                "https://bsc-dataseed1.binance.org",
                "https://bsc-dataseed2.binance.org",
                "https://rpc.ankr.com/bsc",
            ),
            explorer="https://bscscan.com",
            emoji=NETWORK_EMOJIS["bsc"],
            tokens=_tokens(
                _token("BNB", "BNB", NATIVE_ADDRESS, 18),
                _token(
                    "USDT",
                    "Tether USD (BEP20)",
                    "0x55d398326f99059fF775485246999027B3197955",
                    18,
                ),
                _token(
                    "BUSD",
                    "Binance USD",
                    "0xe9e7CEA3DedcA5984780Bafc599bD69ADd087D56",
                    18,
                ),
                _token(
                    "USDC",
                    "USD Coin (BEP20)",
                    "0x8AC76a51cc950d9822D68b83fE1Ad97B32Cd580d",
                    18,
                ),
            ),
            fee_params={
                "min_gas_price_gwei": 5,
                "max_gas_price_gwei": 20,
                "default_gas_limit": 100000,
                "native_fee": 0.0002,
                "token_fee": 0.0005,
                "minimums": {"BNB": 0.001, "USDT": 0.01, "BUSD": 0.01, "USDC": 0.01},
            },
        ),
        NetworkConfig(
            network_id="solana",
            name="Solana",
            kind=ChainKind.STUB,
            chain_id="mainnet-beta",
            native_token="SOL",
            native_decimals=9,
            explorer="https://explorer.solana.com",
            emoji=NETWORK_EMOJIS["solana"],
            tokens=_tokens(
                _token("SOL", "Solana", NATIVE_ADDRESS, 9),
                _token(
                    "USDT",
                    "Tether USD (SPL)",
                    "Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB",
                    6,
                ),
                _token(
                    "USDC",
                    "USD Coin (SPL)",
                    "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v",
                    6,
                ),
            ),
            fee_params={
                "native_fee": 0.000005,
                "token_fee": 0.000005,
                "minimums": {"SOL": 0.001, "USDT": 0.01, "USDC": 0.01},
            },
        ),
        NetworkConfig(
            network_id="arbitrum",
            name="Arbitrum One",
            kind=ChainKind.EVM,
            chain_id=42161,
            native_token="ETH",
            rpc_urls=("https://arb1.arbitrum.io/rpc", "https://rpc.ankr.com/arbitrum"),
            explorer="https://arbiscan.io",
            emoji=NETWORK_EMOJIS["arbitrum"],
            tokens=_tokens(
                _token("ETH", "Ethereum", NATIVE_ADDRESS, 18),
                _token(
                    "USDT",
                    "Tether USD (Arbitrum)",
                    "0xFd086bC7CD5C481DCC9C85ebE478A1C0b69FCbb9",
                    6,
                ),
                _token(
                    "USDC",
                    "USD Coin (Arbitrum)",
                    "0xaf88d065e77c8cC2239327C5EDb3A432268e5831",
                    6,
                ),
                _token(
                    "ARB",
                    "Arbitrum",
                    "0x912CE59144191C1204E64559FE8253a0e49E6548",
                    18,
                ),
            ),
            fee_params={
                "min_gas_price_gwei": 0.1,
                "max_gas_price_gwei": 2,
                "default_gas_limit": 100000,
                "native_fee": 0.00001,
                "token_fee": 0.00002,
                "minimums": {"ETH": 0.0001, "USDT": 0.01, "USDC": 0.01, "ARB": 0.1},
            },
        ),
        NetworkConfig(
            network_id="avalanche",
            name="Avalanche",
            kind=ChainKind.EVM,
            chain_id=43114,
            native_token="AVAX",
            rpc_urls=(
                "https://api.avax.network/ext/bc/C/rpc",
                "https://rpc.ankr.com/avalanche",
            ),
            explorer="https://snowtrace.io",
            emoji=NETWORK_EMOJIS["avalanche"],
            tokens=_tokens(
                _token("AVAX", "Avalanche", NATIVE_ADDRESS, 18),
                _token(
                    "USDT",
                    "Tether USD (Avalanche)",
                    "0x9702230A8Ea53601f5cD2dc00fDBc13d4dF4A8c7",
                    6,
                ),
                _token(
                    "USDC",
                    "USD Coin (Avalanche)",
                    "0xB97EF9Ef8734C71904D8002F8b6Bc66Dd9c48a6E",
                    6,
                ),
            ),
            fee_params={
                "min_gas_price_navax": 25,
                "max_gas_price_navax": 1000,
                "default_gas_limit": 100000,
                "native_fee": 0.001,
                "token_fee": 0.002,
                "minimums": {"AVAX": 0.001, "USDT": 0.01, "USDC": 0.01},
            },
        ),
        NetworkConfig(
            network_id="ton",
            name="TON Network",
            kind=ChainKind.STUB,
            chain_id="mainnet",
            native_token="TON",
            native_decimals=9,
            explorer="https://tonscan.org",
            emoji=NETWORK_EMOJIS["ton"],
            tokens=_tokens(
                _token("TON", "Toncoin", NATIVE_ADDRESS, 9),
                _token(
                    "USDT",
                    "Tether USD (TON)",
                    "EQCxE6mUtQJKFnGfaROTKOt1lZbDiiX1kCixRv7Nw2Id_sDs",
                    6,
                ),
                _token(
                    "NOT",
                    "Notcoin",
                    "EQAvlWFDxGF2lXm67y4yzC17wYKD9A0guwPkMs1gOsM__NOT",
                    9,
                ),
            ),
            fee_params={
                "native_fee": 0.01,
                "token_fee": 0.02,
                "minimums": {"TON": 0.01, "USDT": 1, "NOT": 1000},
            },
        ),
    ]


class NetworkCatalog:
    """Read-only lookup over the configured networks."""

    def __init__(self, networks: list[NetworkConfig]):
        self._networks = {network.network_id: network for network in networks}

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> "NetworkCatalog":
        return cls(default_networks(config or settings))

    def __iter__(self) -> Iterator[NetworkConfig]:
        return iter(self._networks.values())

    def __contains__(self, network_id: object) -> bool:
        return network_id in self._networks

    def get(self, network_id: str) -> NetworkConfig | None:
        return self._networks.get(network_id)

    def ids(self) -> list[str]:
        return list(self._networks)

    def all(self) -> list[NetworkConfig]:
        return list(self._networks.values())

    def is_supported(self, network_id: str) -> bool:
        return network_id in self._networks

    def token(self, network_id: str, symbol: str) -> TokenConfig | None:
        network = self.get(network_id)
        return network.token(symbol) if network else None

    def display_name(self, network_id: str) -> str:
        network = self.get(network_id)
        return network.name if network else "Unknown Network"

    def emoji(self, network_id: str) -> str:
        network = self.get(network_id)
        return network.emoji if network else network_emoji(network_id)

    def validate_address(self, network_id: str, address: str) -> bool:
        """Check the address format for the given network."""
        network = self.get(network_id)
        if network is None:
            return False

        key: ChainKind | str = network.kind
        if network.kind == ChainKind.STUB:
            key = network_id
        patterns = _ADDRESS_PATTERNS.get(key)
        if not patterns:
            logger.warning(f"No address format known for {network_id}")
            return False
        return any(pattern.match(address) for pattern in patterns)

    def minimum_transfer(self, network_id: str, symbol: str) -> float:
        network = self.get(network_id)
        minimums = network.fee_params.get("minimums", {}) if network else {}
        return float(minimums.get(symbol.upper(), 0.001))

    def estimate_fee(self, network_id: str, symbol: str) -> tuple[float, str | None]:
        """Rough transfer fee for a token.

        Returns:
            Tuple of (estimated fee, token the fee is paid in)
        """
        network = self.get(network_id)
        if network is None:
            return 0.0, None

        is_native = symbol.upper() == network.native_token
        fee = network.fee_params.get("native_fee" if is_native else "token_fee", 0)
        return float(fee), network.native_token
