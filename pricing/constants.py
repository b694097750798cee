"""Constants for price lookups."""

# Market-data API coin ids by token symbol
COIN_IDS = {
    "CES": "whalebit",
    "POL": "polygon-ecosystem-token",
    "TRX": "tron",
    "USDT": "tether",
    "USDC": "usd-coin",
    "BUSD": "binance-usd",
    "BNB": "binancecoin",
    "SOL": "solana",
    "ETH": "ethereum",
    "ARB": "arbitrum",
    "AVAX": "avalanche-2",
    "TON": "the-open-network",
    "NOT": "notcoin",
}

# Last-resort USD prices when no source has data
FALLBACK_PRICES_USD = {
    "CES": 0.0,
    "POL": 0.45,
    "TRX": 0.10,
    "USDT": 1.0,
    "USDC": 1.0,
    "BUSD": 1.0,
    "BNB": 300.0,
    "SOL": 100.0,
    "ETH": 2500.0,
    "ARB": 1.0,
    "AVAX": 30.0,
    "TON": 2.5,
    "NOT": 0.007,
}

BASE_CURRENCY = "USD"
SECONDARY_CURRENCY = "RUB"


def coin_id_for(symbol: str) -> str:
    """Market-data coin id for a symbol; unknown symbols map to their lowercase form."""
    return COIN_IDS.get(symbol.upper(), symbol.lower())
