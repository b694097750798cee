"""Configuration management for the metawhale system."""

import os
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .types import Environment

ENV_PREFIX = "METAWHALE_"


class Settings(BaseModel):
    """Application settings."""

    # Environment
    version: str = Field(default="0.1.0", description="Application version")
    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Application environment (development/production/testing)",
    )

    # API Settings
    api_title: str = Field(default="Metawhale API", description="API title")
    api_version: str = Field(default="1.0.0", description="API version")
    cors_allow_origins: list[str] = Field(
        default=["*"], description="Allowed CORS origins"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    # Background scheduler
    scheduler_default_priority: int = Field(
        default=0, description="Priority used when a task does not set one"
    )
    scheduler_default_timeout: float = Field(
        default=30.0, description="Task timeout in seconds when none is given"
    )
    scheduler_yield_seconds: float = Field(
        default=0.01, description="Pause between tasks in the worker loop"
    )
    scheduler_cancel_abandoned_work: bool = Field(
        default=True,
        description="Cancel a task's work when it times out or is cleared",
    )
    portfolio_task_priority: int = Field(
        default=1, description="Priority of portfolio and price tasks"
    )
    portfolio_task_timeout: float = Field(
        default=30.0, description="Timeout in seconds for portfolio tasks"
    )

    # Performance instrumentation
    perf_threshold_ms: float = Field(
        default=1000.0, description="Durations above this are reported as slow"
    )
    perf_max_metrics: int = Field(default=1000, description="Metric ring buffer size")
    perf_max_slow_metrics: int = Field(
        default=100, description="Maximum retained slow metrics"
    )
    perf_summary_interval_minutes: int = Field(
        default=60, description="Interval of the periodic performance summary"
    )

    # Market data
    market_data_api_base_url: str = Field(
        default="https://api.coingecko.com/api/v3",
        description="Market-data API base URL",
    )
    market_data_api_key: str = Field(default="", description="Market-data API key")
    market_data_api_key_header: str = Field(
        default="X-CG-Demo-API-Key", description="Header carrying the API key"
    )
    market_data_detail_timeout: float = Field(
        default=10.0, description="Timeout for detailed market-data lookups"
    )
    market_data_simple_timeout: float = Field(
        default=8.0, description="Timeout for simple price lookups"
    )
    exchange_rate_api_base_url: str = Field(
        default="https://api.exchangerate-api.com/v4/latest",
        description="Exchange-rate API base URL",
    )
    exchange_rate_timeout: float = Field(
        default=5.0, description="Timeout for exchange-rate lookups"
    )
    exchange_rate_ttl_seconds: float = Field(
        default=60.0, description="How long a USD/RUB rate is reused"
    )
    exchange_rate_fallback: float = Field(
        default=100.0, description="USD/RUB rate used when no rate is available"
    )
    primary_token_symbol: str = Field(
        default="CES", description="The system's own token"
    )
    primary_token_min_interval: float = Field(
        default=3.0,
        description="Minimum seconds between detailed lookups of the primary token",
    )
    price_cache_ttl_seconds: float = Field(
        default=5.0, description="Freshness window of a fetched price record"
    )
    price_cache_max_size: int = Field(
        default=256, ge=1, description="Most price records kept in memory"
    )

    # Chains
    rpc_timeout: float = Field(default=10.0, description="RPC request timeout")
    rpc_failover_enabled: bool = Field(
        default=True,
        description="Try the remaining RPC endpoints when the primary one fails",
    )
    rpc_failure_cooldown: float = Field(
        default=25.0, description="Seconds a failed endpoint is skipped"
    )
    polygon_rpc_url: str = Field(
        default="https://polygon-rpc.com", description="Primary Polygon RPC URL"
    )
    ces_contract_address: str = Field(
        default="0x1bdf71ede1a4777db1eebe7232bcda20d6fc1610",
        description="CES token contract on Polygon",
    )
    tron_api_key: str = Field(default="", description="TronGrid API key")

    # Price history
    database_path: str | None = Field(
        default=None, description="SQLite database path (environment default if unset)"
    )
    price_snapshot_enabled: bool = Field(
        default=False, description="Periodically store primary token prices"
    )
    price_snapshot_interval: int = Field(
        default=3600, description="Seconds between price snapshots"
    )

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        # Snapshots hit the market-data API; keep them out of test runs.
        if self.environment == Environment.TESTING:
            self.price_snapshot_enabled = False

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.environment == Environment.TESTING


def _env(name: str, default: str) -> str:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def _env_bool(name: str, default: str) -> bool:
    return _env(name, default).lower() in ["true", "1", "yes", "on"]


def load_settings() -> Settings:
    """Load settings from environment variables."""

    # Load .env file if it exists
    load_dotenv()

    cors_origins_str = _env("CORS_ORIGINS", "*")
    if cors_origins_str == "*":
        cors_origins = ["*"]
    else:
        cors_origins = [origin.strip() for origin in cors_origins_str.split(",")]

    return Settings(
        environment=Environment(_env("ENV", "development")),
        api_title=_env("API_TITLE", "Metawhale API"),
        api_version=_env("API_VERSION", "1.0.0"),
        cors_allow_origins=cors_origins,
        log_level=_env("LOG_LEVEL", "INFO").upper(),
        scheduler_default_priority=int(_env("SCHEDULER_DEFAULT_PRIORITY", "0")),
        scheduler_default_timeout=float(_env("SCHEDULER_DEFAULT_TIMEOUT", "30.0")),
        scheduler_yield_seconds=float(_env("SCHEDULER_YIELD_SECONDS", "0.01")),
        scheduler_cancel_abandoned_work=_env_bool(
            "SCHEDULER_CANCEL_ABANDONED_WORK", "true"
        ),
        portfolio_task_priority=int(_env("PORTFOLIO_TASK_PRIORITY", "1")),
        portfolio_task_timeout=float(_env("PORTFOLIO_TASK_TIMEOUT", "30.0")),
        perf_threshold_ms=float(_env("PERF_THRESHOLD_MS", "1000")),
        perf_max_metrics=int(_env("PERF_MAX_METRICS", "1000")),
        perf_max_slow_metrics=int(_env("PERF_MAX_SLOW_METRICS", "100")),
        perf_summary_interval_minutes=int(_env("PERF_SUMMARY_INTERVAL_MINUTES", "60")),
        market_data_api_base_url=_env(
            "MARKET_DATA_API_BASE_URL", "https://api.coingecko.com/api/v3"
        ),
        market_data_api_key=os.getenv("COINGECKO_API_KEY", ""),
        market_data_api_key_header=_env(
            "MARKET_DATA_API_KEY_HEADER", "X-CG-Demo-API-Key"
        ),
        exchange_rate_api_base_url=_env(
            "EXCHANGE_RATE_API_BASE_URL", "https://api.exchangerate-api.com/v4/latest"
        ),
        exchange_rate_ttl_seconds=float(_env("EXCHANGE_RATE_TTL_SECONDS", "60")),
        primary_token_symbol=_env("PRIMARY_TOKEN_SYMBOL", "CES").upper(),
        # Kept in milliseconds for compatibility with the bot's API_CALL_INTERVAL
        primary_token_min_interval=int(os.getenv("API_CALL_INTERVAL", "3000")) / 1000,
        price_cache_ttl_seconds=float(_env("PRICE_CACHE_TTL_SECONDS", "5")),
        price_cache_max_size=int(_env("PRICE_CACHE_MAX_SIZE", "256")),
        rpc_timeout=float(_env("RPC_TIMEOUT", "10.0")),
        rpc_failover_enabled=_env_bool("RPC_FAILOVER_ENABLED", "true"),
        rpc_failure_cooldown=float(_env("RPC_FAILURE_COOLDOWN", "25.0")),
        polygon_rpc_url=os.getenv("POLYGON_RPC_URL", "https://polygon-rpc.com"),
        ces_contract_address=os.getenv(
            "CES_CONTRACT_ADDRESS", "0x1bdf71ede1a4777db1eebe7232bcda20d6fc1610"
        ),
        tron_api_key=os.getenv("TRON_API_KEY", ""),
        database_path=_env("DATABASE_PATH", "") or None,
        price_snapshot_enabled=_env_bool("PRICE_SNAPSHOT_ENABLED", "false"),
        price_snapshot_interval=int(_env("PRICE_SNAPSHOT_INTERVAL", "3600")),
    )


# Global settings instance
settings = load_settings()
