"""Global pytest configuration and fixtures."""

import json
from collections.abc import Generator
from logging import Logger
from pathlib import Path
from typing import Any

import pytest
from pytest_httpserver import HTTPServer
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlmodel import Session
from werkzeug.wrappers import Request, Response

from core import setup_test_logging
from core.config import Settings
from core.database.engine import create_database_tables
from core.database.repository import PriceHistoryRepository
from core.models.domain.network import NATIVE_ADDRESS, NetworkConfig, TokenConfig
from core.networks import NetworkCatalog
from core.types import ChainKind, Environment

from tests.utils.test_helpers import (
    CES_CONTRACT,
    TRON_ADDRESS,
    TRON_USDT_CONTRACT,
    USDT_CONTRACT,
    WALLET_ADDRESS,
    TestDataFactory,
)


@pytest.fixture(scope="session", autouse=True)
def setup_logging() -> None:
    """Setup test logging for all tests."""
    setup_test_logging()


@pytest.fixture(scope="function")
def logger() -> Logger:
    """Provide a logger instance for tests."""
    from core import get_logger

    return get_logger("test")


def server_url(httpserver: HTTPServer, path: str = "") -> str:
    return f"http://{httpserver.host}:{httpserver.port}{path}"


@pytest.fixture
def mock_evm_rpc(httpserver: HTTPServer) -> HTTPServer:
    """JSON-RPC node answering balance reads for the test wallet.

    Native balance is 2 POL, CES is 10 and USDT is 5.5.
    """
    balances = {
        CES_CONTRACT.lower(): 10 * 10**18,
        USDT_CONTRACT.lower(): 5_500_000,
    }

    def rpc_handler(request: Request) -> Response:
        body = json.loads(request.data.decode("utf-8"))
        method = body["method"]
        params = body["params"]

        if method == "eth_getBalance":
            result: Any = hex(2 * 10**18)
        elif method == "eth_call":
            result = hex(balances.get(params[0]["to"].lower(), 0))
        else:
            return Response(
                json.dumps(
                    {
                        "jsonrpc": "2.0",
                        "id": body["id"],
                        "error": {"code": -32601, "message": "Method not found"},
                    }
                ),
                status=200,
                headers={"Content-Type": "application/json"},
            )

        return Response(
            json.dumps({"jsonrpc": "2.0", "id": body["id"], "result": result}),
            status=200,
            headers={"Content-Type": "application/json"},
        )

    httpserver.expect_request("/rpc", method="POST").respond_with_handler(rpc_handler)
    return httpserver


@pytest.fixture
def mock_tron_grid(httpserver: HTTPServer) -> HTTPServer:
    """TronGrid account endpoint: 150 TRX and 20 USDT."""
    httpserver.expect_request(
        f"/v1/accounts/{TRON_ADDRESS}", method="GET"
    ).respond_with_json(
        {
            "success": True,
            "data": [
                {
                    "address": TRON_ADDRESS,
                    "balance": 150_000_000,
                    "trc20": [{TRON_USDT_CONTRACT: "20000000"}],
                }
            ],
        }
    )
    return httpserver


@pytest.fixture
def mock_market_server(httpserver: HTTPServer) -> HTTPServer:
    """Market-data and exchange-rate endpoints for the CES token.

    CES trades at $2.00 with a USD/RUB rate of 90.
    """
    httpserver.expect_request(
        "/api/v3/coins/whalebit", method="GET"
    ).respond_with_json(TestDataFactory.coin_details(price=2.0, ath=3.5))
    httpserver.expect_request(
        "/api/v3/coins/polygon-ecosystem-token", method="GET"
    ).respond_with_json(TestDataFactory.coin_details(price=0.5, ath=2.9))
    httpserver.expect_request(
        "/api/v3/coins/tether", method="GET"
    ).respond_with_json(TestDataFactory.coin_details(price=1.0, ath=1.3))
    httpserver.expect_request("/rates/USD", method="GET").respond_with_json(
        {"base": "USD", "rates": {"USD": 1, "RUB": 90.0}}
    )
    return httpserver


@pytest.fixture
def test_network(httpserver: HTTPServer) -> NetworkConfig:
    """Polygon-like network pointing at the mock RPC node."""
    return NetworkConfig(
        network_id="polygon",
        name="Polygon",
        kind=ChainKind.EVM,
        chain_id=137,
        native_token="POL",
        rpc_urls=(server_url(httpserver, "/rpc"),),
        explorer="https://polygonscan.com",
        emoji="🟣",
        tokens={
            "CES": TokenConfig(
                symbol="CES", name="CES Token", address=CES_CONTRACT, decimals=18
            ),
            "USDT": TokenConfig(
                symbol="USDT", name="Tether USD", address=USDT_CONTRACT, decimals=6
            ),
        },
        fee_params={"native_fee": 0.001, "token_fee": 0.002},
    )


@pytest.fixture
def test_tron_network(httpserver: HTTPServer) -> NetworkConfig:
    """TRON network pointing at the mock TronGrid server."""
    return NetworkConfig(
        network_id="tron",
        name="TRON",
        kind=ChainKind.TRON,
        chain_id="mainnet",
        native_token="TRX",
        native_decimals=6,
        rpc_urls=(server_url(httpserver),),
        emoji="🔴",
        tokens={
            "TRX": TokenConfig(
                symbol="TRX", name="TRON", address=NATIVE_ADDRESS, decimals=6
            ),
            "USDT": TokenConfig(
                symbol="USDT", name="Tether USD", address=TRON_USDT_CONTRACT, decimals=6
            ),
        },
    )


@pytest.fixture
def test_catalog(
    test_network: NetworkConfig, test_tron_network: NetworkConfig
) -> NetworkCatalog:
    return NetworkCatalog([test_network, test_tron_network])


@pytest.fixture
def test_settings(httpserver: HTTPServer) -> Settings:
    """Testing settings with every external API on the mock server."""
    return Settings(
        environment=Environment.TESTING,
        market_data_api_base_url=server_url(httpserver, "/api/v3"),
        exchange_rate_api_base_url=server_url(httpserver, "/rates"),
        primary_token_min_interval=0,
        rpc_failover_enabled=False,
        rpc_timeout=2.0,
        scheduler_yield_seconds=0,
    )


@pytest.fixture
def wallet_address() -> str:
    return WALLET_ADDRESS


@pytest.fixture
def mock_db_engine(tmp_path: Path) -> Generator[Engine, None, None]:
    """Create a real database engine for testing using a file-based database."""
    # File-based so every session and thread sees the same database
    db_path = tmp_path / "test.db"
    database_url = f"sqlite:///{db_path}"

    engine = create_engine(
        database_url,
        echo=False,
        connect_args={
            "check_same_thread": False,
            "timeout": 60.0,
        },
    )
    create_database_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def mock_db_session(mock_db_engine: Engine) -> Generator[Session, None, None]:
    with Session(mock_db_engine) as session:
        yield session


@pytest.fixture
def price_history_repo(mock_db_session: Session) -> PriceHistoryRepository:
    """Create price history repository instance."""
    return PriceHistoryRepository(mock_db_session)
