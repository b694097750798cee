"""Fixtures for API tests."""

from collections.abc import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.app import create_app
from api.services.app_initializer import AppServiceInitializer


@pytest.fixture
def test_app(test_settings, mock_db_engine, test_catalog) -> FastAPI:
    """App wired to the mock servers, the test database and the test networks."""
    initializer = AppServiceInitializer(
        test_settings, engine=mock_db_engine, catalog=test_catalog
    )
    return create_app(initializer=initializer)


@pytest.fixture
def client(test_app: FastAPI) -> Generator[TestClient, None, None]:
    """Test client with the application lifespan running."""
    with TestClient(test_app) as test_client:
        yield test_client
