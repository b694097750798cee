"""Tests for the database engine factory."""

from pathlib import Path

import pytest
from sqlalchemy import inspect
from sqlmodel import Session

from core.database.engine import (
    IN_MEMORY_URL,
    create_database_engine,
    create_database_tables,
    drop_database_tables,
    setup_database_url,
)
from core.database.repository import PriceHistoryRepository
from core.models.rows import PriceHistory
from core.types import Environment


def test_testing_url_is_in_memory() -> None:
    assert setup_database_url(Environment.TESTING) == IN_MEMORY_URL


def test_custom_path(tmp_path: Path) -> None:
    """Test that a custom path overrides the environment default."""
    db_path = tmp_path / "nested" / "prices.db"

    url = setup_database_url(Environment.PRODUCTION, db_path)

    assert url == f"sqlite:///{db_path}"
    assert db_path.parent.exists()


def test_create_database_tables() -> None:
    """Test that the price history table is created."""
    engine = create_database_engine(Environment.TESTING)
    create_database_tables(engine)

    assert "price_history" in inspect(engine).get_table_names()


def test_in_memory_engine_shares_data() -> None:
    """Test that separate sessions see the same in-memory database."""
    engine = create_database_engine(Environment.TESTING)
    create_database_tables(engine)

    with Session(engine) as session:
        PriceHistoryRepository(session).create(PriceHistory(symbol="CES", price=1.0))
    with Session(engine) as session:
        assert PriceHistoryRepository(session).count() == 1


def test_drop_database_tables() -> None:
    engine = create_database_engine(Environment.TESTING)
    create_database_tables(engine)
    drop_database_tables(engine)

    assert "price_history" not in inspect(engine).get_table_names()


def test_unknown_environment() -> None:
    with pytest.raises(ValueError, match="Unknown environment"):
        setup_database_url("staging")  # type: ignore[arg-type]
