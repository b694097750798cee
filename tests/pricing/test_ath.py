"""Tests for all-time-high reconciliation."""

import pytest

from pricing import reconcile_ath
from pricing.ath import ath_source


@pytest.mark.parametrize(
    "persisted,external,current,expected",
    [
        (4.0, 3.5, 2.0, 4.0),
        (3.0, 5.0, 2.0, 5.0),
        (3.0, 5.0, 6.0, 6.0),
        (None, None, 2.0, 2.0),
        (None, 3.5, 2.0, 3.5),
        (0.0, -1.0, 2.0, 2.0),
    ],
)
def test_reconcile_ath(persisted, external, current, expected) -> None:
    """Test that the largest valid candidate wins."""
    assert reconcile_ath(persisted, external, current) == expected


def test_ath_source() -> None:
    assert ath_source(4.0, 3.5) == "database+market"
    assert ath_source(None, 3.5) == "market"
    assert ath_source(4.0, None) == "database"
    assert ath_source(None, 0.0) == "current"
