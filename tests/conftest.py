"""Shared pytest fixtures for price-trends."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from price_trends.core.models import PriceObservation, ProductReference
from price_trends.history.currency import StaticRateConverter

NOW = datetime(2024, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


class FakeStore:
    """In-memory ObservationStore recording every call it receives."""

    def __init__(self, rows=None, error: Exception | None = None, descending: bool = False):
        self.rows = list(rows or [])
        self.error = error
        self.descending = descending
        self.calls: list[dict] = []

    async def fetch_observations(self, product_id, since, limit, *, newest_first=False):
        self.calls.append(
            {"product_id": product_id, "since": since, "limit": limit, "newest_first": newest_first}
        )
        if self.error is not None:
            raise self.error
        rows = sorted(self.rows, key=lambda o: o.observed_at, reverse=newest_first)
        if since is not None:
            bound = datetime.fromisoformat(since)
            rows = [r for r in rows if r.observed_at >= bound]
        rows = rows[:limit]
        if self.descending:
            rows = sorted(rows, key=lambda o: o.observed_at, reverse=True)
        return rows


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def fake_store():
    """Factory for FakeStore instances."""
    return FakeStore


@pytest.fixture
def obs():
    """Factory: obs(price, days_ago=0, currency="USD", hours_ago=0)."""

    def _make(price: float, days_ago: float = 0, currency: str = "USD", hours_ago: float = 0):
        return PriceObservation(
            price=price,
            currency=currency,
            observed_at=NOW - timedelta(days=days_ago, hours=hours_ago),
        )

    return _make


@pytest.fixture
def usd_converter() -> StaticRateConverter:
    return StaticRateConverter(display_currency="USD")


@pytest.fixture
def sar_converter() -> StaticRateConverter:
    return StaticRateConverter(display_currency="SAR")


@pytest.fixture
def discounted_product() -> ProductReference:
    return ProductReference(
        id="prod-1",
        current_price=80.0,
        original_price=100.0,
        original_currency="USD",
    )


@pytest.fixture
def flat_product() -> ProductReference:
    return ProductReference(
        id="prod-2",
        current_price=50.0,
        original_price=50.0,
        original_currency="USD",
    )
