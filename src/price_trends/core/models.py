"""Pydantic data models — the engine's type contracts."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, field_validator

# --- Type Aliases ---

ProductId = str
CurrencyCode = str

# --- Enumerations ---


class TimeRange(StrEnum):
    """Symbolic chart ranges selectable by the user."""

    WEEK = "7d"
    MONTH = "30d"
    QUARTER = "90d"
    ALL = "all"


class TrendDirection(StrEnum):
    """Direction of a price move. ``drop`` is the good outcome for shoppers."""

    DROP = "drop"
    INCREASE = "increase"
    STABLE = "stable"


class DateLocale(StrEnum):
    """Locales with a chart date-label format."""

    EN = "en"
    AR = "ar"


def _check_price(v: float, field: str) -> float:
    if not math.isfinite(v):
        raise ValueError(f"{field} must be finite, got {v}")
    if v < 0:
        raise ValueError(f"{field} must be >= 0, got {v}")
    return v


def _check_currency(v: str) -> str:
    code = v.strip().upper()
    if not code:
        raise ValueError("currency must not be empty")
    return code


# --- Source Models ---


class PriceObservation(BaseModel):
    """A single recorded price for a product at a point in time.

    Observations are owned by the store and never mutated by the engine.
    Points fabricated by the boundary synthesizer carry ``synthetic=True``.
    """

    model_config = ConfigDict(frozen=True)

    price: float
    currency: CurrencyCode
    observed_at: datetime
    synthetic: bool = False

    @field_validator("price")
    @classmethod
    def price_non_negative(cls, v: float) -> float:
        return _check_price(v, "price")

    @field_validator("currency")
    @classmethod
    def currency_code(cls, v: str) -> str:
        return _check_currency(v)

    @field_validator("observed_at")
    @classmethod
    def observed_at_utc(cls, v: datetime) -> datetime:
        """Naive timestamps are taken to be UTC."""
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)


class ProductReference(BaseModel):
    """The anchor prices recorded on a product.

    ``original_price`` is the listed price, ``current_price`` the latest
    known one. Either may be missing. No ordering between them is assumed.
    """

    model_config = ConfigDict(frozen=True)

    id: ProductId
    current_price: float | None = None
    original_price: float | None = None
    original_currency: CurrencyCode = "SAR"

    @field_validator("current_price", "original_price")
    @classmethod
    def anchor_non_negative(cls, v: float | None, info) -> float | None:
        if v is None:
            return v
        return _check_price(v, info.field_name)

    @field_validator("original_currency")
    @classmethod
    def currency_code(cls, v: str) -> str:
        return _check_currency(v)


# --- Derived Models ---


class DisplaySeriesPoint(BaseModel):
    """One chart point, expressed in the display currency."""

    model_config = ConfigDict(frozen=True)

    timestamp_ms: int
    display_price: float
    formatted_date: str
    currency: CurrencyCode
    synthetic: bool = False


class Stats(BaseModel):
    """Summary statistics over a display series."""

    model_config = ConfigDict(frozen=True)

    min: float
    max: float
    avg: float
    change: float
    change_percent: float


class TrendBadge(BaseModel):
    """Compact trend summary for list and card views."""

    model_config = ConfigDict(frozen=True)

    direction: TrendDirection
    percent: float
    current: float
    previous: float
    change: float

    @field_validator("percent")
    @classmethod
    def percent_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"percent is a magnitude and must be >= 0, got {v}")
        return v


class ChartData(BaseModel):
    """Result of a chart query: the display series and its statistics."""

    model_config = ConfigDict(frozen=True)

    product_id: ProductId
    time_range: TimeRange
    display_currency: CurrencyCode
    series: list[DisplaySeriesPoint]
    stats: Stats | None = None

    @property
    def has_history(self) -> bool:
        """False when there is nothing to chart (no anchors, no history)."""
        return bool(self.series)


class TimelineEntry(BaseModel):
    """A history entry with its change against the next-older entry."""

    model_config = ConfigDict(frozen=True)

    observed_at: datetime
    price: float
    currency: CurrencyCode
    display_price: float
    change: TrendBadge | None = None
