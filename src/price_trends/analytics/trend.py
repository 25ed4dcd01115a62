"""Trend classification and the previous-price resolver used by badges."""

from __future__ import annotations

import logging
import math

from price_trends.analytics.stats import percent_change
from price_trends.core.models import (
    PriceObservation,
    ProductReference,
    TrendBadge,
    TrendDirection,
)
from price_trends.history.provider import CurrencyConverter

logger = logging.getLogger(__name__)


def classify_trend(current: float, previous: float) -> TrendBadge:
    """Classify the move from ``previous`` to ``current``.

    ``percent`` is the unsigned magnitude relative to ``previous`` and is 0
    whenever ``previous`` is 0.
    """
    for name, value in (("current", current), ("previous", previous)):
        if not math.isfinite(value) or value < 0:
            raise ValueError(f"{name} price must be a finite value >= 0, got {value}")

    diff = current - previous
    if diff < 0:
        direction = TrendDirection.DROP
    elif diff > 0:
        direction = TrendDirection.INCREASE
    else:
        direction = TrendDirection.STABLE

    return TrendBadge(
        direction=direction,
        percent=abs(percent_change(diff, previous)),
        current=current,
        previous=previous,
        change=diff,
    )


def newest_first(history: list[PriceObservation]) -> list[PriceObservation]:
    return sorted(history, key=lambda o: o.observed_at, reverse=True)


def resolve_previous_price(
    history: list[PriceObservation],
    original_price: float | None,
) -> tuple[float | None, str | None]:
    """Pick the price a badge compares the current price against.

    The most recent entry is taken to be the current price already, so
    the second most recent one is "previous". With fewer than two entries
    the product's original price is used.

    Returns ``(price, currency)``. ``currency`` is None when the price is
    the original-price fallback, which is in the product's own currency.
    """
    ordered = newest_first(history)
    if len(ordered) >= 2:
        return ordered[1].price, ordered[1].currency
    return original_price, None


def build_trend_badge(
    history: list[PriceObservation],
    product: ProductReference,
    converter: CurrencyConverter,
) -> TrendBadge:
    """Compute a product's badge in the display currency.

    Any order of ``history`` is accepted. Missing anchors degrade to a
    stable badge rather than an error.
    """
    ordered = newest_first(history)

    if product.current_price is not None:
        current = converter.convert(product.current_price, product.original_currency)
    elif ordered:
        current = converter.convert(ordered[0].price, ordered[0].currency)
    else:
        logger.debug("No current price for product %s", product.id)
        current = None

    raw_previous, previous_currency = resolve_previous_price(ordered, product.original_price)
    if raw_previous is None:
        previous = None
    else:
        previous = converter.convert(raw_previous, previous_currency or product.original_currency)

    if current is None and previous is None:
        return classify_trend(0.0, 0.0)
    if current is None:
        current = previous
    if previous is None:
        previous = current
    return classify_trend(current, previous)
