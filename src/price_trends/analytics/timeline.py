"""Newest-first price timeline with per-entry change badges."""

from __future__ import annotations

from price_trends.analytics.trend import classify_trend, newest_first
from price_trends.core.models import PriceObservation, TimelineEntry
from price_trends.history.provider import CurrencyConverter

DEFAULT_TIMELINE_LIMIT = 50


def build_timeline(
    history: list[PriceObservation],
    converter: CurrencyConverter,
    *,
    limit: int = DEFAULT_TIMELINE_LIMIT,
) -> list[TimelineEntry]:
    """List the latest ``limit`` entries, each compared with the one before it.

    The oldest listed entry has no change, even when older history exists
    beyond ``limit``.
    """
    ordered = newest_first(history)[:limit]
    display = [converter.convert(o.price, o.currency) for o in ordered]

    entries: list[TimelineEntry] = []
    for i, obs in enumerate(ordered):
        older = display[i + 1] if i + 1 < len(display) else None
        entries.append(
            TimelineEntry(
                observed_at=obs.observed_at,
                price=obs.price,
                currency=obs.currency,
                display_price=display[i],
                change=classify_trend(display[i], older) if older is not None else None,
            )
        )
    return entries
