"""Summary statistics over a display series."""

from __future__ import annotations

import numpy as np

from price_trends.core.models import DisplaySeriesPoint, Stats


def percent_change(change: float, base: float) -> float:
    """``change`` as a percentage of ``base``; 0 when ``base`` is not positive."""
    if base > 0:
        return change / base * 100
    return 0.0


def compute_stats(series: list[DisplaySeriesPoint]) -> Stats:
    """Compute min/max/avg over every point and the first-to-last change.

    Raises ValueError for an empty series; an empty chart has no stats.
    """
    if not series:
        raise ValueError("Cannot compute stats over an empty series")

    prices = np.asarray([p.display_price for p in series], dtype=float)
    lo = float(prices.min())
    hi = float(prices.max())
    # Summation error can push the mean of equal values past them
    avg = min(max(float(prices.mean()), lo), hi)

    first = series[0].display_price
    change = series[-1].display_price - first

    return Stats(
        min=lo,
        max=hi,
        avg=avg,
        change=change,
        change_percent=percent_change(change, first),
    )
