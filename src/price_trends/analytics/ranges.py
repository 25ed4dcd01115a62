"""Time range selection: symbolic ranges to concrete lower bounds."""

from __future__ import annotations

from datetime import datetime, timedelta

from dateutil.relativedelta import relativedelta

from price_trends.core.models import TimeRange

_OFFSETS: dict[TimeRange, timedelta | relativedelta] = {
    TimeRange.WEEK: timedelta(days=7),
    TimeRange.MONTH: timedelta(days=30),
    TimeRange.QUARTER: relativedelta(months=3),
}


def parse_time_range(symbol: TimeRange | str) -> TimeRange:
    """Coerce a range symbol, failing loudly on anything unknown."""
    if isinstance(symbol, TimeRange):
        return symbol
    try:
        return TimeRange(symbol)
    except ValueError:
        valid = ", ".join(r.value for r in TimeRange)
        raise ValueError(f"Unknown time range {symbol!r}; expected one of: {valid}") from None


def resolve_lower_bound(time_range: TimeRange | str, now: datetime) -> datetime | None:
    """Return the earliest instant included by ``time_range``, or None for ``all``.

    ``90d`` is three calendar months, not ninety days.
    """
    time_range = parse_time_range(time_range)
    if time_range is TimeRange.ALL:
        return None
    return now - _OFFSETS[time_range]
