"""Price trend engine — the caller-facing API.

Pipeline for a chart::

    TimeRange → lower bound → SeriesLoader → synthesize_boundaries
              → project_series → compute_stats

and for a badge::

    SeriesLoader (most recent N) → build_trend_badge

The only suspension point is the store call inside the loader. Every
other step is a pure function of its inputs, so concurrent calls for
different products or ranges share nothing.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from price_trends.analytics.boundary import synthesize_boundaries
from price_trends.analytics.projection import project_series
from price_trends.analytics.ranges import parse_time_range, resolve_lower_bound
from price_trends.analytics.stats import compute_stats
from price_trends.analytics.timeline import DEFAULT_TIMELINE_LIMIT, build_timeline
from price_trends.analytics.trend import build_trend_badge
from price_trends.core.config import PriceTrendsConfig, SeriesConfig
from price_trends.core.models import (
    ChartData,
    PriceObservation,
    ProductReference,
    TimelineEntry,
    TimeRange,
    TrendBadge,
)
from price_trends.history.loader import SeriesLoader
from price_trends.history.provider import CurrencyConverter, ObservationStore

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def build_chart_data(
    observations: list[PriceObservation],
    product: ProductReference,
    time_range: TimeRange | str,
    converter: CurrencyConverter,
    now: datetime,
    settings: SeriesConfig | None = None,
    *,
    product_id: str | None = None,
) -> ChartData:
    """Turn ascending raw observations into a complete chart.

    ``product_id`` labels the chart and defaults to ``product.id``. An empty
    result (``stats`` is None) means the product has neither history nor
    anchor prices.
    """
    settings = settings or SeriesConfig()
    raw = synthesize_boundaries(
        observations,
        product,
        now,
        staleness=settings.staleness,
        original_offset=settings.original_offset,
    )
    series = project_series(raw, converter, settings.locale)
    return ChartData(
        product_id=product_id if product_id is not None else product.id,
        time_range=parse_time_range(time_range),
        display_currency=converter.display_currency_code,
        series=series,
        stats=compute_stats(series) if series else None,
    )


class PriceTrendEngine:
    """Chart and badge queries over a product's price history.

    Parameters
    ----------
    store : ObservationStore
        Where observations are read from.
    converter : CurrencyConverter
        Display currency and conversion function.
    settings : SeriesConfig | None
        History caps, staleness window and date-label locale.
    loader_timeout : float | None
        Timeout for a single store call, in seconds.
    clock : Callable[[], datetime]
        Source of "now". Injected so results are reproducible.
    """

    def __init__(
        self,
        store: ObservationStore,
        converter: CurrencyConverter,
        settings: SeriesConfig | None = None,
        *,
        loader_timeout: float | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._loader = SeriesLoader(store, timeout_seconds=loader_timeout)
        self._converter = converter
        self._settings = settings or SeriesConfig()
        self._clock = clock

    @classmethod
    def from_config(
        cls,
        config: PriceTrendsConfig,
        store: ObservationStore,
        converter: CurrencyConverter,
        **kwargs,
    ) -> PriceTrendEngine:
        return cls(
            store,
            converter,
            config.series,
            loader_timeout=config.loader.timeout_seconds,
            **kwargs,
        )

    @property
    def converter(self) -> CurrencyConverter:
        return self._converter

    async def get_chart_data(
        self,
        product_id: str,
        time_range: TimeRange | str,
        product: ProductReference,
    ) -> ChartData:
        """Load, complete, project and summarise a product's history."""
        time_range = parse_time_range(time_range)
        now = self._clock()
        lower_bound = resolve_lower_bound(time_range, now)

        observations = await self._loader.load(
            product_id, lower_bound, limit=self._settings.max_points
        )
        chart = build_chart_data(
            observations, product, time_range, self._converter, now, self._settings,
            product_id=product_id,
        )
        logger.debug(
            "Chart for product %s (%s): %d real, %d total points",
            product_id,
            time_range.value,
            len(observations),
            len(chart.series),
        )
        return chart

    async def get_trend_badge(
        self,
        product_id: str,
        product: ProductReference,
    ) -> TrendBadge:
        """Compare the current price with the previous recorded one."""
        history = await self._loader.load(
            product_id,
            None,
            limit=self._settings.badge_history_limit,
            newest_first=True,
        )
        return build_trend_badge(history, product, self._converter)

    async def get_timeline(
        self,
        product_id: str,
        *,
        limit: int = DEFAULT_TIMELINE_LIMIT,
    ) -> list[TimelineEntry]:
        """Most recent entries, newest first, each with its change."""
        history = await self._loader.load(product_id, None, limit=limit, newest_first=True)
        return build_timeline(history, self._converter, limit=limit)
