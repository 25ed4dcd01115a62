"""Price trend analytics: ranges, boundary synthesis, projection, stats, trends."""

from price_trends.analytics.boundary import (
    DEFAULT_ORIGINAL_OFFSET,
    DEFAULT_STALENESS,
    synthesize_boundaries,
)
from price_trends.analytics.engine import PriceTrendEngine, build_chart_data
from price_trends.analytics.projection import project, project_series
from price_trends.analytics.ranges import parse_time_range, resolve_lower_bound
from price_trends.analytics.session import RangeSelectionSession
from price_trends.analytics.stats import compute_stats, percent_change
from price_trends.analytics.timeline import build_timeline
from price_trends.analytics.trend import (
    build_trend_badge,
    classify_trend,
    resolve_previous_price,
)

__all__ = [
    "PriceTrendEngine",
    "RangeSelectionSession",
    "build_chart_data",
    "parse_time_range",
    "resolve_lower_bound",
    "synthesize_boundaries",
    "DEFAULT_STALENESS",
    "DEFAULT_ORIGINAL_OFFSET",
    "project",
    "project_series",
    "compute_stats",
    "percent_change",
    "classify_trend",
    "resolve_previous_price",
    "build_trend_badge",
    "build_timeline",
]
