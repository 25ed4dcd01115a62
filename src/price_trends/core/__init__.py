"""price_trends.core — Foundation types, config, and exceptions."""

from price_trends.core.config import (
    CurrencyConfig,
    LoaderConfig,
    PriceTrendsConfig,
    SeriesConfig,
    StorageConfig,
    load_config,
)
from price_trends.core.exceptions import (
    ConfigError,
    CurrencyError,
    PriceTrendsError,
    StorageError,
)
from price_trends.core.models import (
    ChartData,
    CurrencyCode,
    DateLocale,
    DisplaySeriesPoint,
    PriceObservation,
    ProductId,
    ProductReference,
    Stats,
    TimelineEntry,
    TimeRange,
    TrendBadge,
    TrendDirection,
)

__all__ = [
    # Type aliases
    "ProductId",
    "CurrencyCode",
    # Enums
    "TimeRange",
    "TrendDirection",
    "DateLocale",
    # Source models
    "PriceObservation",
    "ProductReference",
    # Derived models
    "DisplaySeriesPoint",
    "Stats",
    "TrendBadge",
    "ChartData",
    "TimelineEntry",
    # Config
    "PriceTrendsConfig",
    "StorageConfig",
    "CurrencyConfig",
    "SeriesConfig",
    "LoaderConfig",
    "load_config",
    # Exceptions
    "PriceTrendsError",
    "ConfigError",
    "StorageError",
    "CurrencyError",
]
