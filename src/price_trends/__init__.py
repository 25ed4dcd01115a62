"""price-trends: price history charts, statistics and trend badges."""

__version__ = "0.1.0"
