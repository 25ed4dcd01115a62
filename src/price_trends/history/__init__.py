"""Price history access: collaborator protocols and built-in implementations.

Key abstractions:

- ``ObservationStore``: async read interface over stored price observations.
- ``CurrencyConverter``: display currency + conversion function.
- ``SeriesLoader``: wraps a store; ascending order, capped, never raises.

Built-in implementations:

- ``SqliteObservationStore``: aiosqlite-backed history and anchor store.
- ``StaticRateConverter``: USD-based fixed rate table.
- ``CSVObservationAdapter``: parses CSV exports into observations.
"""

from price_trends.history.csv_adapter import CSVObservationAdapter, load_csv_observations
from price_trends.history.currency import StaticRateConverter, format_price, round_price
from price_trends.history.loader import DEFAULT_MAX_POINTS, SeriesLoader
from price_trends.history.provider import CurrencyConverter, ObservationStore
from price_trends.history.store import SqliteObservationStore

__all__ = [
    # Protocols
    "ObservationStore",
    "CurrencyConverter",
    # Loading
    "SeriesLoader",
    "DEFAULT_MAX_POINTS",
    # SQLite
    "SqliteObservationStore",
    # Currency
    "StaticRateConverter",
    "format_price",
    "round_price",
    # CSV
    "CSVObservationAdapter",
    "load_csv_observations",
]
