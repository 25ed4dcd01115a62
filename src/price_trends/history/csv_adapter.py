"""CSV observation adapter — imports price history from CSV exports.

Any raw format can be ingested by writing an adapter that produces
PriceObservation records; this one handles spreadsheet and database dumps.
"""

from __future__ import annotations

import csv
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from price_trends.core.models import PriceObservation

logger = logging.getLogger(__name__)

# Common column name mappings for auto-detection
_PRICE_ALIASES = {"price", "Price", "PRICE", "amount", "Amount"}
_TIME_ALIASES = {
    "scraped_at", "observed_at", "timestamp", "Timestamp", "date", "Date", "DATE",
}
_CURRENCY_ALIASES = {"currency", "Currency", "CURRENCY"}


def _find_column(headers: list[str], aliases: set[str]) -> str | None:
    """Find the first header that matches any alias."""
    for h in headers:
        if h in aliases:
            return h
    return None


class CSVObservationAdapter:
    """Transforms CSV rows into PriceObservation records.

    Parameters
    ----------
    default_currency : str
        Currency for rows without a currency column or value.
    price_col, time_col, currency_col : str | None
        Explicit column names. Auto-detected if None.
    time_format : str | None
        strptime format tried when a timestamp is not ISO-8601.
    """

    def __init__(
        self,
        default_currency: str = "SAR",
        price_col: str | None = None,
        time_col: str | None = None,
        currency_col: str | None = None,
        time_format: str | None = None,
    ) -> None:
        self._default_currency = default_currency
        self._price_col = price_col
        self._time_col = time_col
        self._currency_col = currency_col
        self._time_format = time_format

    def _parse_time(self, raw: str) -> datetime | None:
        try:
            return datetime.fromisoformat(raw)
        except ValueError:
            pass
        if self._time_format:
            try:
                return datetime.strptime(raw, self._time_format)
            except ValueError:
                pass
        return None

    def adapt(self, raw_data: Any) -> list[PriceObservation]:
        """Parse CSV rows (list of dicts) into observations, ascending by time."""
        if not raw_data:
            return []

        headers = list(raw_data[0].keys())
        price_col = self._price_col or _find_column(headers, _PRICE_ALIASES)
        time_col = self._time_col or _find_column(headers, _TIME_ALIASES)
        currency_col = self._currency_col or _find_column(headers, _CURRENCY_ALIASES)

        if price_col is None:
            raise ValueError(f"Cannot find price column in headers: {headers}")
        if time_col is None:
            raise ValueError(f"Cannot find timestamp column in headers: {headers}")

        observations: list[PriceObservation] = []
        for row in raw_data:
            observed_at = self._parse_time(row.get(time_col) or "")
            if observed_at is None:
                logger.warning("Skipping row with unparseable timestamp: %s", row.get(time_col))
                continue

            currency = (row.get(currency_col) if currency_col else None) or self._default_currency
            observations.append(
                PriceObservation(
                    price=float(row[price_col]),
                    currency=currency,
                    observed_at=observed_at,
                )
            )

        return sorted(observations, key=lambda o: o.observed_at)


def load_csv_observations(filepath: str, **adapter_kwargs: Any) -> list[PriceObservation]:
    """Convenience function: load observations from a CSV file.

    Raises FileNotFoundError for a missing file and ValueError (pydantic
    ValidationError) for negative prices.
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"CSV file not found: {filepath}")

    with open(path, newline="") as f:
        rows = list(csv.DictReader(f))

    adapter = CSVObservationAdapter(**adapter_kwargs)
    return adapter.adapt(rows)
