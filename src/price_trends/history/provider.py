"""Collaborator protocols — the seams between the engine and the outside.

Architecture
------------
The engine never talks to a database or a rate service directly. It
depends on two narrow protocols:

    ObservationStore → SeriesLoader → engine ← CurrencyConverter

- **ObservationStore** returns raw ``PriceObservation`` rows for a product,
  optionally time-filtered and capped.

- **CurrencyConverter** maps a price in its recorded currency to the
  user's display currency.

Any object with the right shape satisfies them; ``SqliteObservationStore``
and ``StaticRateConverter`` are the built-in implementations.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from price_trends.core.models import PriceObservation


@runtime_checkable
class ObservationStore(Protocol):
    """Read side of the price history storage collaborator."""

    async def fetch_observations(
        self,
        product_id: str,
        since: str | None,
        limit: int,
        *,
        newest_first: bool = False,
    ) -> list[PriceObservation]:
        """Fetch up to ``limit`` observations for a product.

        Parameters
        ----------
        product_id : str
            The product whose history is requested.
        since : str | None
            ISO-8601 lower bound on ``observed_at`` (inclusive), or None
            for the whole history.
        limit : int
            Maximum number of rows to return.
        newest_first : bool
            When True the most recent ``limit`` rows are selected;
            otherwise the oldest. Callers must not rely on the order
            of the returned list.
        """
        ...


@runtime_checkable
class CurrencyConverter(Protocol):
    """Currency collaborator: one display currency, one conversion function."""

    @property
    def display_currency_code(self) -> str: ...

    def convert(self, price: float, from_currency: str) -> float:
        """Convert ``price`` from ``from_currency`` into the display currency."""
        ...
