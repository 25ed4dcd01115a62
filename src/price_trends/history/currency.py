"""Static-rate currency converter and price formatting."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from price_trends.core.config import DEFAULT_RATES, CurrencyConfig
from price_trends.core.exceptions import CurrencyError

_SYMBOLS = {"USD": "$"}
_CENT = Decimal("0.01")


def round_price(amount: float) -> float:
    """Round to two decimals, halves away from zero."""
    return float(Decimal(str(amount)).quantize(_CENT, rounding=ROUND_HALF_UP))


def format_price(amount: float, currency: str) -> str:
    """Format a price with its currency symbol, e.g. ``$ 12.00`` or ``SAR 12.00``."""
    code = currency.upper()
    return f"{_SYMBOLS.get(code, code)} {amount:.2f}"


class StaticRateConverter:
    """Converts through USD using a fixed rate table.

    Parameters
    ----------
    display_currency : str
        Currency every converted price is expressed in.
    rates : dict[str, float] | None
        Units of each currency per 1 USD. Defaults to the built-in table.
    """

    def __init__(
        self,
        display_currency: str = "SAR",
        rates: dict[str, float] | None = None,
    ) -> None:
        self._rates = {k.upper(): v for k, v in (rates or DEFAULT_RATES).items()}
        self._display = display_currency.upper()
        self._rate(self._display)

    @classmethod
    def from_config(
        cls, config: CurrencyConfig, display_currency: str | None = None
    ) -> StaticRateConverter:
        """Build from config, optionally overriding the display currency."""
        return cls(
            display_currency=display_currency or config.display_currency,
            rates=config.rates,
        )

    @property
    def display_currency_code(self) -> str:
        return self._display

    def _rate(self, currency: str) -> float:
        try:
            return self._rates[currency]
        except KeyError:
            raise CurrencyError(
                f"No conversion rate for currency {currency!r}",
                context={"currency": currency},
            ) from None

    def convert(self, price: float, from_currency: str) -> float:
        """Convert ``price`` into the display currency.

        Same-currency prices are returned untouched; anything else is
        converted via USD and rounded to cents.
        """
        source = from_currency.upper()
        if source == self._display:
            return price
        in_usd = price / self._rate(source)
        return round_price(in_usd * self._rate(self._display))

    def format(self, amount: float) -> str:
        """Format an already-converted amount in the display currency."""
        return format_price(amount, self._display)
