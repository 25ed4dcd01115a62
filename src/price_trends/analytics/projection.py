"""Currency projection of raw observations into display series points."""

from __future__ import annotations

from datetime import datetime, timezone

from price_trends.core.models import DateLocale, DisplaySeriesPoint, PriceObservation
from price_trends.history.provider import CurrencyConverter

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MS = 1000

_DATE_FORMATS = {
    DateLocale.EN: "%b %d",
    DateLocale.AR: "%d/%m",
}


def to_timestamp_ms(value: datetime) -> int:
    """Milliseconds since the Unix epoch, computed without float rounding."""
    delta = value - _EPOCH
    return (delta.days * 86_400 + delta.seconds) * _MS + delta.microseconds // _MS


def format_label(value: datetime, locale: DateLocale = DateLocale.EN) -> str:
    return value.strftime(_DATE_FORMATS[DateLocale(locale)])


def project(
    observation: PriceObservation,
    converter: CurrencyConverter,
    locale: DateLocale = DateLocale.EN,
) -> DisplaySeriesPoint:
    """Express one observation in the converter's display currency."""
    return DisplaySeriesPoint(
        timestamp_ms=to_timestamp_ms(observation.observed_at),
        display_price=converter.convert(observation.price, observation.currency),
        formatted_date=format_label(observation.observed_at, locale),
        currency=converter.display_currency_code,
        synthetic=observation.synthetic,
    )


def project_series(
    observations: list[PriceObservation],
    converter: CurrencyConverter,
    locale: DateLocale = DateLocale.EN,
) -> list[DisplaySeriesPoint]:
    """Project every observation, keeping the input order."""
    return [project(obs, converter, locale) for obs in observations]
