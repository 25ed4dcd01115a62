"""Custom exception hierarchy for price-trends."""

from typing import Any


class PriceTrendsError(Exception):
    """Base exception for all price-trends errors.

    All exceptions carry an optional `context` dict for structured error
    metadata that can be logged or serialized without parsing the message.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.context = context or {}


class ConfigError(PriceTrendsError):
    """Invalid or missing configuration.

    Raised by load_config() during startup. Should be treated as fatal.

    Context keys:
        field: str — the config field that failed validation
        value: Any — the invalid value
    """


class StorageError(PriceTrendsError):
    """Observation store operation failed.

    Policy: the series loader absorbs it and degrades to an empty history.
    Direct callers of the store (CLI imports) see it raised.

    Context keys:
        operation: str — "fetch", "insert", "migrate", etc.
        product_id: str | None — the product involved
    """


class CurrencyError(PriceTrendsError):
    """A currency code could not be resolved to a conversion rate.

    Policy: raise. Conversion is the collaborator's failure mode and is
    never papered over with an unconverted price.

    Context keys:
        currency: str — the unknown code
    """
