"""Configuration loading, validation, and access."""

from __future__ import annotations

import os
from datetime import timedelta
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from price_trends.core.exceptions import ConfigError
from price_trends.core.models import DateLocale

# Rates relative to USD.
DEFAULT_RATES: dict[str, float] = {
    "USD": 1.0,
    "SAR": 3.75,
    "EGP": 30.90,
    "AED": 3.67,
}


class StorageConfig(BaseModel):
    """Observation store configuration."""

    model_config = ConfigDict(frozen=True)

    sqlite_path: str = "./data/price_trends.db"


class CurrencyConfig(BaseModel):
    """Display currency and the static rate table."""

    model_config = ConfigDict(frozen=True)

    display_currency: str = "SAR"
    rates: dict[str, float] = DEFAULT_RATES

    @field_validator("display_currency")
    @classmethod
    def display_currency_upper(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("rates")
    @classmethod
    def rates_usd_based(cls, v: dict[str, float]) -> dict[str, float]:
        rates = {code.upper(): rate for code, rate in v.items()}
        if rates.get("USD") != 1:
            raise ValueError("rates must be USD-based (USD: 1.0)")
        bad = sorted(code for code, rate in rates.items() if rate <= 0)
        if bad:
            raise ValueError(f"rates must be positive, got non-positive for {bad}")
        return rates

    @model_validator(mode="after")
    def display_currency_has_rate(self) -> CurrencyConfig:
        if self.display_currency not in self.rates:
            raise ValueError(
                f"display_currency {self.display_currency!r} has no rate configured"
            )
        return self


class SeriesConfig(BaseModel):
    """Knobs for series loading and boundary synthesis."""

    model_config = ConfigDict(frozen=True)

    max_points: int = 100
    badge_history_limit: int = 50
    staleness_hours: float = 24
    original_offset_days: int = 1
    locale: DateLocale = DateLocale.EN

    @field_validator("max_points", "badge_history_limit")
    @classmethod
    def limit_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("history limits must be >= 1")
        return v

    @field_validator("staleness_hours")
    @classmethod
    def staleness_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("staleness_hours must be > 0")
        return v

    @field_validator("original_offset_days")
    @classmethod
    def offset_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("original_offset_days must be >= 0")
        return v

    @property
    def staleness(self) -> timedelta:
        return timedelta(hours=self.staleness_hours)

    @property
    def original_offset(self) -> timedelta:
        return timedelta(days=self.original_offset_days)


class LoaderConfig(BaseModel):
    """Timeout policy for the external store call."""

    model_config = ConfigDict(frozen=True)

    timeout_seconds: float | None = None

    @field_validator("timeout_seconds")
    @classmethod
    def timeout_positive(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise ValueError("timeout_seconds must be > 0 when set")
        return v


class PriceTrendsConfig(BaseModel):
    """Root configuration for price-trends."""

    model_config = ConfigDict(frozen=True)

    storage: StorageConfig = StorageConfig()
    currency: CurrencyConfig = CurrencyConfig()
    series: SeriesConfig = SeriesConfig()
    loader: LoaderConfig = LoaderConfig()


def load_config(
    config_path: str | None = None,
    env_prefix: str = "PRICE_TRENDS_",
) -> PriceTrendsConfig:
    """Load configuration from environment + YAML file + defaults.

    Resolution order (highest priority first):
    1. Environment variables (PRICE_TRENDS_SERIES__MAX_POINTS, etc.)
    2. YAML file at config_path
    3. Built-in defaults

    Nested keys use double-underscore in env vars:
        PRICE_TRENDS_CURRENCY__DISPLAY_CURRENCY=USD  ->  currency.display_currency
    """
    try:
        yaml_path = _resolve_config_path(config_path)
        base: dict = {}
        if yaml_path is not None:
            base = _load_yaml(yaml_path)

        merged = _overlay_env(base, env_prefix)
        return PriceTrendsConfig.model_validate(merged)
    except Exception as e:
        if isinstance(e, ConfigError):
            raise
        raise ConfigError(str(e), context={"source": "load_config"}) from e


def _resolve_config_path(explicit: str | None) -> Path | None:
    """Determine config file path."""
    if explicit is not None:
        p = Path(explicit)
        if not p.exists():
            raise ConfigError(
                f"Config file not found: {explicit}",
                context={"field": "config_path", "value": explicit},
            )
        return p

    env_path = os.environ.get("PRICE_TRENDS_CONFIG")
    if env_path:
        p = Path(env_path)
        if not p.exists():
            raise ConfigError(
                f"Config file from PRICE_TRENDS_CONFIG not found: {env_path}",
                context={"field": "PRICE_TRENDS_CONFIG", "value": env_path},
            )
        return p

    default = Path("price-trends.yml")
    if default.exists():
        return default

    return None


def _load_yaml(path: Path) -> dict:
    """Load and parse YAML file."""
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(
                f"YAML config must be a mapping, got {type(data).__name__}",
                context={"field": "config_file", "value": str(path)},
            )
        return data
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Failed to parse YAML config: {e}",
            context={"field": "config_file", "value": str(path)},
        ) from e


def _overlay_env(base: dict, prefix: str) -> dict:
    """Overlay PRICE_TRENDS_* environment variables onto a config dict.

    ``PRICE_TRENDS_SERIES__MAX_POINTS=20`` sets ``series.max_points``.
    Currency codes under ``currency.rates`` keep their upper case. A rate
    override extends the YAML rate table, or the built-in table when the
    YAML file sets none. The base dict is never mutated.
    """
    result = dict(base)

    for key, raw in os.environ.items():
        if not key.startswith(prefix):
            continue
        path = key[len(prefix) :].split("__")
        if path == ["CONFIG"]:
            continue

        section, leaf = path[:-1], path[-1]
        node = result
        for name in (p.lower() for p in section):
            child = node.get(name)
            node[name] = dict(child) if isinstance(child, dict) else {}
            node = node[name]

        if [p.lower() for p in section] == ["currency", "rates"]:
            if not node:
                node.update(DEFAULT_RATES)
            node[leaf.upper()] = _cast_env_value(raw)
        else:
            node[leaf.lower()] = _cast_env_value(raw)

    return result


def _cast_env_value(value: str) -> str | int | float | bool | None:
    """Turn an environment string into the scalar it spells."""
    lowered = value.strip().lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    if lowered in ("none", "null"):
        return None
    for cast in (int, float):
        try:
            return cast(value)
        except ValueError:
            continue
    return value
