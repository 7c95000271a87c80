from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from jepx_signals.constants import DEFAULT_CARBON_INTENSITY


_SOURCE_NAME_ENV = "JEPX_SOURCE_NAME"
_SOURCE_URL_ENV = "JEPX_URL"
_CARBON_ENV = "DEFAULT_CARBON_INTENSITY"
_LOG_LEVEL_ENV = "LOG_LEVEL"

_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


@dataclass(frozen=True)
class Settings:
    price_source_name: str
    price_source_url: str
    default_carbon_intensity: float
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed >= 0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip().upper()
    return candidate if candidate in _VALID_LOG_LEVELS else default


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings(
        price_source_name=_read_str_env(_SOURCE_NAME_ENV, "JEPX"),
        price_source_url=_read_str_env(_SOURCE_URL_ENV, "https://www.jepx.jp/"),
        default_carbon_intensity=_read_float_env(_CARBON_ENV, DEFAULT_CARBON_INTENSITY),
        log_level=_read_log_level("INFO"),
    )
