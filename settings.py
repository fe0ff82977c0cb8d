from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


DEFAULT_OBSERVATIONS_URI = (
    "http://example.com/OGCSensorThings/v1.0/Datastreams(240959)/Observations"
)
DEFAULT_PERIOD_SECONDS = 300.0

_OBSERVATIONS_URI_ENV = "SAMPLER_OBSERVATIONS_URI"
_PERIOD_ENV = "SAMPLER_PERIOD_SECONDS"
_TIMEZONE_ENV = "SAMPLER_TIMEZONE"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    observations_uri: str
    period_seconds: float
    timezone: Optional[str]
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_period(default: float) -> float:
    value = os.getenv(_PERIOD_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_timezone() -> Optional[str]:
    value = os.getenv(_TIMEZONE_ENV)
    if value is None:
        return None
    candidate = value.strip()
    if not candidate:
        return None
    try:
        ZoneInfo(candidate)
    except (ZoneInfoNotFoundError, ValueError):
        return None
    return candidate


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        observations_uri=_read_str_env(_OBSERVATIONS_URI_ENV, DEFAULT_OBSERVATIONS_URI),
        period_seconds=_read_period(DEFAULT_PERIOD_SECONDS),
        timezone=_read_timezone(),
        log_level=_read_log_level("INFO"),
    )
