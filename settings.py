from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


_BASE_URL_ENV = "TIDEPOOL_BASE_URL"
_TIMEOUT_ENV = "TIDEPOOL_TIMEOUT"
_REPORT_TITLE_ENV = "REPORT_TITLE"
_LOG_LEVEL_ENV = "LOG_LEVEL"

DEFAULT_BASE_URL = "https://int-api.tidepool.org"


@dataclass(frozen=True)
class Settings:
    tidepool_base_url: str
    request_timeout: float
    report_title: str
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_timeout(default: float) -> float:
    value = os.getenv(_TIMEOUT_ENV)
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
        tidepool_base_url=_read_str_env(_BASE_URL_ENV, DEFAULT_BASE_URL).rstrip("/"),
        request_timeout=_read_timeout(30.0),
        report_title=_read_str_env(_REPORT_TITLE_ENV, "Glucose Values"),
        log_level=_read_log_level("INFO"),
    )
