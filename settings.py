from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Tuple


_DEVICE_URL_ENV = "DEVICE_BASE_URL"
_DEVICE_PATH_ENV = "DEVICE_READ_PATH"
_DEVICE_TIMEOUT_ENV = "DEVICE_TIMEOUT_MS"
_HISTORY_CAPACITY_ENV = "HISTORY_CAPACITY"
_HISTORY_LIMIT_ENV = "HISTORY_DEFAULT_LIMIT"
_EXPORT_FILENAME_ENV = "EXPORT_FILENAME"
_CORS_ORIGINS_ENV = "CORS_ALLOW_ORIGINS"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    device_base_url: str
    device_read_path: str
    device_timeout_ms: int
    history_capacity: int
    history_default_limit: int
    export_filename: str
    cors_allow_origins: Tuple[str, ...]
    log_level: str

    @property
    def device_timeout_seconds(self) -> float:
        return self.device_timeout_ms / 1000.0


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_positive_int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_origins(default: Tuple[str, ...]) -> Tuple[str, ...]:
    value = os.getenv(_CORS_ORIGINS_ENV)
    if value is None:
        return default
    origins = tuple(part.strip() for part in value.split(",") if part.strip())
    return origins or default


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
        device_base_url=_read_str_env(_DEVICE_URL_ENV, "http://192.168.4.1").rstrip("/"),
        device_read_path=_read_str_env(_DEVICE_PATH_ENV, "/data"),
        device_timeout_ms=_read_positive_int_env(_DEVICE_TIMEOUT_ENV, 5000),
        history_capacity=_read_positive_int_env(_HISTORY_CAPACITY_ENV, 1000),
        history_default_limit=_read_positive_int_env(_HISTORY_LIMIT_ENV, 100),
        export_filename=_read_str_env(_EXPORT_FILENAME_ENV, "sensor-data.csv"),
        cors_allow_origins=_read_origins(("*",)),
        log_level=_read_log_level("INFO"),
    )
