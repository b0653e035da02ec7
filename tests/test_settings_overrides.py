from __future__ import annotations

from typing import Iterable

from datastore.history_buffer import build_default_history
from devices.client import build_default_device_client
from services.telemetry import build_default_service
from settings import get_settings


def _clear_caches(caches: Iterable) -> None:
    for cache in caches:
        cache.cache_clear()


_CACHES = (
    get_settings,
    build_default_device_client,
    build_default_history,
    build_default_service,
)


def test_defaults_without_environment(monkeypatch) -> None:
    for name in (
        "DEVICE_BASE_URL",
        "DEVICE_READ_PATH",
        "DEVICE_TIMEOUT_MS",
        "HISTORY_CAPACITY",
        "HISTORY_DEFAULT_LIMIT",
        "EXPORT_FILENAME",
        "CORS_ALLOW_ORIGINS",
    ):
        monkeypatch.delenv(name, raising=False)
    _clear_caches(_CACHES)

    try:
        settings = get_settings()
        assert settings.device_base_url == "http://192.168.4.1"
        assert settings.device_read_path == "/data"
        assert settings.device_timeout_seconds == 5.0
        assert settings.history_capacity == 1000
        assert settings.history_default_limit == 100
        assert settings.export_filename == "sensor-data.csv"
        assert settings.cors_allow_origins == ("*",)
    finally:
        _clear_caches(_CACHES)


def test_environment_overrides_apply(monkeypatch) -> None:
    monkeypatch.setenv("DEVICE_BASE_URL", "http://10.0.0.7/")
    monkeypatch.setenv("DEVICE_READ_PATH", "/sensors")
    monkeypatch.setenv("DEVICE_TIMEOUT_MS", "1500")
    monkeypatch.setenv("HISTORY_CAPACITY", "25")
    monkeypatch.setenv("HISTORY_DEFAULT_LIMIT", "10")
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "http://a.test, http://b.test")
    _clear_caches(_CACHES)

    try:
        service = build_default_service()
        assert service.client.url == "http://10.0.0.7/sensors"
        assert service.client.timeout == 1.5
        assert service.history.capacity == 25
        assert service.default_limit == 10
        assert get_settings().cors_allow_origins == ("http://a.test", "http://b.test")
    finally:
        _clear_caches(_CACHES)


def test_invalid_numbers_fall_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("DEVICE_TIMEOUT_MS", "soon")
    monkeypatch.setenv("HISTORY_CAPACITY", "-3")
    _clear_caches(_CACHES)

    try:
        settings = get_settings()
        assert settings.device_timeout_ms == 5000
        assert settings.history_capacity == 1000
    finally:
        _clear_caches(_CACHES)
