"""Unit tests for the device reading client."""

from __future__ import annotations

import asyncio
import logging

import httpx
import pytest

from devices.client import DeviceClient
from models.records import DeviceSample, ReachabilityFailure


def _client(handler) -> DeviceClient:
    return DeviceClient(
        base_url="http://device.local/",
        path="data",
        timeout=5.0,
        transport=httpx.MockTransport(handler),
    )


def test_fetch_reading_parses_device_payload() -> None:
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(
            200, json={"temp": 24.5, "hum": 61, "soil": "--", "status": "SAFE"}
        )

    outcome = asyncio.run(_client(handler).fetch_reading())

    assert seen == ["http://device.local/data"]
    assert outcome == DeviceSample(temp=24.5, hum=61, soil="--", status="SAFE")


def test_missing_status_defaults_to_unknown() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"temp": 20})

    outcome = asyncio.run(_client(handler).fetch_reading())

    assert isinstance(outcome, DeviceSample)
    assert outcome.status == "UNKNOWN"
    assert outcome.hum is None


def test_timeout_resolves_to_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    outcome = asyncio.run(_client(handler).fetch_reading())

    assert outcome == ReachabilityFailure(message="timeout of 5000ms exceeded")


def test_connection_error_carries_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    outcome = asyncio.run(_client(handler).fetch_reading())

    assert isinstance(outcome, ReachabilityFailure)
    assert "connection refused" in outcome.message


def test_error_status_resolves_to_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="boom")

    outcome = asyncio.run(_client(handler).fetch_reading())

    assert outcome == ReachabilityFailure(message="Request failed with status code 500")


def test_non_json_body_is_treated_as_unreachable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>captive portal</html>")

    outcome = asyncio.run(_client(handler).fetch_reading())

    assert isinstance(outcome, ReachabilityFailure)
    assert outcome.message


def test_json_that_is_not_an_object_is_treated_as_unreachable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=[1, 2, 3])

    outcome = asyncio.run(_client(handler).fetch_reading())

    assert isinstance(outcome, ReachabilityFailure)
    assert "list" in outcome.message


@pytest.mark.parametrize(
    "payload",
    [
        {"temp": [21, 22], "hum": 40, "soil": 30, "status": "SAFE"},
        {"temp": 21, "hum": {"value": 40}, "soil": 30, "status": "SAFE"},
        {"temp": 21, "hum": 40, "soil": True, "status": "SAFE"},
        {"temp": 21, "hum": 40, "soil": 30, "status": ["SAFE"]},
    ],
)
def test_non_scalar_values_are_treated_as_unreachable(payload) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=payload)

    outcome = asyncio.run(_client(handler).fetch_reading())

    assert isinstance(outcome, ReachabilityFailure)
    assert "Unexpected value of type" in outcome.message


def test_error_status_is_logged_with_http_status(caplog) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="bad gateway")

    with caplog.at_level(logging.WARNING, logger="devices.client"):
        asyncio.run(_client(handler).fetch_reading())

    [record] = [r for r in caplog.records if r.name == "devices.client"]
    assert record.http_status == 502
    assert record.reason == "HTTPStatusError"
