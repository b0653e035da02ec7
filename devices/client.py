"""HTTP client for the sensor device's reading endpoint."""

from __future__ import annotations

import logging
import time
from functools import lru_cache
from typing import Any, Optional, Union

import httpx

from models.records import STATUS_UNKNOWN, DeviceSample, ReachabilityFailure
from settings import get_settings

logger = logging.getLogger(__name__)

FetchOutcome = Union[DeviceSample, ReachabilityFailure]

_METRIC_FIELDS = ("temp", "hum", "soil")


class MalformedPayloadError(ValueError):
    """Raised internally when the device body is not a flat JSON object."""


def _is_scalar(value: Any) -> bool:
    # bool is an int subclass, but the device never reports metrics as booleans.
    return isinstance(value, (int, float, str)) and not isinstance(value, bool)


class DeviceClient:
    """Issues one bounded-timeout read against the device per call.

    Every failure mode (timeout, refused connection, non-2xx status, body that
    is not a JSON object) resolves to a :class:`ReachabilityFailure`; no
    transport exception leaves :meth:`fetch_reading`. There are no retries.
    """

    def __init__(
        self,
        base_url: str,
        path: str = "/data",
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.path = path if path.startswith("/") else f"/{path}"
        self.timeout = timeout
        self._transport = transport

    @property
    def url(self) -> str:
        return f"{self.base_url}{self.path}"

    async def fetch_reading(self) -> FetchOutcome:
        start = time.perf_counter()
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.get(self.url)
                response.raise_for_status()
                sample = self._parse_payload(response.json())
        except httpx.TimeoutException as exc:
            return self._failure(f"timeout of {int(self.timeout * 1000)}ms exceeded", exc)
        except httpx.HTTPStatusError as exc:
            return self._failure(
                f"Request failed with status code {exc.response.status_code}",
                exc,
                http_status=exc.response.status_code,
            )
        except (httpx.HTTPError, httpx.InvalidURL, ValueError) as exc:
            # ValueError covers JSON decoding errors and MalformedPayloadError.
            return self._failure(str(exc) or exc.__class__.__name__, exc)

        logger.debug(
            "Device reading received",
            extra={
                "device_url": self.url,
                "status": sample.status,
                "elapsed_ms": int((time.perf_counter() - start) * 1000),
            },
        )
        return sample

    def _failure(
        self, message: str, exc: Exception, http_status: Optional[int] = None
    ) -> ReachabilityFailure:
        logger.warning(
            "Device not reachable",
            extra={
                "device_url": self.url,
                "reason": exc.__class__.__name__,
                "http_status": http_status,
            },
        )
        return ReachabilityFailure(message=message)

    @staticmethod
    def _parse_payload(payload: Any) -> DeviceSample:
        if not isinstance(payload, dict):
            raise MalformedPayloadError(
                f"Unexpected device payload of type {type(payload).__name__}"
            )
        metrics = {name: payload.get(name) for name in _METRIC_FIELDS}
        for name, value in metrics.items():
            if value is not None and not _is_scalar(value):
                raise MalformedPayloadError(
                    f"Unexpected value of type {type(value).__name__} for {name!r}"
                )
        status = payload.get("status")
        if status is not None and not _is_scalar(status):
            raise MalformedPayloadError(
                f"Unexpected value of type {type(status).__name__} for 'status'"
            )
        return DeviceSample(
            status=str(status) if status is not None else STATUS_UNKNOWN,
            **metrics,
        )


@lru_cache
def build_default_device_client(
    base_url: Optional[str] = None,
    path: Optional[str] = None,
) -> DeviceClient:
    settings = get_settings()
    return DeviceClient(
        base_url=settings.device_base_url if base_url is None else base_url,
        path=settings.device_read_path if path is None else path,
        timeout=settings.device_timeout_seconds,
    )
