"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Union

PLACEHOLDER = "--"
STATUS_SAFE = "SAFE"
STATUS_DANGER = "DANGER"
STATUS_OFFLINE = "OFFLINE"
STATUS_UNKNOWN = "UNKNOWN"

# Values are kept exactly as the device reported them: numbers, or the
# placeholder string when a sensor is faulty.
MetricValue = Union[float, int, str, None]


def format_timestamp(value: datetime) -> str:
    """Render a timestamp as ISO-8601 UTC with millisecond precision and a ``Z``."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    text = value.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


@dataclass(frozen=True, slots=True)
class DeviceSample:
    """A reading as reported by the device, before the service timestamps it."""

    temp: MetricValue
    hum: MetricValue
    soil: MetricValue
    status: str

    def stamp(self, timestamp: datetime) -> "Reading":
        return Reading(
            temp=self.temp,
            hum=self.hum,
            soil=self.soil,
            status=self.status,
            timestamp=timestamp,
        )


@dataclass(frozen=True, slots=True)
class Reading:
    """One timestamped sample retained in history."""

    temp: MetricValue
    hum: MetricValue
    soil: MetricValue
    status: str
    timestamp: datetime


@dataclass(frozen=True, slots=True)
class ReachabilityFailure:
    """Outcome of a device read that timed out, failed, or returned garbage."""

    message: str


@dataclass(frozen=True, slots=True)
class OfflineReading:
    """Synthesized response returned to callers when the device is unreachable."""

    message: str
    error: str = "Device not reachable"
    temp: str = PLACEHOLDER
    hum: str = PLACEHOLDER
    soil: str = PLACEHOLDER
    status: str = STATUS_OFFLINE
