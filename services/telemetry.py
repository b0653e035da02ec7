"""Telemetry ingestion: device reads, bounded history, statistics and export."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from functools import lru_cache
from typing import Callable, Optional, Union

from datastore.history_buffer import HistoryBuffer, build_default_history
from devices.client import DeviceClient, build_default_device_client
from models.records import (
    MetricValue,
    OfflineReading,
    ReachabilityFailure,
    Reading,
    format_timestamp,
)
from services.aggregator import Aggregator, StatisticsSummary
from settings import get_settings

logger = logging.getLogger(__name__)

CSV_HEADER = "Timestamp,Temperature (°C),Humidity (%),Soil Moisture (%),Status"
DEFAULT_HISTORY_LIMIT = 100
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

Clock = Callable[[], datetime]
CurrentReading = Union[Reading, OfflineReading]


class EmptyHistoryError(LookupError):
    """Raised when an operation needs recorded readings and there are none."""


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _format_cell(value: MetricValue) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def parse_limit(raw: Union[str, int, None], default: int = DEFAULT_HISTORY_LIMIT) -> int:
    """Coerce a ``limit`` query value, falling back to ``default``.

    Only the leading integer of a string counts, so ``"5abc"`` is 5 and
    ``"10.5"`` is 10. Missing, non-numeric, zero and negative values all
    resolve to the default.
    """
    if raw is None:
        return default
    if isinstance(raw, int):
        return raw if raw > 0 else default
    match = _LEADING_INT.match(raw)
    if match is None:
        return default
    parsed = int(match.group(1))
    return parsed if parsed > 0 else default


class TelemetryService:
    """Owns the history buffer and exposes the dashboard's data operations."""

    def __init__(
        self,
        client: DeviceClient,
        history: HistoryBuffer,
        aggregator: Aggregator,
        clock: Optional[Clock] = None,
        default_limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> None:
        self.client = client
        self.history = history
        self.aggregator = aggregator
        self._clock = clock or _utc_now
        self.default_limit = default_limit

    async def get_current_reading(self) -> CurrentReading:
        """Fetch a fresh reading and record it; failures are returned, not stored."""
        outcome = await self.client.fetch_reading()
        if isinstance(outcome, ReachabilityFailure):
            return OfflineReading(message=outcome.message)

        reading = outcome.stamp(self._clock())
        self.history.append(reading)
        return reading

    def get_history(self, limit: Union[str, int, None] = None) -> list[Reading]:
        count = parse_limit(limit, self.default_limit)
        entries = self.history.tail(count)
        logger.debug(
            "History requested", extra={"limit": count, "row_count": len(entries)}
        )
        return entries

    def get_statistics(self) -> StatisticsSummary:
        return self.aggregator.summarize(self.history.snapshot())

    def clear_history(self) -> str:
        removed = self.history.clear()
        logger.info("History cleared", extra={"row_count": removed})
        return "History cleared"

    def export_csv(self) -> str:
        entries = self.history.snapshot()
        if not entries:
            raise EmptyHistoryError("No data to export.")

        rows = [CSV_HEADER]
        rows.extend(
            ",".join(
                (
                    format_timestamp(entry.timestamp),
                    _format_cell(entry.temp),
                    _format_cell(entry.hum),
                    _format_cell(entry.soil),
                    entry.status,
                )
            )
            for entry in entries
        )
        logger.info("History exported", extra={"row_count": len(entries)})
        return "\n".join(rows)


@lru_cache
def build_default_service() -> TelemetryService:
    """Factory that wires the service with the configured device and buffer."""
    settings = get_settings()
    return TelemetryService(
        client=build_default_device_client(),
        history=build_default_history(),
        aggregator=Aggregator(),
        default_limit=settings.history_default_limit,
    )
