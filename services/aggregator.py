"""Aggregation logic for sensor readings."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional

from models.records import STATUS_DANGER, STATUS_SAFE, MetricValue, Reading


@dataclass
class MetricSummary:
    """Mean, minimum and maximum of one metric; ``None`` when nothing parsed."""

    mean: Optional[float] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None


@dataclass
class StatisticsSummary:
    """Statistics derived from a snapshot of the history buffer."""

    temp: MetricSummary
    hum: MetricSummary
    soil: MetricSummary
    danger_count: int = 0
    safe_count: int = 0
    total_readings: int = 0


def parse_numeric(value: MetricValue) -> Optional[float]:
    """Return ``value`` as a finite float, or ``None`` for placeholders and junk."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _summarize_metric(values: Iterable[MetricValue]) -> MetricSummary:
    numbers: List[float] = []
    for value in values:
        parsed = parse_numeric(value)
        if parsed is not None:
            numbers.append(parsed)
    if not numbers:
        return MetricSummary()
    return MetricSummary(
        mean=round(sum(numbers) / len(numbers), 2),
        minimum=round(min(numbers), 2),
        maximum=round(max(numbers), 2),
    )


def _zero_metric() -> MetricSummary:
    return MetricSummary(mean=0.0, minimum=0.0, maximum=0.0)


class Aggregator:
    """Pure aggregation component that can be unit tested in isolation."""

    def summarize(self, readings: Iterable[Reading]) -> StatisticsSummary:
        entries = list(readings)
        if not entries:
            return StatisticsSummary(
                temp=_zero_metric(),
                hum=_zero_metric(),
                soil=_zero_metric(),
            )

        return StatisticsSummary(
            temp=_summarize_metric(entry.temp for entry in entries),
            hum=_summarize_metric(entry.hum for entry in entries),
            soil=_summarize_metric(entry.soil for entry in entries),
            danger_count=sum(1 for entry in entries if entry.status == STATUS_DANGER),
            safe_count=sum(1 for entry in entries if entry.status == STATUS_SAFE),
            total_readings=len(entries),
        )
