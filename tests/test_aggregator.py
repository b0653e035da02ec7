"""Unit tests for the aggregation logic."""

from __future__ import annotations

from datetime import datetime, timezone

from models.records import Reading
from services.aggregator import Aggregator, MetricSummary, parse_numeric


def _reading(temp, hum=50, soil=40, status: str = "SAFE") -> Reading:
    """Helper to build deterministic readings."""

    return Reading(
        temp=temp,
        hum=hum,
        soil=soil,
        status=status,
        timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
    )


def test_summarize_empty_history_is_zero_filled() -> None:
    summary = Aggregator().summarize([])

    zero = MetricSummary(mean=0.0, minimum=0.0, maximum=0.0)
    assert summary.temp == zero
    assert summary.hum == zero
    assert summary.soil == zero
    assert summary.danger_count == 0
    assert summary.safe_count == 0
    assert summary.total_readings == 0


def test_placeholders_are_excluded_but_counted() -> None:
    readings = [_reading(20), _reading(30), _reading("--")]

    summary = Aggregator().summarize(readings)

    assert summary.temp == MetricSummary(mean=25.0, minimum=20.0, maximum=30.0)
    assert summary.total_readings == 3


def test_values_are_rounded_to_two_decimals() -> None:
    readings = [_reading(20.111), _reading(20.222), _reading(20.334)]

    summary = Aggregator().summarize(readings)

    assert summary.temp.mean == 20.22
    assert summary.temp.minimum == 20.11
    assert summary.temp.maximum == 20.33


def test_numeric_strings_are_parsed() -> None:
    readings = [_reading("21.5", hum="40"), _reading(22.5, hum=60)]

    summary = Aggregator().summarize(readings)

    assert summary.temp.mean == 22.0
    assert summary.hum == MetricSummary(mean=50.0, minimum=40.0, maximum=60.0)


def test_metric_with_only_placeholders_reports_no_data() -> None:
    readings = [_reading(20, soil="--"), _reading(22, soil=None)]

    summary = Aggregator().summarize(readings)

    assert summary.soil == MetricSummary()
    assert summary.temp.mean == 21.0


def test_status_counts() -> None:
    readings = [
        _reading(20, status="SAFE"),
        _reading(31, status="DANGER"),
        _reading(32, status="DANGER"),
        _reading(25, status="WARNING"),
    ]

    summary = Aggregator().summarize(readings)

    assert summary.danger_count == 2
    assert summary.safe_count == 1
    assert summary.total_readings == 4


def test_parse_numeric_rejects_non_numbers() -> None:
    assert parse_numeric("--") is None
    assert parse_numeric(None) is None
    assert parse_numeric(True) is None
    assert parse_numeric("nan") is None
    assert parse_numeric(" 12.5 ") == 12.5
    assert parse_numeric(7) == 7.0
