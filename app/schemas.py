"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from models.records import OfflineReading, Reading, format_timestamp
from services.aggregator import StatisticsSummary

# int is listed before float so integral device values are echoed unchanged.
MetricField = Union[int, float, str, None]


class ReadingOut(BaseModel):
    """A recorded reading as returned by ``/api/data`` and ``/api/history``."""

    model_config = ConfigDict(from_attributes=True)

    temp: MetricField = None
    hum: MetricField = None
    soil: MetricField = None
    status: str
    timestamp: datetime

    @field_serializer("timestamp")
    def _serialize_timestamp(self, value: datetime) -> str:
        return format_timestamp(value)

    @classmethod
    def from_reading(cls, reading: Reading) -> "ReadingOut":
        return cls.model_validate(reading)


class OfflineReadingOut(BaseModel):
    """Placeholder payload returned with 503 when the device cannot be reached."""

    model_config = ConfigDict(from_attributes=True)

    error: str
    message: str
    temp: str
    hum: str
    soil: str
    status: str

    @classmethod
    def from_offline(cls, offline: OfflineReading) -> "OfflineReadingOut":
        return cls.model_validate(offline)


class StatisticsOut(BaseModel):
    """Aggregates over the retained history; metric fields are 2-decimal floats."""

    avgTemp: Optional[float] = Field(default=None)
    avgHum: Optional[float] = Field(default=None)
    avgSoil: Optional[float] = Field(default=None)
    minTemp: Optional[float] = Field(default=None)
    maxTemp: Optional[float] = Field(default=None)
    minHum: Optional[float] = Field(default=None)
    maxHum: Optional[float] = Field(default=None)
    minSoil: Optional[float] = Field(default=None)
    maxSoil: Optional[float] = Field(default=None)
    dangerCount: int = Field(..., ge=0)
    safeCount: int = Field(..., ge=0)
    totalReadings: int = Field(..., ge=0)

    @classmethod
    def from_summary(cls, summary: StatisticsSummary) -> "StatisticsOut":
        return cls(
            avgTemp=summary.temp.mean,
            avgHum=summary.hum.mean,
            avgSoil=summary.soil.mean,
            minTemp=summary.temp.minimum,
            maxTemp=summary.temp.maximum,
            minHum=summary.hum.minimum,
            maxHum=summary.hum.maximum,
            minSoil=summary.soil.minimum,
            maxSoil=summary.soil.maximum,
            dangerCount=summary.danger_count,
            safeCount=summary.safe_count,
            totalReadings=summary.total_readings,
        )


class MessageResponse(BaseModel):
    """Acknowledgement payload for mutating operations."""

    message: str
