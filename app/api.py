"""HTTP route definitions for the service."""

from __future__ import annotations

from typing import Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from fastapi.responses import JSONResponse

from app.schemas import MessageResponse, OfflineReadingOut, ReadingOut, StatisticsOut
from models.records import OfflineReading
from services.telemetry import EmptyHistoryError, TelemetryService, build_default_service
from settings import get_settings

router = APIRouter()


def get_service() -> TelemetryService:
    return build_default_service()


@router.get(
    "/api/data",
    response_model=ReadingOut,
    responses={status.HTTP_503_SERVICE_UNAVAILABLE: {"model": OfflineReadingOut}},
    summary="Read the device now and record the reading.",
)
async def get_current_reading(
    service: TelemetryService = Depends(get_service),
) -> Union[ReadingOut, JSONResponse]:
    result = await service.get_current_reading()
    if isinstance(result, OfflineReading):
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=OfflineReadingOut.from_offline(result).model_dump(),
        )
    return ReadingOut.from_reading(result)


@router.get(
    "/api/history",
    response_model=list[ReadingOut],
    summary="Return the most recent recorded readings, oldest first.",
)
async def get_history(
    limit: Optional[str] = Query(
        default=None, description="Number of readings to return (defaults to 100)."
    ),
    service: TelemetryService = Depends(get_service),
) -> list[ReadingOut]:
    return [ReadingOut.from_reading(reading) for reading in service.get_history(limit)]


@router.delete(
    "/api/history",
    response_model=MessageResponse,
    summary="Discard every recorded reading.",
)
async def clear_history(
    service: TelemetryService = Depends(get_service),
) -> MessageResponse:
    return MessageResponse(message=service.clear_history())


@router.get(
    "/api/stats",
    response_model=StatisticsOut,
    summary="Summary statistics over the recorded history.",
)
async def get_statistics(
    service: TelemetryService = Depends(get_service),
) -> StatisticsOut:
    return StatisticsOut.from_summary(service.get_statistics())


@router.get(
    "/api/export",
    response_class=Response,
    responses={
        status.HTTP_200_OK: {"content": {"text/csv": {}}},
        status.HTTP_404_NOT_FOUND: {"description": "No readings recorded yet."},
    },
    summary="Download the recorded history as CSV.",
)
async def export_csv(
    service: TelemetryService = Depends(get_service),
) -> Response:
    try:
        body = service.export_csv()
    except EmptyHistoryError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exc),
        ) from exc
    filename = get_settings().export_filename
    return Response(
        content=body,
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck(
    service: TelemetryService = Depends(get_service),
) -> dict[str, Union[str, int]]:
    return {
        "status": "ok",
        "device_url": service.client.url,
        "history_size": len(service.history),
        "history_capacity": service.history.capacity,
    }


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}
