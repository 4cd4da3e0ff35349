"""HTTP route definitions for the JSON API."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response

from app.schemas import Reading, ReadingsResponse, ReportRequest
from services.errors import (
    AuthError,
    FetchError,
    MalformedPayload,
    ReportError,
    ServiceReportedError,
    UnsupportedDataType,
    UpstreamUnavailable,
)
from services.report import ReportService, build_default_report_service

router = APIRouter()

PDF_MEDIA_TYPE = "application/pdf"
PDF_FILENAME = "tidepool.pdf"


def get_report_service() -> ReportService:
    return build_default_report_service()


def status_for(exc: ReportError) -> int:
    """HTTP status returned to our caller for a pipeline failure."""
    if isinstance(exc, AuthError):
        return status.HTTP_401_UNAUTHORIZED
    if isinstance(exc, (ServiceReportedError, UnsupportedDataType)):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, (FetchError, MalformedPayload)):
        return status.HTTP_502_BAD_GATEWAY
    if isinstance(exc, UpstreamUnavailable):
        return status.HTTP_504_GATEWAY_TIMEOUT
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _error_detail(exc: ReportError) -> Any:
    if isinstance(exc, ServiceReportedError):
        return {"message": "Tidepool reported an error.", "service_error": exc.error.model_dump()}
    if isinstance(exc, (AuthError, FetchError)):
        return {"message": str(exc), "status": exc.status, "status_text": exc.status_text}
    return str(exc)


def _http_error(exc: ReportError) -> HTTPException:
    return HTTPException(status_code=status_for(exc), detail=_error_detail(exc))


def pdf_response(document: bytes) -> Response:
    return Response(
        content=document,
        media_type=PDF_MEDIA_TYPE,
        headers={"Content-Disposition": f'inline; filename="{PDF_FILENAME}"'},
    )


@router.post(
    "/readings",
    response_model=ReadingsResponse,
    summary="Fetch normalized smbg readings for a Tidepool account.",
)
def get_readings(
    payload: ReportRequest,
    service: ReportService = Depends(get_report_service),
) -> ReadingsResponse:
    try:
        records = service.fetch_readings(
            payload.credentials(), payload.date_range(), payload.datatype
        )
    except ReportError as exc:
        raise _http_error(exc) from exc
    readings = [Reading.from_record(record) for record in records]
    return ReadingsResponse(count=len(readings), readings=readings)


@router.post(
    "/reports",
    response_class=Response,
    summary="Render the smbg readings of a Tidepool account as a PDF.",
    responses={200: {"content": {PDF_MEDIA_TYPE: {}}}},
)
def create_report(
    payload: ReportRequest,
    service: ReportService = Depends(get_report_service),
) -> Response:
    try:
        document = service.build_report(
            payload.credentials(), payload.date_range(), payload.datatype
        )
    except ReportError as exc:
        raise _http_error(exc) from exc
    return pdf_response(document)


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}
