from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, Response
from fastapi.templating import Jinja2Templates

from app.api import get_report_service, pdf_response, status_for
from models.records import SMBG, Credentials, DateRange
from services.errors import (
    AuthError,
    FetchError,
    MalformedPayload,
    ReportError,
    ServiceReportedError,
)
from services.report import ReportService


templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))

logger = logging.getLogger(__name__)

router = APIRouter(include_in_schema=False)


def _error_context(exc: ReportError) -> dict[str, Any]:
    context: dict[str, Any] = {"heading": "Report failed", "message": str(exc)}
    if isinstance(exc, ServiceReportedError):
        context["heading"] = "Tidepool reported an error"
        context["message"] = "Please check your credentials and date range."
        context["service_error"] = exc.error
    elif isinstance(exc, AuthError):
        context["heading"] = "Login failed"
        context["message"] = exc.status_text
        context["status"] = exc.status
    elif isinstance(exc, FetchError):
        context["heading"] = "Data request failed"
        context["message"] = exc.status_text
        context["status"] = exc.status
    elif isinstance(exc, MalformedPayload):
        context["heading"] = "Unexpected response from Tidepool"
        context["message"] = (
            "Tidepool answered in a format this service does not understand. "
            "This is not something you can fix; please try again later."
        )
    return context


def _render_error(request: Request, status_code: int, context: dict[str, Any]) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "report/error.html",
        context,
        status_code=status_code,
    )


@router.get("/", name="report_form", response_class=HTMLResponse)
async def report_form(request: Request) -> HTMLResponse:
    return templates.TemplateResponse(request, "report/form.html", {"default_datatype": SMBG})


@router.post("/opts", name="report_submit")
def report_submit(
    request: Request,
    useremail: str = Form(...),
    password: str = Form(...),
    startdate: Optional[str] = Form(None),
    enddate: Optional[str] = Form(None),
    datatype: str = Form(SMBG),
    service: ReportService = Depends(get_report_service),
) -> Response:
    try:
        date_range = DateRange.from_form(startdate, enddate)
    except ValueError as exc:
        return _render_error(
            request,
            status.HTTP_400_BAD_REQUEST,
            {"heading": "Invalid date", "message": str(exc)},
        )

    credentials = Credentials(identifier=useremail.strip(), secret=password)
    try:
        document = service.build_report(credentials, date_range, datatype.strip() or SMBG)
    except ReportError as exc:
        logger.warning("Report request failed: %s", type(exc).__name__, extra={"reason": str(exc)})
        return _render_error(request, status_for(exc), _error_context(exc))

    return pdf_response(document)
