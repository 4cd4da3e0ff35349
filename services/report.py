"""Retrieval-and-render orchestration for glucose reports."""

from __future__ import annotations

import logging
import time
from functools import lru_cache
from typing import List, Optional

import httpx

from models.records import SMBG, Credentials, DateRange, NormalizedReading
from services.classifier import Failure, classify
from services.errors import ServiceReportedError, UnsupportedDataType
from services.extractor import ReadingExtractor
from services.renderer import ReportRenderer
from services.tidepool import TidepoolClient
from settings import get_settings

logger = logging.getLogger(__name__)

SUPPORTED_SUBTYPES = frozenset({SMBG})


class ReportService:
    """Runs login, fetch, classification, extraction and rendering for one request.

    The service holds configuration only. Every call builds its own HTTP client,
    buffers and renderer, so concurrent calls never share mutable state.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        title: str = "Glucose Values",
        transport: Optional[httpx.BaseTransport] = None,
        compress: bool = True,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self.title = title
        self.compress = compress
        self._transport = transport

    def fetch_readings(
        self,
        credentials: Credentials,
        date_range: Optional[DateRange] = None,
        subtype: str = SMBG,
    ) -> List[NormalizedReading]:
        if subtype not in SUPPORTED_SUBTYPES:
            raise UnsupportedDataType(subtype)

        start_time = time.perf_counter()
        with TidepoolClient(self.base_url, self.timeout, transport=self._transport) as client:
            session = client.login(credentials)
            raw = client.fetch_measurements(session, subtype, date_range)

        outcome = classify(raw)
        if isinstance(outcome, Failure):
            raise ServiceReportedError(outcome.error)

        readings = ReadingExtractor(subtype).extract(outcome.measurements)
        logger.info(
            "Fetched readings",
            extra={
                "account_id": session.account_id,
                "subtype": subtype,
                "record_count": len(outcome.measurements),
                "reading_count": len(readings),
                "elapsed_ms": int((time.perf_counter() - start_time) * 1000),
            },
        )
        if not readings:
            logger.info("No results were returned from Tidepool", extra={"account_id": session.account_id})
        return readings

    def build_report(
        self,
        credentials: Credentials,
        date_range: Optional[DateRange] = None,
        subtype: str = SMBG,
    ) -> bytes:
        readings = self.fetch_readings(credentials, date_range, subtype)
        return ReportRenderer(title=self.title, compress=self.compress).render(readings)


@lru_cache
def build_default_report_service() -> ReportService:
    """Factory that wires the service from environment settings."""
    settings = get_settings()
    return ReportService(
        base_url=settings.tidepool_base_url,
        timeout=settings.request_timeout,
        title=settings.report_title,
    )
