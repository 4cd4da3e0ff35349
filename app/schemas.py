"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field, SecretStr

from models.records import SMBG, Credentials, DateRange, NormalizedReading


class ReportRequest(BaseModel):
    """Credentials and filters for one report."""

    email: str = Field(..., min_length=1, description="Tidepool login e-mail.")
    password: SecretStr
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    datatype: str = Field(default=SMBG, description="Measurement type; only smbg is supported.")

    def credentials(self) -> Credentials:
        return Credentials(identifier=self.email, secret=self.password.get_secret_value())

    def date_range(self) -> DateRange:
        return DateRange(start=self.start_date, end=self.end_date)


class Reading(BaseModel):
    date: str
    time: str
    value: str = Field(..., description="Glucose value in mg/dL.")

    @classmethod
    def from_record(cls, record: NormalizedReading) -> "Reading":
        return cls(date=record.date, time=record.time, value=record.value)


class ReadingsResponse(BaseModel):
    """Normalized readings in feed order."""

    count: int = Field(..., ge=0)
    readings: List[Reading] = Field(default_factory=list)
