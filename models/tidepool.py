"""Pydantic models for the two payload shapes returned by the Tidepool data API."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class RawMeasurement(BaseModel):
    """One entry of the measurement feed.

    The feed mixes many measurement types that share a sparse schema (payload,
    annotations, device metadata, ...). Field types differ between subtypes, so
    the shared fields are left untyped here and only checked by
    ``SmbgFields`` once an entry is known to be a supported reading.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: Any = None
    device_time: Any = Field(default=None, alias="deviceTime")
    value: Any = None
    units: Any = None


class SmbgFields(BaseModel):
    """Typed view of the fields an smbg entry must carry to become a reading."""

    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    device_time: Optional[str] = None
    value: Optional[float] = None
    units: Optional[str] = None


class ServiceError(BaseModel):
    """Object-shaped error body, e.g. for invalid credentials."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    status: int
    id: str = ""
    code: str = ""
    message: str = ""
