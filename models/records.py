"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

SMBG = "smbg"


@dataclass(frozen=True, slots=True)
class Credentials:
    """Login identifier (e-mail) and password, held only for one request."""

    identifier: str
    secret: str

    def __repr__(self) -> str:
        return f"Credentials(identifier={self.identifier!r}, secret='***')"


@dataclass(frozen=True, slots=True)
class DateRange:
    """Optional inclusive bounds for the data query."""

    start: Optional[date] = None
    end: Optional[date] = None

    @classmethod
    def from_form(cls, start: Optional[str], end: Optional[str]) -> "DateRange":
        return cls(start=_parse_form_date(start), end=_parse_form_date(end))

    @property
    def is_open(self) -> bool:
        return self.start is None and self.end is None


@dataclass(frozen=True, slots=True)
class TidepoolSession:
    """Session token and account id returned by a successful login."""

    token: str
    account_id: str

    def __repr__(self) -> str:
        return f"TidepoolSession(token='***', account_id={self.account_id!r})"


@dataclass(frozen=True, slots=True)
class NormalizedReading:
    """A single smbg reading ready for display."""

    date: str
    time: str
    value: str

    def as_row(self) -> tuple[str, str, str]:
        return (self.date, self.time, self.value)


def _parse_form_date(value: Optional[str]) -> Optional[date]:
    if value is None:
        return None
    candidate = value.strip()
    if not candidate:
        return None
    try:
        return date.fromisoformat(candidate)
    except ValueError as exc:
        raise ValueError(f"Invalid date {candidate!r}, expected YYYY-MM-DD.") from exc
