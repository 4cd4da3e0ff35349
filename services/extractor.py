"""Turn raw feed entries into display-ready smbg readings."""

from __future__ import annotations

import logging
import math
from typing import Iterable, List

from pydantic import ValidationError

from models.records import SMBG, NormalizedReading
from models.tidepool import RawMeasurement, SmbgFields

logger = logging.getLogger(__name__)

MMOL_TO_MG_DL = 18
NATIVE_UNITS = "mmol/L"

_TIMESTAMP_LENGTH = len("YYYY-MM-DDTHH:MM:SS")


def to_display_value(raw_value: float) -> str:
    """Convert mmol/L to mg/dL, truncating toward zero.

    Raises ``ValueError`` when the converted value is not finite.
    """
    converted = raw_value * MMOL_TO_MG_DL
    if not math.isfinite(converted):
        raise ValueError(f"value {raw_value!r} does not convert to a finite mg/dL reading")
    return str(math.trunc(converted))


class ReadingExtractor:
    """Pure extraction component; keeps feed order and never re-sorts."""

    def __init__(self, subtype: str = SMBG) -> None:
        self.subtype = subtype

    def extract(self, measurements: Iterable[RawMeasurement]) -> List[NormalizedReading]:
        readings: List[NormalizedReading] = []
        for measurement in measurements:
            if measurement.type != self.subtype:
                continue
            reading = self._normalize(measurement)
            if reading is not None:
                readings.append(reading)
        return readings

    def _normalize(self, measurement: RawMeasurement) -> NormalizedReading | None:
        try:
            fields = SmbgFields(
                device_time=measurement.device_time,
                value=measurement.value,
                units=measurement.units,
            )
        except ValidationError as exc:
            logger.warning(
                "Skipping reading with unusable fields",
                extra={"reason": exc.errors()[0].get("msg", str(exc))},
            )
            return None

        device_time = fields.device_time or ""
        if len(device_time) < _TIMESTAMP_LENGTH:
            logger.warning(
                "Skipping reading without a usable device time",
                extra={"reason": f"deviceTime={fields.device_time!r}"},
            )
            return None
        if fields.value is None:
            logger.warning("Skipping reading without a value", extra={"reason": "missing value"})
            return None

        try:
            value = to_display_value(fields.value)
        except ValueError as exc:
            logger.warning("Skipping reading with an out-of-range value", extra={"reason": str(exc)})
            return None

        # The feed is assumed to report mmol/L; other units are flagged, not converted.
        if fields.units and fields.units.lower() != NATIVE_UNITS.lower():
            logger.warning(
                "Reading reported in unexpected units, converting as mmol/L",
                extra={"units": fields.units},
            )

        return NormalizedReading(
            date=device_time[0:10],
            time=device_time[11:19],
            value=value,
        )


def extract(measurements: Iterable[RawMeasurement], subtype: str = SMBG) -> List[NormalizedReading]:
    return ReadingExtractor(subtype).extract(measurements)
