"""Tell a measurement payload apart from an error payload.

Tidepool answers ``200 OK`` both for the measurement array and, in some failure
modes, for an error object. The JSON shape is the only reliable discriminator:
an array is data, an object with a status is an error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Union

from pydantic import TypeAdapter, ValidationError

from models.tidepool import RawMeasurement, ServiceError
from services.errors import MalformedPayload

logger = logging.getLogger(__name__)

_MEASUREMENTS = TypeAdapter(List[RawMeasurement])


@dataclass(frozen=True)
class Success:
    measurements: List[RawMeasurement]


@dataclass(frozen=True)
class Failure:
    error: ServiceError


Classification = Union[Success, Failure]


def classify(raw: bytes) -> Classification:
    """Parse ``raw`` as measurements, falling back to the error shape.

    Raises ``MalformedPayload`` when neither shape matches.
    """
    try:
        measurements = _MEASUREMENTS.validate_json(raw)
    except ValidationError as measurement_exc:
        try:
            error = ServiceError.model_validate_json(raw)
        except ValidationError:
            logger.warning(
                "Payload matched neither measurement nor error shape",
                extra={"reason": _first_error(measurement_exc)},
            )
            raise MalformedPayload(_first_error(measurement_exc)) from measurement_exc
        logger.info("Payload classified as service error", extra={"status": error.status})
        return Failure(error=error)

    logger.debug("Payload classified as measurements", extra={"record_count": len(measurements)})
    return Success(measurements=measurements)


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    return errors[0].get("msg", str(exc))
