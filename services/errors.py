"""Request-scoped failures raised by the report pipeline."""

from __future__ import annotations

from models.tidepool import ServiceError


class ReportError(Exception):
    """Base class for every failure of a single retrieval-and-render request."""


class _HttpStatusError(ReportError):
    stage = "request"

    def __init__(self, status: int, status_text: str) -> None:
        self.status = status
        self.status_text = status_text
        super().__init__(f"{self.stage} failed with HTTP {status} {status_text}".rstrip())


class AuthError(_HttpStatusError):
    """Login was rejected or returned an unusable response."""

    stage = "Tidepool login"


class FetchError(_HttpStatusError):
    """The data endpoint answered with a non-200 status."""

    stage = "Tidepool data request"


class ServiceReportedError(ReportError):
    """Tidepool returned its own error object instead of measurements."""

    def __init__(self, error: ServiceError) -> None:
        self.error = error
        super().__init__(
            f"Tidepool reported an error: status={error.status} code={error.code!r} "
            f"message={error.message!r}"
        )


class MalformedPayload(ReportError):
    """The data payload matched neither the measurement nor the error shape."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Unexpected Tidepool response: {detail}")


class UpstreamUnavailable(ReportError):
    """Tidepool could not be reached or did not answer in time."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Tidepool is unavailable: {detail}")


class UnsupportedDataType(ReportError):
    def __init__(self, subtype: str) -> None:
        self.subtype = subtype
        super().__init__(f"Data type {subtype!r} is not supported.")


class RenderError(ReportError):
    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Could not render the report: {detail}")
