"""Failure taxonomy for the analyze pipeline.

Every failure the API can report is an ``AnalysisError`` subclass carrying
its HTTP status and client-facing message. ``details`` is rendered for
validation failures always, for upstream/internal failures only in
development mode, and never for configuration errors.
"""

from enum import Enum


class AnalysisError(Exception):
    status_code: int = 500
    message: str = "Internal server error occurred while processing your request."
    public_details: bool = False

    def __init__(self, message: str | None = None, details: dict[str, str] | str | None = None):
        self.message = message or self.message
        self.details = details
        super().__init__(self.message)

    def visible_details(self, development: bool) -> dict[str, str] | str | None:
        if self.public_details or development:
            return self.details or None
        return None


# --- client input ---


class ValidationFailure(AnalysisError):
    status_code = 400
    public_details = True


class MissingField(ValidationFailure):
    message = "Missing required fields"


class InvalidType(ValidationFailure):
    message = "Invalid input types"


class SizeExceeded(ValidationFailure):
    message = "Input size exceeds limits"


class MalformedBody(ValidationFailure):
    message = "Request body must be valid JSON"


class PayloadTooLarge(ValidationFailure):
    status_code = 413
    message = "Request body too large"


# --- server / upstream ---


class ConfigurationError(AnalysisError):
    status_code = 500
    message = "Server configuration error: API key not configured."

    def visible_details(self, development: bool) -> None:
        return None


class UpstreamTimeout(AnalysisError):
    status_code = 408
    message = "Request timeout - the AI service took too long to respond."


class UpstreamFailure(str, Enum):
    AUTH = "auth"
    RATE_LIMIT = "rate_limit"
    BAD_REQUEST = "bad_request"
    UNAVAILABLE = "unavailable"

    @property
    def message(self) -> str:
        return _FAILURE_MESSAGES[self]


_FAILURE_MESSAGES = {
    UpstreamFailure.AUTH: "API authentication failed. Please contact support.",
    UpstreamFailure.RATE_LIMIT: "Rate limit exceeded. Please try again later.",
    UpstreamFailure.BAD_REQUEST: "Invalid request to AI service. Please check your inputs.",
    UpstreamFailure.UNAVAILABLE: "AI service is temporarily unavailable.",
}


class UpstreamError(AnalysisError):
    """Non-success answer (or transport failure) from the completion service.

    Client status mirrors the upstream class: 5xx upstream -> 500, anything
    else -> 400. Transport failures carry no upstream status and map to 500.
    """

    def __init__(
        self,
        failure: UpstreamFailure,
        upstream_status: int | None = None,
        details: str | None = None,
    ):
        self.failure = failure
        self.upstream_status = upstream_status
        if upstream_status is None or upstream_status >= 500:
            self.status_code = 500
        else:
            self.status_code = 400
        super().__init__(failure.message, details)


class EmptyUpstreamResponse(AnalysisError):
    status_code = 500
    message = "No response content from AI service."


class InternalAnalysisError(AnalysisError):
    status_code = 500
