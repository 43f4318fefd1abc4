from __future__ import annotations

from typing import Optional

PARSE_FAILURE_MESSAGE = "Failed to parse AI analysis"


class AnalysisError(Exception):
    """Base class for every failure the analysis pipeline reports to callers.

    `user_message` is safe to show to an end user; `status_code` is the
    HTTP-equivalent status a transport should answer with.
    """

    status_code: int = 500
    user_message: str = "Analysis failed"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.user_message)


class NoDataError(AnalysisError):
    """Raised when no tabular, analytics or document section qualifies."""

    status_code = 400
    user_message = "No data provided for analysis"


class UpstreamError(AnalysisError):
    """The model endpoint answered with a non-success status or was unreachable.

    `status` is None for transport failures (timeouts, refused connections).
    """

    status_code = 502

    def __init__(self, status: Optional[int], body: str) -> None:
        self.status = status
        self.body = body
        label = status if status is not None else "no response"
        self.user_message = f"Model endpoint error: {label} - {body}"
        super().__init__(self.user_message)


class MalformedResponseError(AnalysisError):
    """The model reply did not carry a text content block."""

    status_code = 502
    user_message = "No text response from model"


class ResponseParseError(AnalysisError):
    """The model did not honor the JSON contract.

    Subclasses keep the diagnostic detail in the exception message; the
    user-facing message is shared so raw model text never leaks.
    """

    status_code = 502
    user_message = PARSE_FAILURE_MESSAGE


class NoJsonFoundError(ResponseParseError):
    """No `{...}` span exists in the model text."""


class InvalidJsonError(ResponseParseError):
    """A brace span exists but no candidate parses as a JSON object."""


class SchemaViolationError(ResponseParseError):
    """Parsed JSON is missing required fields or has the wrong shapes."""
