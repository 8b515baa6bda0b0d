"""Application error hierarchy.

Every error carries the HTTP status it maps to and a ``detail`` that is safe
to show to the end user. ``main`` registers one exception handler for the
base class.
"""

from __future__ import annotations

from enum import Enum


class PromptJudgeError(RuntimeError):
    """Base class for errors surfaced through the HTTP API."""

    status_code = 500
    public_detail = "Internal server error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.public_detail)
        self.message = message or self.public_detail

    @property
    def detail(self) -> str:
        return self.message


class InvalidInputError(PromptJudgeError):
    """Missing, empty or oversized user input, or a rejected business action."""

    status_code = 400
    public_detail = "Invalid request"


class AuthorizationError(PromptJudgeError):
    """Acting on a resource owned by another user."""

    status_code = 403
    public_detail = "Forbidden"


class NotFoundError(PromptJudgeError):
    status_code = 404
    public_detail = "Not found"


class ParseErrorKind(str, Enum):
    NO_JSON_FOUND = "no_json_found"
    MALFORMED_JSON = "malformed_json"
    MISSING_FIELD = "missing_field"
    INVALID_SCORE = "invalid_score"


class ParseError(PromptJudgeError):
    """The model response could not be reduced to a valid analysis."""

    status_code = 500
    public_detail = "Failed to analyze prompt"

    def __init__(self, kind: ParseErrorKind, field: str | None = None, raw_text: str = ""):
        message = f"{kind.value}" if field is None else f"{kind.value}: {field}"
        super().__init__(message)
        self.kind = kind
        self.field = field
        self.raw_text = raw_text

    @property
    def detail(self) -> str:
        return self.public_detail


class ExternalServiceError(PromptJudgeError):
    """The generative model call failed (network, provider error, empty output)."""

    status_code = 503
    public_detail = "Analysis service is temporarily unavailable"

    @property
    def detail(self) -> str:
        return self.public_detail


class ModelTimeoutError(ExternalServiceError):
    public_detail = "Analysis service timed out. Please try again."


class ModelNotConfiguredError(ExternalServiceError):
    public_detail = "Analysis service is not configured"


class PersistenceError(PromptJudgeError):
    """A store write failed after the expensive work already succeeded."""

    status_code = 500
    public_detail = "Failed to save result"
