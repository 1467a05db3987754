"""Error types, HTTP mapping, and structured tool errors."""

from __future__ import annotations

from enum import Enum

import httpx
from pydantic import BaseModel

ANALYSIS_FAILED = "Failed to analyze video"


class ErrorCategory(str, Enum):
    """Categories of errors for diagnostics."""

    INPUT_MISSING = "INPUT_MISSING"
    URL_INVALID = "URL_INVALID"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    API_KEY_MISSING = "API_KEY_MISSING"
    API_PERMISSION_DENIED = "API_PERMISSION_DENIED"
    API_QUOTA_EXCEEDED = "API_QUOTA_EXCEEDED"
    API_INVALID_ARGUMENT = "API_INVALID_ARGUMENT"
    VIDEO_UNAVAILABLE = "VIDEO_UNAVAILABLE"
    NETWORK_ERROR = "NETWORK_ERROR"
    GENERATION_FAILED = "GENERATION_FAILED"
    UNKNOWN = "UNKNOWN"


class SummarizerError(Exception):
    """Base class; ``status_code`` is the HTTP status the adapters answer with."""

    status_code = 500


class InvalidRequestError(SummarizerError):
    """Missing or malformed input."""

    status_code = 400


class MissingInputError(InvalidRequestError):
    """A required field was absent or blank."""


class MethodNotAllowedError(SummarizerError):
    status_code = 405


class UpstreamFetchError(SummarizerError):
    """Metadata or transcript retrieval failed. Recovered by fallback, never returned."""

    status_code = 502


class VideoNotFoundError(UpstreamFetchError):
    """The Data API returned no item for the video ID."""


class GenerationError(SummarizerError):
    """The Gemini call failed."""

    status_code = 500


class ApiKeyMissingError(SummarizerError):
    """A required API key is not configured."""


class ErrorResponse(BaseModel):
    """JSON body of every non-2xx HTTP response."""

    error: str
    details: str | None = None


class ToolError(BaseModel):
    """Structured error returned from the MCP tool."""

    error: str
    category: str
    hint: str
    retryable: bool = False
    retry_after_seconds: int | None = None


def error_response(error: Exception) -> tuple[int, dict]:
    """Map an exception to ``(status_code, body)``.

    Client errors echo their message as ``error``. Everything else becomes a
    500 whose ``details`` carries the underlying message verbatim.
    """
    status = error.status_code if isinstance(error, SummarizerError) else 500
    if status < 500:
        return status, ErrorResponse(error=str(error)).model_dump(exclude_none=True)
    return 500, ErrorResponse(error=ANALYSIS_FAILED, details=str(error)).model_dump()


def _cause_chain(error: BaseException):
    """Yield *error* and every ``__cause__`` behind it."""
    seen: set[int] = set()
    current: BaseException | None = error
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__


def _http_status(error: BaseException) -> int | None:
    """HTTP status carried by a google-genai APIError or googleapiclient HttpError."""
    if isinstance(error, SummarizerError):
        return None
    for attr in ("code", "status_code"):
        value = getattr(error, attr, None)
        if isinstance(value, int):
            return value
    status = getattr(getattr(error, "resp", None), "status", None)
    return status if isinstance(status, int) else None


def categorize_error(error: Exception) -> tuple[ErrorCategory, str]:
    """Map an exception to an ErrorCategory + human-readable hint.

    Decided by exception type and by the HTTP status of the upstream API
    error in the ``__cause__`` chain, never by message text.
    """
    if isinstance(error, InvalidRequestError):
        if isinstance(error, MissingInputError):
            return ErrorCategory.INPUT_MISSING, "Pass a YouTube video URL"
        return (
            ErrorCategory.URL_INVALID,
            "Use a youtube.com/watch?v=, youtu.be/, embed/ or v/ link with an 11-character video ID",
        )
    if isinstance(error, MethodNotAllowedError):
        return ErrorCategory.METHOD_NOT_ALLOWED, "Use GET for health checks and POST to summarize"

    chain = list(_cause_chain(error))
    if any(isinstance(exc, ApiKeyMissingError) for exc in chain):
        return ErrorCategory.API_KEY_MISSING, "Set GEMINI_API_KEY and YOUTUBE_API_KEY"
    if any(isinstance(exc, VideoNotFoundError) for exc in chain):
        return ErrorCategory.VIDEO_UNAVAILABLE, "Video not found, private, or removed"

    status = next((s for s in map(_http_status, chain) if s is not None), None)
    if status in (401, 403):
        return (
            ErrorCategory.API_PERMISSION_DENIED,
            "API key lacks permission for this model or API",
        )
    if status == 429:
        return ErrorCategory.API_QUOTA_EXCEEDED, "Rate limit hit; wait and try again"
    if status == 404:
        if isinstance(error, GenerationError):
            return ErrorCategory.API_INVALID_ARGUMENT, "Unknown model id; check the model name"
        return ErrorCategory.VIDEO_UNAVAILABLE, "Video not found, private, or removed"
    if status == 400:
        return ErrorCategory.API_INVALID_ARGUMENT, "Bad request; check input format"

    if any(isinstance(exc, (TimeoutError, httpx.TimeoutException)) for exc in chain):
        return ErrorCategory.NETWORK_ERROR, "Request timed out; try again or check connectivity"
    if any(isinstance(exc, (ConnectionError, httpx.TransportError)) for exc in chain):
        return ErrorCategory.NETWORK_ERROR, "Network error; check connectivity"
    if isinstance(error, GenerationError):
        return ErrorCategory.GENERATION_FAILED, "Gemini could not produce an analysis"

    return ErrorCategory.UNKNOWN, str(error)


def make_tool_error(error: Exception) -> dict:
    """Create a serialisable ToolError dict from an exception."""
    cat, hint = categorize_error(error)
    retryable = cat in {ErrorCategory.API_QUOTA_EXCEEDED, ErrorCategory.NETWORK_ERROR}
    return ToolError(
        error=str(error),
        category=cat.value,
        hint=hint,
        retryable=retryable,
        retry_after_seconds=60 if cat == ErrorCategory.API_QUOTA_EXCEEDED else None,
    ).model_dump(mode="json")
