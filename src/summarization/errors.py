"""Classification of transport failures into retryable and terminal.

Client errors (bad request, bad credential) cannot be fixed by sending the
same request again. Request timeouts, rate limits and overloaded servers
usually clear up on their own, so only those are retried.
"""

from typing import Any

import httpx

from src.core.logging import redact

from .models import ClassifiedError

RETRYABLE_STATUS_CODES: frozenset[int] = frozenset({408, 429, 500, 502, 503, 504})

UNKNOWN_ERROR = "Unknown error"


def extract_error_message(body: Any) -> str:
    """
    Pull a human-readable message out of an error body.

    Understands ``{"error": "..."}``, ``{"error": {"message": "..."}}``
    and ``{"message": "..."}``; anything else yields a generic fallback.
    """
    if isinstance(body, dict):
        error_field = body.get("error")
        if isinstance(error_field, str) and error_field:
            return error_field
        if isinstance(error_field, dict):
            message = error_field.get("message")
            if isinstance(message, str) and message:
                return message
            return UNKNOWN_ERROR
        message = body.get("message")
        if isinstance(message, str) and message:
            return message
    elif isinstance(body, str) and body.strip():
        return body.strip()[:200]
    return UNKNOWN_ERROR


def classify(status_code: int, body: Any = None) -> ClassifiedError:
    """
    Classify an HTTP error response.

    Args:
        status_code: HTTP status (>= 400)
        body: Decoded JSON body, raw text, or None

    Returns:
        ClassifiedError with a redacted ``HTTP <status>: <message>`` message
    """
    message = redact(extract_error_message(body))
    return ClassifiedError(
        code=str(status_code),
        message=f"HTTP {status_code}: {message}",
        retryable=status_code in RETRYABLE_STATUS_CODES,
        status_code=status_code,
    )


def classify_network_error(error: Exception) -> ClassifiedError:
    """No response was received at all. Always retryable."""
    code = "timeout" if isinstance(error, httpx.TimeoutException) else "network"
    detail = str(error) or type(error).__name__
    return ClassifiedError(
        code=code,
        message=f"Network error: {redact(detail)}",
        retryable=True,
    )


def classify_request_error(error: Exception) -> ClassifiedError:
    """The request itself is unusable (bad URL, scheme, or redirect loop). Never retryable."""
    if isinstance(error, httpx.InvalidURL):
        code = "invalid_url"
    elif isinstance(error, httpx.UnsupportedProtocol):
        code = "unsupported_protocol"
    elif isinstance(error, httpx.TooManyRedirects):
        code = "too_many_redirects"
    else:
        code = "request"
    detail = str(error) or type(error).__name__
    return ClassifiedError(
        code=code,
        message=f"Request error: {redact(detail)}",
        retryable=False,
    )
