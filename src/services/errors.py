"""
Failure classification for Grok API calls.
Every failure that crosses the client boundary is a GrokApiError.
"""
import json
from typing import Any

import httpx

from ..utils.constants import RETRYABLE_STATUS_CODES


class GrokApiError(Exception):
    """
    Terminal error of a Grok API call.

    Attributes:
        message: Human-readable description.
        status: Upstream HTTP status, or 0 when no HTTP response was received
            (network failure, invalid payload).
        response: Raw error payload from the upstream, if any.
    """

    def __init__(self, message: str, status: int, response: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.response = response

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, "status": self.status, "details": self.response}


def is_retryable(exc: BaseException) -> bool:
    """Rate limits, server errors and anything without an HTTP status are retried."""
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in RETRYABLE_STATUS_CODES
    return True


def read_error_body(response: httpx.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {"error": {"message": response.text}}
    if isinstance(body, dict):
        return body
    return {"error": {"message": json.dumps(body)}}


def to_api_error(exc: BaseException) -> GrokApiError:
    if isinstance(exc, GrokApiError):
        return exc

    if isinstance(exc, httpx.HTTPStatusError):
        body = read_error_body(exc.response)
        return GrokApiError(
            f"Grok API request failed: {json.dumps(body)}",
            exc.response.status_code,
            body,
        )

    reason = str(exc) or type(exc).__name__
    return GrokApiError(f"Grok API request failed: {reason}", 0)
