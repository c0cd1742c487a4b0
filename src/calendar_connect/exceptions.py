"""Calendar Connect exceptions.

Every failure surfaced by the client is a ``ConnectError``. Subclasses
identify the failure kind and carry a stable ``code`` so callers can branch
without parsing messages:

    try:
        await client.events.list()
    except RateLimitError as e:
        wait(e.retry_after)
    except ConnectError as e:
        print(e.code, e)
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any

import httpx


class ConnectError(Exception):
    """Base exception for Calendar Connect errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        status_code: int | None = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(message)


class AuthenticationError(ConnectError):
    """Raised when credentials are missing, rejected or cannot be refreshed."""

    def __init__(self, message: str = "Authentication failed", status_code: int | None = None):
        super().__init__(message, "AUTH_ERROR", status_code)


class NotFoundError(ConnectError):
    """Raised when the requested resource does not exist."""

    def __init__(self, message: str = "Resource not found", status_code: int | None = 404):
        super().__init__(message, "NOT_FOUND", status_code)


class ValidationError(ConnectError):
    """Raised when the API rejects the request payload."""

    def __init__(
        self,
        message: str = "Validation failed",
        details: Any = None,
        status_code: int | None = None,
    ):
        self.details = details
        super().__init__(message, "VALIDATION_ERROR", status_code)


class RateLimitError(ConnectError):
    """Raised when the rate limit is exceeded.

    ``retry_after`` is the server's hint in seconds, or None if absent.
    """

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        retry_after: int | None = None,
        status_code: int | None = 429,
    ):
        self.retry_after = retry_after
        super().__init__(message, "RATE_LIMIT", status_code)


class ServerError(ConnectError):
    """Raised when the API returns a 5xx gateway or server failure."""

    def __init__(self, message: str = "Server error", status_code: int | None = None):
        super().__init__(message, "SERVER_ERROR", status_code)


class NetworkError(ConnectError):
    """Raised when no response was received (DNS, connect, timeout)."""

    def __init__(self, message: str = "Network request failed"):
        super().__init__(message, "NETWORK_ERROR")


SERVER_ERROR_STATUSES = frozenset({500, 502, 503, 504})


def parse_retry_after(value: str | None) -> int | None:
    """Parse a Retry-After header into seconds.

    Accepts delta-seconds ("60") or an HTTP-date. Returns None when the
    header is missing or unparsable.
    """
    if not value:
        return None

    value = value.strip()
    try:
        return int(value)
    except ValueError:
        pass

    try:
        retry_at = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if retry_at is None:
        return None
    if retry_at.tzinfo is None:
        retry_at = retry_at.replace(tzinfo=timezone.utc)

    delta = (retry_at - datetime.now(timezone.utc)).total_seconds()
    return max(0, math.ceil(delta))


def _response_body(response: httpx.Response) -> dict[str, Any]:
    """Decode an error body, returning {} for anything that isn't a JSON object."""
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def error_from_response(response: httpx.Response) -> ConnectError:
    """Map an error response to the matching ConnectError subclass.

    Args:
        response: A response with a non-2xx status.

    Returns:
        The exception to raise (not raised here).
    """
    status = response.status_code
    body = _response_body(response)
    message = body.get("message") or f"Request failed with status code {status}"

    if status in (401, 403):
        return AuthenticationError(message, status_code=status)
    if status == 404:
        return NotFoundError(message, status_code=status)
    if status in (400, 422):
        return ValidationError(message, details=body.get("details"), status_code=status)
    if status == 429:
        retry_after = parse_retry_after(response.headers.get("retry-after"))
        return RateLimitError(message, retry_after=retry_after, status_code=status)
    if status in SERVER_ERROR_STATUSES:
        return ServerError(message, status_code=status)
    return ConnectError(message, code=body.get("code"), status_code=status)
