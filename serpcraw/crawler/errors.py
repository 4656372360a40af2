"""
Fetch and parse errors.

Top-level extraction calls raise only these; once a document exists,
field extraction never fails.
"""

from __future__ import annotations

from typing import Any


class FetchError(Exception):
    """Base exception for fetch operations."""

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.url = url
        self.details = details or {}


class TransportError(FetchError):
    """Raised when the request cannot complete (DNS, connect, TLS, proxy, timeout)."""

    def __init__(self, url: str, cause: Exception, proxy: str | None = None):
        reason = str(cause) or type(cause).__name__
        super().__init__(
            f"Request to {url} failed: {reason}",
            url=url,
            details={"proxy": proxy} if proxy else {},
        )
        self.cause = cause
        self.proxy = proxy


class UnexpectedStatusError(FetchError):
    """Raised when the final response status is not 200.

    Attributes:
        status_code: HTTP status code of the final response
        attempts: Number of attempts made before giving up
    """

    def __init__(self, url: str, status_code: int, attempts: int = 1):
        super().__init__(
            f"Unexpected status {status_code} for {url}",
            url=url,
            details={"attempts": attempts},
        )
        self.status_code = status_code
        self.attempts = attempts


class MalformedDocumentError(Exception):
    """Raised when a body cannot be parsed as HTML, raw or gunzipped."""
