"""
Retry policy for SERP page requests.

Requests are retried on response status only: 400 and (by default) any
5xx. Attempts are spaced by a fixed delay. Transport errors are not
retried; they surface to the caller as TransportError.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from serpcraw.utils.config import FetcherConfig


@dataclass(frozen=True)
class FetchRetryPolicy:
    """Fixed-delay retry policy.

    Attributes:
        max_attempts: Total attempts including the first one (default: 3)
        delay_seconds: Fixed wait between attempts (default: 5.0)
        retry_status_codes: Explicit status codes that are retried
        retry_server_errors: Whether every 5xx status is retried

    Example:
        >>> policy = FetchRetryPolicy()
        >>> policy.should_retry_status(500)
        True
        >>> policy.should_retry_status(404)
        False
    """

    max_attempts: int = 3
    delay_seconds: float = 5.0
    retry_status_codes: frozenset[int] = field(default_factory=lambda: frozenset({400}))
    retry_server_errors: bool = True

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.delay_seconds < 0:
            raise ValueError("delay_seconds must be non-negative")

    @classmethod
    def from_config(cls, config: FetcherConfig) -> FetchRetryPolicy:
        """Build a policy from the `fetcher` settings section."""
        return cls(
            max_attempts=config.max_attempts,
            delay_seconds=config.retry_delay_seconds,
            retry_status_codes=frozenset(config.retry_status_codes),
            retry_server_errors=config.retry_server_errors,
        )

    def should_retry_status(self, status: int) -> bool:
        """Check if an HTTP status code is retryable.

        Args:
            status: HTTP status code

        Returns:
            True if the status is listed or is a 5xx with server-error retry on
        """
        if status in self.retry_status_codes:
            return True
        return self.retry_server_errors and 500 <= status <= 599

    def has_attempts_left(self, attempt: int) -> bool:
        """Check whether another attempt may follow `attempt` (1-indexed)."""
        return attempt < self.max_attempts
