"""
Typed outcome of a redirect-controlled request.

A probe request never follows redirects. When the server answers with a
redirect, the probe is "denied" and the destination it would have
followed is reported as `attempted_destination`.
"""

from __future__ import annotations

from dataclasses import dataclass

import httpx


@dataclass(frozen=True)
class RedirectOutcome:
    """Result of a request issued with redirect following disabled."""

    denied: bool
    attempted_destination: str = ""
    status_code: int = 0

    @classmethod
    def from_response(cls, response: httpx.Response) -> RedirectOutcome:
        """Build an outcome from a response received without following redirects.

        `response.next_request` is set by httpx for a 3xx with a Location
        header and already carries the absolute target URL.
        """
        next_request = response.next_request
        if response.has_redirect_location and next_request is not None:
            return cls(
                denied=True,
                attempted_destination=str(next_request.url),
                status_code=response.status_code,
            )
        return cls(denied=False, status_code=response.status_code)
