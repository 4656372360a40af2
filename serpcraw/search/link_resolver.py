"""
Redirect-destination recovery.

Result links are often tracking URLs that redirect to the real page. The
resolver requests the tracking URL once without following redirects and
reports where the server tried to send it. This call never raises: every
failure degrades to "".
"""

from __future__ import annotations

from collections.abc import Sequence

from serpcraw.crawler.errors import FetchError
from serpcraw.crawler.http_fetcher import HTTPFetcher
from serpcraw.search.link_classifier import parse_link
from serpcraw.utils.logging import get_logger

logger = get_logger(__name__)


class LinkResolver:
    """Recovers the real destination behind a redirect-wrapped link."""

    def __init__(self, fetcher: HTTPFetcher | None = None) -> None:
        self._fetcher = fetcher or HTTPFetcher()

    def resolve_real_link(
        self,
        redirect_url: str,
        proxy_candidates: Sequence[str] | None = None,
    ) -> str:
        """
        Resolve a redirect-wrapped link.

        Args:
            redirect_url: Tracking/redirect URL taken from a result page.
            proxy_candidates: Optional proxy URLs; one is picked at random.

        Returns:
            The destination URL, or "" if it could not be recovered.
        """
        if redirect_url == "":
            return ""

        try:
            outcome = self._fetcher.probe_redirect(redirect_url, proxy_candidates)
        except FetchError as e:
            logger.warning(
                "Redirect probe failed",
                url=redirect_url[:100],
                error=e.message,
            )
            return ""

        if not outcome.denied:
            logger.warning(
                "Redirect probe returned no redirect",
                url=redirect_url[:100],
                status=outcome.status_code,
            )
            return ""

        destination = outcome.attempted_destination
        parts = parse_link(destination)
        if parts is None or not parts.scheme or not parts.netloc:
            logger.warning(
                "Redirect target is not a well-formed URL",
                url=redirect_url[:100],
                destination=destination[:100],
            )
            return ""

        logger.debug(
            "Resolved real link",
            url=redirect_url[:100],
            destination=destination[:100],
        )
        return destination
