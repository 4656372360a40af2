"""HTTP client fetcher for SERP pages."""

from __future__ import annotations

import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

import httpx

from serpcraw.crawler.errors import TransportError, UnexpectedStatusError
from serpcraw.crawler.proxy import RandomProxyPicker, SecureRandomProxyPicker, select_proxy
from serpcraw.crawler.redirect import RedirectOutcome
from serpcraw.crawler.retry import FetchRetryPolicy
from serpcraw.utils.config import FetcherConfig, get_settings
from serpcraw.utils.logging import get_logger

logger = get_logger(__name__)

TransportFactory = Callable[[str | None], httpx.BaseTransport]


def default_transport_factory(proxy: str | None) -> httpx.BaseTransport:
    """Create a real network transport, routed through `proxy` when given."""
    return httpx.HTTPTransport(proxy=proxy)


@dataclass
class FetchResponse:
    """A fully read 200 response. The connection is already released."""

    url: str
    status_code: int
    content: bytes
    headers: dict[str, str] = field(default_factory=dict)
    proxy: str | None = None
    attempts: int = 1


class HTTPFetcher:
    """HTTP client fetcher using httpx.

    Features:
    - Optional per-request proxy chosen at random from caller candidates
    - Fixed-delay retry on 400/5xx responses
    - Redirect probe that reports the target instead of following it

    Each call opens its own client and closes it before returning, so one
    fetcher can be shared across threads.
    """

    def __init__(
        self,
        config: FetcherConfig | None = None,
        *,
        retry_policy: FetchRetryPolicy | None = None,
        proxy_picker: RandomProxyPicker | None = None,
        transport_factory: TransportFactory | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._config = config or get_settings().fetcher
        self.retry_policy = retry_policy or FetchRetryPolicy.from_config(self._config)
        self._proxy_picker = proxy_picker or SecureRandomProxyPicker()
        self._transport_factory = transport_factory or default_transport_factory
        self._sleep = sleep

    @property
    def default_headers(self) -> dict[str, str]:
        """Headers sent with every request."""
        return {
            "Accept": self._config.accept,
            "Accept-Encoding": self._config.accept_encoding,
            "User-Agent": self._config.user_agent,
        }

    def fetch(
        self,
        url: str,
        proxy_candidates: Sequence[str] | None = None,
    ) -> FetchResponse:
        """Fetch URL and return its body.

        Args:
            url: Absolute URL to fetch.
            proxy_candidates: Optional proxy URLs; one is picked at random.

        Returns:
            FetchResponse with the raw (transfer-decoded) body.

        Raises:
            TransportError: The URL is not absolute http(s) or the request
                could not complete.
            UnexpectedStatusError: The final status was not 200.
        """
        proxy = select_proxy(proxy_candidates, self._proxy_picker)
        response, attempts = self._send(url, proxy, follow_redirects=True)

        if response.status_code != 200:
            logger.warning(
                "Unexpected HTTP status",
                url=url[:100],
                status=response.status_code,
                attempts=attempts,
            )
            raise UnexpectedStatusError(url, response.status_code, attempts)

        return FetchResponse(
            url=str(response.url),
            status_code=response.status_code,
            content=response.content,
            headers=dict(response.headers),
            proxy=proxy,
            attempts=attempts,
        )

    def probe_redirect(
        self,
        url: str,
        proxy_candidates: Sequence[str] | None = None,
    ) -> RedirectOutcome:
        """Request URL without following redirects.

        Args:
            url: Redirect-wrapped URL.
            proxy_candidates: Optional proxy URLs; one is picked at random.

        Returns:
            RedirectOutcome; `denied` is True when the server redirected.

        Raises:
            TransportError: The request could not complete, including a
                redirect whose Location is not a usable URL.
        """
        proxy = select_proxy(proxy_candidates, self._proxy_picker)
        response, _ = self._send(url, proxy, follow_redirects=False)
        return RedirectOutcome.from_response(response)

    def _send(
        self,
        url: str,
        proxy: str | None,
        *,
        follow_redirects: bool,
    ) -> tuple[httpx.Response, int]:
        """Send GET with the retry policy applied. Returns (response, attempts)."""
        self._check_url(url, proxy)
        transport = self._transport_factory(proxy)
        policy = self.retry_policy

        with httpx.Client(
            transport=transport,
            headers=self.default_headers,
            timeout=self._config.request_timeout,
            follow_redirects=follow_redirects,
            trust_env=False,
        ) as client:
            attempt = 0
            while True:
                attempt += 1
                try:
                    response = client.get(url)
                except (httpx.HTTPError, httpx.InvalidURL) as e:
                    logger.warning(
                        "HTTP request failed",
                        url=url[:100],
                        proxy=proxy,
                        error=str(e) or type(e).__name__,
                    )
                    raise TransportError(url, e, proxy) from e

                status = response.status_code
                if policy.should_retry_status(status) and policy.has_attempts_left(attempt):
                    logger.info(
                        "Retrying after HTTP status",
                        url=url[:100],
                        status=status,
                        attempt=attempt,
                        max_attempts=policy.max_attempts,
                        delay_seconds=policy.delay_seconds,
                    )
                    self._sleep(policy.delay_seconds)
                    continue

                return response, attempt

    @staticmethod
    def _check_url(url: str, proxy: str | None) -> None:
        """Reject anything but an absolute http(s) URL before any I/O."""
        try:
            parsed = httpx.URL(url)
        except httpx.InvalidURL as e:
            raise TransportError(url, e, proxy) from e

        if parsed.scheme not in ("http", "https") or not parsed.host:
            error = httpx.UnsupportedProtocol(
                f"Request URL must be an absolute http(s) URL: {url!r}"
            )
            logger.warning("Rejected request URL", url=url[:100])
            raise TransportError(url, error, proxy)
