"""
Combined fetch + parse + extract entry points.

Every method fetches one page (optionally through a random proxy from the
caller's list), parses it and runs the engine's extractors. Only fetch and
parse failures raise; extraction itself never does.
"""

from __future__ import annotations

from collections.abc import Sequence
from functools import lru_cache

from bs4 import BeautifulSoup

from serpcraw.crawler.document import parse_document
from serpcraw.crawler.http_fetcher import HTTPFetcher
from serpcraw.search.link_resolver import LinkResolver
from serpcraw.search.models import ResultRecord
from serpcraw.search.parsers import BaiduMobileParser, BaseSerpParser, ShenmaMobileParser
from serpcraw.search.parsers.registry import get_available_parsers, get_parser
from serpcraw.utils.logging import LogContext, ensure_logging_configured, get_logger

logger = get_logger(__name__)


class ParserNotAvailableError(ValueError):
    """Raised when no parser is registered and configured for an engine."""

    def __init__(self, engine: str, available_engines: list[str] | None = None):
        super().__init__(f"No parser available for engine: {engine}")
        self.engine = engine
        self.available_engines = available_engines or []


class SerpClient:
    """
    Client for Baidu and Shenma mobile result pages.

    Example:
        client = SerpClient()
        keywords, records = client.baidu_word_and_sort(url, ["http://10.0.0.1:8080"])
    """

    def __init__(
        self,
        fetcher: HTTPFetcher | None = None,
        resolver: LinkResolver | None = None,
        html_parser: str | None = None,
    ) -> None:
        self.fetcher = fetcher or HTTPFetcher()
        self.resolver = resolver or LinkResolver(self.fetcher)
        self._html_parser = html_parser
        self._baidu = BaiduMobileParser()
        self._shenma = ShenmaMobileParser()

    # =========================================================================
    # Document
    # =========================================================================

    def get_document(
        self,
        url: str,
        proxy_candidates: Sequence[str] | None = None,
    ) -> BeautifulSoup:
        """
        Fetch a page and parse it.

        Raises:
            TransportError: The request could not complete.
            UnexpectedStatusError: The final status was not 200.
            MalformedDocumentError: The body could not be parsed.
        """
        response = self.fetcher.fetch(url, proxy_candidates)
        return parse_document(response.content, self._html_parser)

    # =========================================================================
    # Engine-agnostic
    # =========================================================================

    def word_list(
        self,
        engine: str,
        url: str,
        proxy_candidates: Sequence[str] | None = None,
    ) -> list[str]:
        """Keywords from the page at `url` using the named engine's parser."""
        parser = self._get_parser(engine)
        with LogContext(engine=parser.engine_name):
            soup = self.get_document(url, proxy_candidates)
            return parser.extract_keywords(soup)

    def sort_list(
        self,
        engine: str,
        url: str,
        proxy_candidates: Sequence[str] | None = None,
    ) -> list[ResultRecord]:
        """Ranked records from the page at `url` using the named engine's parser."""
        parser = self._get_parser(engine)
        with LogContext(engine=parser.engine_name):
            soup = self.get_document(url, proxy_candidates)
            return parser.extract_results(soup)

    def word_and_sort(
        self,
        engine: str,
        url: str,
        proxy_candidates: Sequence[str] | None = None,
    ) -> tuple[list[str], list[ResultRecord]]:
        """Keywords and ranked records from a single fetch of `url`."""
        parser = self._get_parser(engine)
        with LogContext(engine=parser.engine_name):
            soup = self.get_document(url, proxy_candidates)
            keywords, records = parser.extract_all(soup)
            logger.info(
                "Extracted SERP page",
                url=url[:100],
                keyword_count=len(keywords),
                result_count=len(records),
            )
            return keywords, records

    def search(
        self,
        engine: str,
        query: str,
        proxy_candidates: Sequence[str] | None = None,
    ) -> tuple[list[str], list[ResultRecord]]:
        """Build the engine's search URL for `query` and extract the page."""
        url = self._get_parser(engine).build_search_url(query)
        return self.word_and_sort(engine, url, proxy_candidates)

    def resolve_real_link(
        self,
        redirect_url: str,
        proxy_candidates: Sequence[str] | None = None,
    ) -> str:
        """Recover the destination behind a redirect link ("" on failure)."""
        return self.resolver.resolve_real_link(redirect_url, proxy_candidates)

    # =========================================================================
    # Baidu mobile
    # =========================================================================

    def baidu_word_list(
        self, url: str, proxy_candidates: Sequence[str] | None = None
    ) -> list[str]:
        """Baidu mobile related + 'others also searched' keywords."""
        with LogContext(engine=self._baidu.engine_name):
            return self._baidu.extract_keywords(self.get_document(url, proxy_candidates))

    def baidu_sort_list(
        self, url: str, proxy_candidates: Sequence[str] | None = None
    ) -> list[ResultRecord]:
        """Baidu mobile ranked records (1-based)."""
        with LogContext(engine=self._baidu.engine_name):
            return self._baidu.extract_results(self.get_document(url, proxy_candidates))

    def baidu_word_and_sort(
        self, url: str, proxy_candidates: Sequence[str] | None = None
    ) -> tuple[list[str], list[ResultRecord]]:
        """Baidu mobile keywords and records from one fetch."""
        with LogContext(engine=self._baidu.engine_name):
            return self._baidu.extract_all(self.get_document(url, proxy_candidates))

    # =========================================================================
    # Shenma mobile
    # =========================================================================

    def shenma_word_list(
        self, url: str, proxy_candidates: Sequence[str] | None = None
    ) -> list[str]:
        """Shenma mobile related + 'others also searched' keywords."""
        with LogContext(engine=self._shenma.engine_name):
            return self._shenma.extract_keywords(self.get_document(url, proxy_candidates))

    def shenma_sort_list(
        self, url: str, proxy_candidates: Sequence[str] | None = None
    ) -> list[ResultRecord]:
        """Shenma mobile ranked records (0-based)."""
        with LogContext(engine=self._shenma.engine_name):
            return self._shenma.extract_results(self.get_document(url, proxy_candidates))

    def shenma_word_and_sort(
        self, url: str, proxy_candidates: Sequence[str] | None = None
    ) -> tuple[list[str], list[ResultRecord]]:
        """Shenma mobile keywords and records from one fetch."""
        with LogContext(engine=self._shenma.engine_name):
            return self._shenma.extract_all(self.get_document(url, proxy_candidates))

    def _get_parser(self, engine: str) -> BaseSerpParser:
        parser = get_parser(engine)
        if parser is None:
            raise ParserNotAvailableError(engine, get_available_parsers())
        return parser


@lru_cache(maxsize=1)
def get_serp_client() -> SerpClient:
    """Get the shared default SerpClient (configures logging on first use)."""
    ensure_logging_configured()
    return SerpClient()
