"""
Base SERP Parser Classes and Utilities.

Provides common functionality for mobile SERP parsers:
- BaseSerpParser abstract base class
- Selector-driven text/attribute extraction with first/last/nth indexing
- Keyword list and ranked result extraction

Once a document has been parsed, extraction never raises: a missing node
or a broken selector yields an empty string or an empty list.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from urllib.parse import quote_plus

from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

from serpcraw.search.models import ResultRecord, SerpSource
from serpcraw.search.parser_config import (
    EngineParserConfig,
    SelectorConfig,
    get_parser_config_manager,
)
from serpcraw.utils.logging import get_logger

logger = get_logger(__name__)


class BaseSerpParser(ABC):
    """
    Base class for SERP parsers.

    Provides common functionality for:
    - Loading selectors from search_parsers.yaml
    - Scoped selector lookups with indexing
    - Keyword and result-list extraction

    Subclasses supply the destination link of each result container.
    """

    def __init__(self, engine_name: str, source: SerpSource):
        """
        Initialize parser.

        Args:
            engine_name: Name of the engine section in config (e.g., "baidu_mobile").
            source: Source tag stamped on every extracted record.
        """
        self.engine_name = engine_name
        self.source = source
        self._config: EngineParserConfig | None = None

    @property
    def config(self) -> EngineParserConfig:
        """Get parser configuration (lazy-loaded)."""
        if self._config is None:
            config = get_parser_config_manager().get_engine_config(self.engine_name)
            if config is None:
                raise ValueError(f"No parser configuration for engine: {self.engine_name}")
            self._config = config
        return self._config

    def reload_config(self) -> None:
        """Force reload of configuration."""
        self._config = None

    def get_selector(self, name: str) -> SelectorConfig | None:
        """Get selector configuration by name."""
        return self.config.get_selector(name)

    # =========================================================================
    # Element lookup
    # =========================================================================

    def find_elements(
        self,
        soup: BeautifulSoup | Tag,
        selector_name: str,
        parent: Tag | None = None,
    ) -> list[Tag]:
        """
        Find elements using configured selector.

        Args:
            soup: Parsed document.
            selector_name: Name of selector from config.
            parent: Element to scope the search to.

        Returns:
            List of matching elements in document order.
        """
        selector_config = self.get_selector(selector_name)
        if selector_config is None:
            logger.warning(f"Selector '{selector_name}' not configured for {self.engine_name}")
            return []

        search_context = parent if parent is not None else soup

        try:
            return search_context.select(selector_config.selector)
        except SelectorSyntaxError as e:
            logger.warning(
                f"Selector '{selector_name}' failed",
                selector=selector_config.selector,
                diagnostic=selector_config.diagnostic_message,
                error=str(e),
            )
            return []

    def select_value(
        self,
        soup: BeautifulSoup | Tag,
        selector_name: str,
        parent: Tag | None = None,
        default: str = "",
    ) -> str:
        """
        Read a field through a configured selector.

        The selector's index picks one match (0 first, -1 last, n nth);
        without an index the text of all matches is joined. With an
        attribute configured, the attribute of the picked match (or of the
        first match) is returned instead of text.

        Returns:
            Trimmed text or attribute value, `default` when nothing matches.
        """
        selector_config = self.get_selector(selector_name)
        if selector_config is None:
            return default

        elements = self.find_elements(soup, selector_name, parent)
        if not elements:
            return default

        if selector_config.index is None:
            picked = elements
        else:
            try:
                picked = [elements[selector_config.index]]
            except IndexError:
                return default

        if selector_config.attribute:
            return self._extract_attr(picked[0], selector_config.attribute, default)

        return "".join(el.get_text() for el in picked).strip()

    def _extract_text(self, element: Tag | None, default: str = "") -> str:
        """Safely extract trimmed text from element."""
        if element is None:
            return default
        return element.get_text().strip() or default

    def _extract_attr(self, element: Tag | None, name: str, default: str = "") -> str:
        """Safely extract an attribute from element."""
        if element is None:
            return default
        value = element.get(name)
        if value is None:
            return default
        if isinstance(value, list):
            # Multi-valued attributes such as class
            return " ".join(value)
        return str(value)

    # =========================================================================
    # Extraction
    # =========================================================================

    def extract_keywords(self, soup: BeautifulSoup) -> list[str]:
        """
        Extract related/expansion keywords.

        Blocks are read in configured order, elements in page order.
        Duplicates are kept.
        """
        keywords: list[str] = []
        for selector_name in self.config.keyword_selectors:
            for element in self.find_elements(soup, selector_name):
                keywords.append(self._extract_text(element))
        return keywords

    def extract_results(self, soup: BeautifulSoup) -> list[ResultRecord]:
        """
        Extract ranked result records in page order.

        Rank starts at the engine's configured base (0 or 1).
        """
        records = []
        containers = self.find_elements(soup, "results_container")

        for position, container in enumerate(containers):
            rank = position + self.config.rank_base
            records.append(self._extract_single_result(container, rank))

        logger.debug(
            "Extracted SERP results",
            engine=self.engine_name,
            result_count=len(records),
        )
        return records

    def extract_all(self, soup: BeautifulSoup) -> tuple[list[str], list[ResultRecord]]:
        """Extract keywords and results from one document."""
        return self.extract_keywords(soup), self.extract_results(soup)

    def _extract_single_result(self, container: Tag, rank: int) -> ResultRecord:
        """Extract a single record from its container."""
        return ResultRecord.build(
            rank=rank,
            source=self.source,
            title=self.select_value(container, "title"),
            description=self.select_value(container, "description"),
            timestamp_text=self.select_value(container, "timestamp"),
            display_link=self.select_value(container, "display_link"),
            resolved_link=self._extract_link(container, rank),
        )

    @abstractmethod
    def _extract_link(self, container: Tag, rank: int) -> str:
        """
        Extract the destination URL of one result container.

        Args:
            container: Result container element.
            rank: Rank of the result (for logging).

        Returns:
            Destination URL or "" when unavailable.
        """
        pass

    def build_search_url(self, query: str) -> str:
        """
        Build search URL for this engine.

        Args:
            query: Search query (will be URL-encoded).

        Returns:
            Complete search URL.
        """
        return self.config.build_search_url(quote_plus(query))
