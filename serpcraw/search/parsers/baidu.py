"""
Baidu Mobile Search Result Parser.

Each result container carries a JSON-like `data-log` attribute written with
single quotes; its `mu` field is the real destination URL.
"""

from __future__ import annotations

import json

from bs4 import Tag

from serpcraw.search.models import SerpSource
from serpcraw.search.parsers.base import BaseSerpParser
from serpcraw.utils.logging import get_logger

logger = get_logger(__name__)


class BaiduMobileParser(BaseSerpParser):
    """Parser for Baidu mobile results (ranks start at 1)."""

    def __init__(self) -> None:
        super().__init__("baidu_mobile", SerpSource.BAIDU_MOBILE)

    def _extract_link(self, container: Tag, rank: int) -> str:
        """Read the destination URL from the container's data-log JSON."""
        attribute = self.config.result_json_attribute or "data-log"
        field = self.config.result_json_link_field

        raw = self._extract_attr(container, attribute).replace("'", '"')

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(
                "Invalid result JSON attribute",
                engine=self.engine_name,
                rank=rank,
                attribute=attribute,
                error=str(e),
            )
            return ""

        if not isinstance(data, dict):
            logger.warning(
                "Result JSON attribute is not an object",
                engine=self.engine_name,
                rank=rank,
                attribute=attribute,
            )
            return ""

        value = data.get(field)
        if value is None:
            return ""
        return value if isinstance(value, str) else json.dumps(value)
