"""
Shenma Mobile Search Result Parser.
"""

from __future__ import annotations

from bs4 import Tag

from serpcraw.search.models import SerpSource
from serpcraw.search.parsers.base import BaseSerpParser


class ShenmaMobileParser(BaseSerpParser):
    """Parser for Shenma mobile results (ranks start at 0)."""

    def __init__(self) -> None:
        super().__init__("shenma_mobile", SerpSource.SHENMA_MOBILE)

    def _extract_link(self, container: Tag, rank: int) -> str:
        """Destination is the href of the card header anchor."""
        return self.select_value(container, "real_link")
