"""
Mobile SERP Parsers.

Extracts keyword lists and ranked result records from Baidu and Shenma
mobile result pages.

Design:
- Selectors are loaded from config/search_parsers.yaml (built-in defaults otherwise)
- Extraction never fails once a document exists; missing nodes give empty values
"""

from serpcraw.search.parsers.baidu import BaiduMobileParser
from serpcraw.search.parsers.base import BaseSerpParser
from serpcraw.search.parsers.registry import (
    get_available_parsers,
    get_parser,
    register_parser,
)
from serpcraw.search.parsers.shenma import ShenmaMobileParser

register_parser("baidu_mobile", BaiduMobileParser)
register_parser("shenma_mobile", ShenmaMobileParser)

__all__ = [
    "BaseSerpParser",
    "BaiduMobileParser",
    "ShenmaMobileParser",
    "get_parser",
    "get_available_parsers",
    "register_parser",
]
