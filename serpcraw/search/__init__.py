"""
serpcraw search module.
Mobile SERP extraction for Baidu and Shenma, link classification and
redirect-destination recovery.
"""

from serpcraw.search.link_classifier import classify_link, parse_link
from serpcraw.search.link_resolver import LinkResolver
from serpcraw.search.models import PageType, ResultRecord, SerpSource
from serpcraw.search.parsers import (
    BaiduMobileParser,
    BaseSerpParser,
    ShenmaMobileParser,
    get_available_parsers,
    get_parser,
)
from serpcraw.search.serp_client import ParserNotAvailableError, SerpClient, get_serp_client

__all__ = [
    "ResultRecord",
    "PageType",
    "SerpSource",
    "classify_link",
    "parse_link",
    "LinkResolver",
    "BaseSerpParser",
    "BaiduMobileParser",
    "ShenmaMobileParser",
    "get_parser",
    "get_available_parsers",
    "SerpClient",
    "ParserNotAvailableError",
    "get_serp_client",
]
