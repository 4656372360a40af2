"""
serpcraw: keyword and ranking extraction from Baidu and Shenma mobile result pages.
"""

from serpcraw.crawler import (
    FetchError,
    HTTPFetcher,
    MalformedDocumentError,
    RedirectOutcome,
    TransportError,
    UnexpectedStatusError,
    parse_document,
)
from serpcraw.search import (
    LinkResolver,
    PageType,
    ResultRecord,
    SerpClient,
    SerpSource,
    classify_link,
    get_serp_client,
)

__version__ = "0.1.0"

__all__ = [
    "SerpClient",
    "get_serp_client",
    "HTTPFetcher",
    "LinkResolver",
    "RedirectOutcome",
    "parse_document",
    "classify_link",
    "ResultRecord",
    "PageType",
    "SerpSource",
    "FetchError",
    "TransportError",
    "UnexpectedStatusError",
    "MalformedDocumentError",
]
