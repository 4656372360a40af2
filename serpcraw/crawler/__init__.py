"""
serpcraw crawler module.
Fetching, proxy selection, redirect probing and document parsing.
"""

from serpcraw.crawler.document import gunzip_body, parse_document
from serpcraw.crawler.errors import (
    FetchError,
    MalformedDocumentError,
    TransportError,
    UnexpectedStatusError,
)
from serpcraw.crawler.http_fetcher import FetchResponse, HTTPFetcher, default_transport_factory
from serpcraw.crawler.proxy import RandomProxyPicker, SecureRandomProxyPicker, select_proxy
from serpcraw.crawler.redirect import RedirectOutcome
from serpcraw.crawler.retry import FetchRetryPolicy

__all__ = [
    "HTTPFetcher",
    "FetchResponse",
    "default_transport_factory",
    "FetchRetryPolicy",
    "RandomProxyPicker",
    "SecureRandomProxyPicker",
    "select_proxy",
    "RedirectOutcome",
    "parse_document",
    "gunzip_body",
    "FetchError",
    "TransportError",
    "UnexpectedStatusError",
    "MalformedDocumentError",
]
