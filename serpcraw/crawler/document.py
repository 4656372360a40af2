"""
Response body decoding and HTML document parsing.

Some servers send gzip bodies without a Content-Encoding header, so the
body itself is sniffed: when it opens as a gzip stream the decompressed
bytes are parsed, otherwise the raw body is.
"""

from __future__ import annotations

import gzip
import zlib

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

from serpcraw.crawler.errors import MalformedDocumentError
from serpcraw.utils.config import get_settings
from serpcraw.utils.logging import get_logger

logger = get_logger(__name__)


def gunzip_body(raw_body: bytes) -> bytes | None:
    """Decompress a gzip body.

    Returns:
        Decompressed bytes, or None if the body is not a valid gzip stream.
    """
    try:
        return gzip.decompress(raw_body)
    except (OSError, EOFError, zlib.error):
        return None


def parse_document(
    raw_body: bytes | str,
    html_parser: str | None = None,
) -> BeautifulSoup:
    """Parse a response body into a queryable document.

    Args:
        raw_body: Response body, possibly gzip-compressed.
        html_parser: BeautifulSoup tree builder. Uses settings if None.

    Returns:
        BeautifulSoup document.

    Raises:
        MalformedDocumentError: The body could not be parsed as HTML.
    """
    if not isinstance(raw_body, (bytes, str)):
        raise MalformedDocumentError(
            f"Body must be bytes or str, got {type(raw_body).__name__}"
        )

    if html_parser is None:
        html_parser = get_settings().parser.html_parser

    candidates: list[bytes | str] = []
    if isinstance(raw_body, bytes):
        decompressed = gunzip_body(raw_body)
        if decompressed is not None:
            logger.debug(
                "Body is gzip-compressed",
                compressed_size=len(raw_body),
                size=len(decompressed),
            )
            candidates.append(decompressed)
    candidates.append(raw_body)

    last_error: Exception | None = None
    for body in candidates:
        try:
            return BeautifulSoup(body, html_parser)
        except ParserRejectedMarkup as e:
            last_error = e
            logger.debug("HTML parser rejected markup", error=str(e))

    raise MalformedDocumentError(f"HTML parsing failed: {last_error}") from last_error
