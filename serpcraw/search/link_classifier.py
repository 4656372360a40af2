"""
Homepage / inner-page classification of destination URLs.

Rule:
- ""                                          -> empty_link
- not parsable as a URL                       -> invalid_link
- (query == "" and path == "") or path == "/" -> homepage
- anything else                               -> inner_page

A URL with an empty path but a query string ("https://a.com?x=1") is an
inner page, while "https://a.com/?x=1" is a homepage because its path is
exactly "/". Existing consumers depend on this, so it is kept as is.

Parsing follows the generic URL syntax with these rules:
- a scheme followed by anything but "/" is opaque ("mailto:a@b.com",
  "javascript:void(0)") and has no path, so it classifies as homepage
- a port only has to be digits; its range is not checked
- a scheme-less link whose first segment holds ":" ("1abc:x") is invalid
"""

from __future__ import annotations

import re
from urllib.parse import SplitResult, unquote

from serpcraw.search.models import PageType

_CONTROL_CHAR_RE = re.compile(r"[\x00-\x1f\x7f]")
_SCHEME_RE = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*:")
_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_PORT_RE = re.compile(r"(:[0-9]*)?")
_USERINFO_RE = re.compile(r"[A-Za-z0-9\-._:~!$&'()*+,;=%@]*")
# Unreserved and sub-delims plus the few extra characters hosts may carry
_HOST_CHARS = frozenset(
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
    "-._~!$&'()*+,;=:[]<>\""
)


def _valid_host(host: str) -> bool:
    if host.startswith("["):
        close = host.rfind("]")
        if close < 0 or not _PORT_RE.fullmatch(host[close + 1 :]):
            return False
    else:
        colon = host.rfind(":")
        if colon >= 0 and not _PORT_RE.fullmatch(host[colon:]):
            return False

    i = 0
    while i < len(host):
        char = host[i]
        if char == "%":
            escape = host[i : i + 3]
            if _BAD_ESCAPE_RE.match(escape):
                return False
            # Only non-ASCII bytes (and "%25") may be escaped in a host
            if int(escape[1], 16) < 8 and escape != "%25":
                return False
            i += 3
            continue
        if ord(char) < 0x80 and char not in _HOST_CHARS:
            return False
        i += 1
    return True


def _valid_authority(authority: str) -> bool:
    userinfo, at, host = authority.rpartition("@")
    if at and (not _USERINFO_RE.fullmatch(userinfo) or _BAD_ESCAPE_RE.search(userinfo)):
        return False
    return _valid_host(host)


def parse_link(link: str) -> SplitResult | None:
    """Parse a link strictly.

    Returns:
        SplitResult (path left escaped, empty for opaque URLs), or None if
        the link is not a valid URL.
    """
    rest, _, fragment = link.partition("#")
    if _CONTROL_CHAR_RE.search(rest) or _BAD_ESCAPE_RE.search(fragment):
        return None
    if rest.startswith(":"):
        return None

    scheme = ""
    match = _SCHEME_RE.match(rest)
    if match:
        scheme = match.group()[:-1].lower()
        rest = rest[match.end() :]

    rest, _, query = rest.partition("?")

    if not rest.startswith("/"):
        if scheme:
            return SplitResult(scheme, "", "", query, fragment)
        if ":" in rest.partition("/")[0]:
            return None

    netloc = ""
    if rest.startswith("//") and (scheme or not rest.startswith("///")):
        netloc, slash, path = rest[2:].partition("/")
        rest = slash + path
        if not _valid_authority(netloc):
            return None

    if _BAD_ESCAPE_RE.search(rest):
        return None

    return SplitResult(scheme, netloc, rest, query, fragment)


def classify_link(link: str) -> PageType:
    """Classify a destination URL.

    Args:
        link: Destination URL as extracted from the page.

    Returns:
        PageType for the link.
    """
    if link == "":
        return PageType.EMPTY_LINK

    parts = parse_link(link)
    if parts is None:
        return PageType.INVALID_LINK

    path = unquote(parts.path)
    if (parts.query == "" and path == "") or path == "/":
        return PageType.HOMEPAGE
    return PageType.INNER_PAGE
