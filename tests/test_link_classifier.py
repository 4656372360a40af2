"""
Tests for homepage / inner-page link classification.

Test Perspectives Table:
| Case ID | Input | Perspective | Expected Result |
|---------|-------|-------------|-----------------|
| TC-N-01 | "" | Boundary | empty_link |
| TC-N-02 | control character | Abnormal | invalid_link |
| TC-N-03 | "https://a.com/" | Normal | homepage |
| TC-N-04 | "https://a.com" | Normal | homepage |
| TC-N-05 | "https://a.com/page?x=1" | Normal | inner_page |
| TC-B-01 | "https://a.com?x=1" | Boundary | inner_page (query-only is not homepage) |
| TC-B-02 | "https://a.com/?x=1" | Boundary | homepage (path is exactly "/") |
| TC-B-03 | "javascript:void(0)", "mailto:a@b.com" | Boundary | homepage (opaque URL has no path) |
| TC-B-04 | "https://a.com:99999/" | Boundary | homepage (port only needs digits) |
| TC-A-01 | bad port / IPv6 / escape / missing scheme | Abnormal | invalid_link |
| TC-A-02 | "1abc:x" | Abnormal | invalid_link (colon in first path segment) |
"""

import pytest

from serpcraw.search.link_classifier import classify_link, parse_link
from serpcraw.search.models import PageType

pytestmark = pytest.mark.unit


class TestClassifyLink:
    """Tests for classify_link()."""

    def test_empty_link(self) -> None:
        assert classify_link("") == PageType.EMPTY_LINK

    def test_control_character_is_invalid(self) -> None:
        # Given: A string containing a NUL byte
        # When: Classifying it
        # Then: It is not a URL
        assert classify_link("not a url \x00") == PageType.INVALID_LINK

    @pytest.mark.parametrize(
        "link",
        [
            "https://a.com/",
            "https://a.com",
            "http://www.example.com/",
            "https://a.com/?x=1",
            "https://a.com#top",
            "https://a.com:99999/",
            "http://[::1]:8080/",
            "https://user:pw@a.com/",
        ],
    )
    def test_homepage(self, link: str) -> None:
        assert classify_link(link) == PageType.HOMEPAGE

    @pytest.mark.parametrize(
        "link",
        [
            "https://a.com/page?x=1",
            "https://a.com/page",
            "https://news.example.org/article/42?from=baidu",
            "relative/path",
            "https://a.com/%E5%92%96%E5%95%A1",
            "///triple/slash",
        ],
    )
    def test_inner_page(self, link: str) -> None:
        assert classify_link(link) == PageType.INNER_PAGE

    def test_query_without_path_is_not_homepage(self) -> None:
        """Empty path with a query string stays an inner page."""
        # Given: A URL with no path but a query string
        # When: Classifying it
        result = classify_link("https://a.com?x=1")

        # Then: It is an inner page, not a homepage
        assert result == PageType.INNER_PAGE

    @pytest.mark.parametrize(
        "link",
        [
            "https://a.com:port/",
            "http://[::1/",
            "https://a.com/%zz",
            "https://a%2.com/",
            "https://a b.com/",
            ":no-scheme",
            "1abc:x",
            "https://a.com:80x/",
            "https://%41.com/",
            "https://a.com/#%zz",
            "https://a.com/\npath",
        ],
    )
    def test_invalid_link(self, link: str) -> None:
        assert classify_link(link) == PageType.INVALID_LINK


class TestParseLink:
    """Tests for parse_link()."""

    def test_returns_parts_for_valid_url(self) -> None:
        parts = parse_link("https://a.com:8080/p?q=1")

        assert parts is not None
        assert parts.netloc == "a.com:8080"
        assert parts.path == "/p"
        assert parts.query == "q=1"
        assert parts.port == 8080

    def test_returns_none_for_invalid_url(self) -> None:
        assert parse_link("http://[::1/") is None


class TestOpaqueLinks:
    """Links with a scheme but no "//" authority."""

    @pytest.mark.parametrize("link", ["javascript:void(0)", "mailto:a@b.com", "tel:10086"])
    def test_opaque_link_is_homepage(self, link: str) -> None:
        # Given: A scheme followed by something other than "/"
        # When: Classifying it
        # Then: There is no path and no query, so it counts as a homepage
        assert classify_link(link) == PageType.HOMEPAGE

    def test_opaque_link_with_query_is_inner_page(self) -> None:
        assert classify_link("mailto:a@b.com?subject=hi") == PageType.INNER_PAGE

    def test_opaque_link_has_no_path_or_host(self) -> None:
        parts = parse_link("javascript:void(0)")

        assert parts is not None
        assert parts.scheme == "javascript"
        assert parts.netloc == ""
        assert parts.path == ""
