"""
Tests for LinkResolver.

Test Perspectives Table:
| Case ID | Input / Precondition | Perspective | Expected Result |
|---------|---------------------|-------------|-----------------|
| TC-N-01 | 302 with absolute Location | Normal | Destination URL |
| TC-N-02 | 302 with relative Location | Normal | Absolute destination |
| TC-B-01 | "" | Boundary | "" and no request |
| TC-A-01 | 200 (no redirect) | Abnormal | "" |
| TC-A-02 | Connection refused | Abnormal | "" |
| TC-A-03 | Location with unusable URL | Abnormal | "" |
| TC-A-04 | Non-URL input | Abnormal | "" |
| TC-N-03 | Proxy candidates | Normal | Probe goes through picked proxy |
"""

import httpx
import pytest

from serpcraw.search.link_resolver import LinkResolver

pytestmark = pytest.mark.unit

TRACKING_URL = "https://m.baidu.com/from=844b/bd_page_type=1/ssid=0/uid=0/baiduid=ABC/w=0_10_/t=iphone/l=1/tc?ref=www_iphone&lid=1&order=1"


class FirstProxyPicker:
    def pick(self, candidates):
        return candidates[0]


class TestLinkResolver:
    """Tests for LinkResolver.resolve_real_link()."""

    def test_returns_redirect_destination(self, make_fetcher) -> None:
        # Given: A tracking link that redirects to the real page
        fetcher, recorder = make_fetcher(
            lambda request: httpx.Response(
                302, headers={"Location": "https://www.example.com/real/page.html"}
            )
        )
        resolver = LinkResolver(fetcher)

        # When: Resolving it
        result = resolver.resolve_real_link(TRACKING_URL)

        # Then: The destination is returned without following it
        assert result == "https://www.example.com/real/page.html"
        assert len(recorder.requests) == 1
        assert recorder.requests[0].url.host == "m.baidu.com"

    def test_relative_location(self, make_fetcher) -> None:
        fetcher, _ = make_fetcher(
            lambda request: httpx.Response(302, headers={"Location": "/real"})
        )

        assert LinkResolver(fetcher).resolve_real_link(TRACKING_URL) == "https://m.baidu.com/real"

    def test_empty_link_makes_no_request(self, make_fetcher) -> None:
        # Given: A fetcher whose handler must never be reached
        def fail(request: httpx.Request) -> httpx.Response:
            raise AssertionError("no request expected")

        fetcher, recorder = make_fetcher(fail)

        # When/Then: Empty input returns empty output immediately
        assert LinkResolver(fetcher).resolve_real_link("") == ""
        assert recorder.proxies == []
        assert recorder.requests == []

    def test_no_redirect(self, make_fetcher) -> None:
        fetcher, _ = make_fetcher(lambda request: httpx.Response(200, text="landing"))

        assert LinkResolver(fetcher).resolve_real_link(TRACKING_URL) == ""

    def test_transport_error(self, make_fetcher) -> None:
        def refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        fetcher, _ = make_fetcher(refuse)

        assert LinkResolver(fetcher).resolve_real_link(TRACKING_URL) == ""

    def test_persistent_server_error(self, make_fetcher) -> None:
        # Given: The probe keeps getting 500 (retried, then returned as-is)
        fetcher, recorder = make_fetcher(lambda request: httpx.Response(500))

        # Then: No redirect happened, so nothing is resolved
        assert LinkResolver(fetcher).resolve_real_link(TRACKING_URL) == ""
        assert len(recorder.requests) == 3

    def test_unusable_location(self, make_fetcher) -> None:
        fetcher, _ = make_fetcher(
            lambda request: httpx.Response(302, headers={"Location": "https://a.com:bad/"})
        )

        assert LinkResolver(fetcher).resolve_real_link(TRACKING_URL) == ""

    @pytest.mark.parametrize("link", ["not a url", "/tc?ref=www_iphone", "javascript:void(0)"])
    def test_non_absolute_input_degrades(self, make_fetcher, link: str) -> None:
        # Given: A link that is not an absolute http(s) URL
        fetcher, recorder = make_fetcher(lambda request: httpx.Response(302))

        # When/Then: It resolves to "" without raising or reaching the transport
        assert LinkResolver(fetcher).resolve_real_link(link) == ""
        assert recorder.requests == []

    def test_redirect_request_uses_proxy(self, make_fetcher) -> None:
        fetcher, recorder = make_fetcher(
            lambda request: httpx.Response(302, headers={"Location": "https://a.com/x"}),
            proxy_picker=FirstProxyPicker(),
        )

        result = LinkResolver(fetcher).resolve_real_link(TRACKING_URL, ["http://10.0.0.9:3128"])

        assert result == "https://a.com/x"
        assert recorder.proxies == ["http://10.0.0.9:3128"]
