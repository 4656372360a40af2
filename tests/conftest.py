"""
Pytest fixtures and configuration for serpcraw tests.

=============================================================================
Test Classification
=============================================================================

- @pytest.mark.unit: Single class/function, no external dependencies
  - DEFAULT: Tests without marker are auto-classified as unit
- @pytest.mark.integration: Multiple components, network replaced by
  httpx.MockTransport
- @pytest.mark.e2e: Real network access (excluded by default)
- @pytest.mark.slow: Tests taking >5 seconds (excluded by default)

=============================================================================
Mock Strategy
=============================================================================

- Network: Prohibited outside e2e. Use the `make_fetcher` fixture, which
  wires an HTTPFetcher to an httpx.MockTransport handler.
- Retry delay: Always zero in tests.
- File I/O: Use tmp_path fixture.
"""

import os
from collections.abc import Callable, Generator
from pathlib import Path

import httpx
import pytest

# Set test environment before importing anything else
os.environ["SERPCRAW_CONFIG_DIR"] = str(Path(__file__).parent.parent / "config")

from serpcraw.crawler.http_fetcher import HTTPFetcher
from serpcraw.search.parser_config import reset_parser_config_manager
from serpcraw.utils.config import FetcherConfig, get_settings


# =============================================================================
# Pytest Hooks for Test Classification
# =============================================================================


def pytest_collection_modifyitems(config, items):
    """Tests without explicit markers are assumed to be unit tests."""
    for item in items:
        has_classification = any(
            marker.name in ("unit", "integration", "e2e") for marker in item.iter_markers()
        )
        if not has_classification:
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Shared fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_singletons() -> Generator[None, None, None]:
    """Reset cached settings and parser config around each test."""
    get_settings.cache_clear()
    reset_parser_config_manager()
    yield
    get_settings.cache_clear()
    reset_parser_config_manager()


@pytest.fixture
def fixtures_dir() -> Path:
    """Get path to test fixtures directory."""
    return Path(__file__).parent / "fixtures" / "search_html"


@pytest.fixture
def baidu_html(fixtures_dir: Path) -> str:
    """Load Baidu mobile sample HTML."""
    return (fixtures_dir / "baidu_mobile_results.html").read_text(encoding="utf-8")


@pytest.fixture
def shenma_html(fixtures_dir: Path) -> str:
    """Load Shenma mobile sample HTML."""
    return (fixtures_dir / "shenma_mobile_results.html").read_text(encoding="utf-8")


@pytest.fixture
def fetcher_config() -> FetcherConfig:
    """Fetcher config with zero retry delay."""
    return FetcherConfig(retry_delay_seconds=0.0, request_timeout=5.0)


class TransportRecorder:
    """Records every transport built by a fetcher and every request sent."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]):
        self._handler = handler
        self.proxies: list[str | None] = []
        self.requests: list[httpx.Request] = []

    def factory(self, proxy: str | None) -> httpx.BaseTransport:
        self.proxies.append(proxy)
        return httpx.MockTransport(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._handler(request)


@pytest.fixture
def make_fetcher(
    fetcher_config: FetcherConfig,
) -> Callable[..., tuple[HTTPFetcher, TransportRecorder]]:
    """Build an HTTPFetcher backed by a mock transport.

    Usage:
        fetcher, recorder = make_fetcher(lambda request: httpx.Response(200, text="ok"))
    """

    def _make(
        handler: Callable[[httpx.Request], httpx.Response],
        **kwargs,
    ) -> tuple[HTTPFetcher, TransportRecorder]:
        recorder = TransportRecorder(handler)
        sleeps: list[float] = kwargs.pop("sleeps", [])
        fetcher = HTTPFetcher(
            kwargs.pop("config", fetcher_config),
            transport_factory=recorder.factory,
            sleep=sleeps.append,
            **kwargs,
        )
        return fetcher, recorder

    return _make

