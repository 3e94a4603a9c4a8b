# File: tests/conftest.py
from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Dict

import pytest
import pytest_asyncio
from aiohttp import web

from link_scout.config import CrawlConfig
from link_scout.crawler.models import PageData
from link_scout.scope import ScopePolicy


def pytest_configure(config):
    """Register custom markers so that `--strict-markers` does not fail."""
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')",
    )


async def serve_app(app: web.Application) -> AsyncIterator[str]:
    """Start *app* on a free port, yield its base URL, ensure cleanup."""
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, "127.0.0.1", 0)
    await site.start()
    host, port = runner.addresses[0][:2]
    try:
        yield f"http://{host}:{port}"
    finally:
        await runner.cleanup()


def html_app(pages: Dict[str, str]) -> web.Application:
    """aiohttp app serving each ``path -> html`` entry of *pages*."""
    app = web.Application()

    def make_handler(body: str):
        async def handler(_):
            return web.Response(text=body, content_type="text/html")

        return handler

    for path, body in pages.items():
        app.router.add_get(path, make_handler(body))
    return app


#: static page graph rooted at /dubai/, used by engine and end-to-end tests
DUBAI_SITE: Dict[str, str] = {
    "/dubai/": """
        <html><body>
          <a href="/dubai/villas">Villas</a>
          <a href="apartments#top">Apartments</a>
          <a href="/sharjah/villas">Sharjah</a>
          <a href="/downloads/dubai-brochure.pdf">Brochure</a>
          <a href="/downloads/sharjah-brochure.pdf">Other brochure</a>
          <a href="javascript:void(0)">JS</a>
          <a href="mailto:sales@example.com">Mail</a>
          <a href="tel:+971000000">Call</a>
          <a href="https://other.example/dubai/">Elsewhere</a>
        </body></html>
    """,
    "/dubai/villas": """
        <html><body>
          <a href="/dubai/">Back</a>
          <a href="/dubai/villas/palm#gallery">Palm</a>
          <a href="/dubai/villas/floorplan.PNG">Plan</a>
        </body></html>
    """,
    "/dubai/apartments": '<html><body><a href="/dubai/villas">Villas</a></body></html>',
    "/dubai/villas/palm": "<html><body><p>No links</p></body></html>",
    "/sharjah/villas": '<html><body><a href="/sharjah/secret">never crawled</a></body></html>',
}


@pytest_asyncio.fixture
async def dubai_site() -> AsyncIterator[str]:
    async for url in serve_app(html_app(DUBAI_SITE)):
        yield url


@pytest.fixture()
def make_config():
    """Factory for CrawlConfig with test-friendly timeouts."""

    def _make(*start_urls: str, **overrides) -> CrawlConfig:
        params = dict(
            start_urls=list(start_urls),
            max_concurrency=4,
            navigation_timeout=5.0,
            request_handler_timeout=5.0,
            max_request_retries=0,
            user_agent="TestAgent/1.0",
        )
        params.update(overrides)
        return CrawlConfig(**params)

    return _make


@pytest.fixture()
def dubai_policy() -> ScopePolicy:
    return ScopePolicy.from_seeds(["https://example.com/dubai/"], same_domain_only=True)


@pytest.fixture()
def mock_page_data() -> PageData:
    """A simple PageData instance with HTML content."""
    html = (
        '<html><body><a href="/link1">L1</a><a href="http://external.com">X</a>'
        '<a href="javascript:void(0)">JS</a><a name="anchor-only">no href</a></body></html>'
    )
    return PageData(url="http://example.com/dir/page", content=html, status=200, content_type="text/html")


@pytest.fixture()
def serve():
    """The :func:`serve_app` helper, for tests that build their own app."""
    return serve_app
