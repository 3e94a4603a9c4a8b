# File: tests/test_fetcher.py
# Page loaders in isolation: aiohttp edge cases and a stand-in Playwright
from __future__ import annotations

from types import SimpleNamespace
from typing import List, Optional

import pytest
from playwright.async_api import Error as PlaywrightError

import link_scout.crawler.fetcher as fetcher_module
from link_scout.crawler.fetcher import BrowserFetcher, HttpFetcher, make_fetcher
from link_scout.errors import NavigationError


@pytest.mark.asyncio()
async def test_http_fetcher_rejects_malformed_host(make_config):
    fetcher = HttpFetcher(make_config("http://example.com/"))
    await fetcher.open()
    try:
        with pytest.raises(NavigationError) as excinfo:
            await fetcher.fetch("http://a..b/x")
    finally:
        await fetcher.close()
    assert excinfo.value.permanent
    assert not excinfo.value.retryable


def test_make_fetcher_picks_renderer(make_config):
    assert isinstance(make_fetcher(make_config("http://example.com/")), HttpFetcher)
    assert isinstance(
        make_fetcher(make_config("http://example.com/", renderer="browser")), BrowserFetcher
    )


# --------------------------------------------------------------------------- #
#                        Browser loader with fake Playwright                  #
# --------------------------------------------------------------------------- #


class FakeResponse:
    def __init__(self, status: int, content_type: str = "text/html; charset=utf-8") -> None:
        self.status = status
        self._content_type = content_type

    async def header_value(self, name: str) -> Optional[str]:
        return self._content_type if name == "content-type" else None


class FakePage:
    def __init__(self, calls: List[tuple], status: int = 200, fail: Optional[str] = None) -> None:
        self.calls = calls
        self.status = status
        self.fail = fail
        self.url = ""
        self.closed = False

    async def goto(self, url: str, *, wait_until: str, timeout: float):
        self.calls.append(("goto", url, wait_until, timeout))
        if self.fail == "goto":
            raise PlaywrightError("net::ERR_NAME_NOT_RESOLVED")
        self.url = url + "?final"
        return FakeResponse(self.status)

    async def wait_for_load_state(self, state: str, *, timeout: float) -> None:
        self.calls.append(("wait_for_load_state", state, timeout))

    async def content(self) -> str:
        return '<a href="/rendered">r</a>'

    async def close(self) -> None:
        self.calls.append(("close",))
        self.closed = True


@pytest.fixture()
def fake_playwright(monkeypatch):
    """Replace ``async_playwright`` and record every browser call."""
    state = SimpleNamespace(calls=[], page_kwargs={}, pages=[], launched=None)

    async def new_page():
        page = FakePage(state.calls, **state.page_kwargs)
        state.pages.append(page)
        return page

    async def close_context():
        state.calls.append(("context.close",))

    async def new_context(**kwargs):
        state.calls.append(("new_context", kwargs))
        return SimpleNamespace(new_page=new_page, close=close_context)

    async def close_browser():
        state.calls.append(("browser.close",))

    async def launch(**kwargs):
        state.launched = kwargs
        return SimpleNamespace(new_context=new_context, close=close_browser)

    async def stop():
        state.calls.append(("stop",))

    async def start():
        return SimpleNamespace(chromium=SimpleNamespace(launch=launch), stop=stop)

    monkeypatch.setattr(fetcher_module, "async_playwright", lambda: SimpleNamespace(start=start))
    return state


@pytest.mark.asyncio()
async def test_browser_fetcher_waits_for_load_state(make_config, fake_playwright):
    config = make_config("http://example.com/", renderer="browser", wait_until="load", headless=False)
    fetcher = BrowserFetcher(config)
    await fetcher.open()
    page = await fetcher.fetch("http://example.com/a")
    await fetcher.close()

    assert fake_playwright.launched == {"headless": False}
    assert ("new_context", {"user_agent": "TestAgent/1.0"}) in fake_playwright.calls
    names = [c[0] for c in fake_playwright.calls]
    assert names.index("goto") < names.index("wait_for_load_state") < names.index("close")
    goto = next(c for c in fake_playwright.calls if c[0] == "goto")
    assert goto[2] == "domcontentloaded"
    assert goto[3] == 5000
    assert ("wait_for_load_state", "load", 5000) in fake_playwright.calls
    assert page.url == "http://example.com/a?final"
    assert page.status == 200
    assert page.is_html
    assert page.content == '<a href="/rendered">r</a>'
    assert names[-3:] == ["context.close", "browser.close", "stop"]


@pytest.mark.asyncio()
async def test_browser_fetcher_http_error_status(make_config, fake_playwright):
    fake_playwright.page_kwargs = {"status": 404}
    fetcher = BrowserFetcher(make_config("http://example.com/", renderer="browser"))
    await fetcher.open()
    with pytest.raises(NavigationError) as excinfo:
        await fetcher.fetch("http://example.com/missing")
    await fetcher.close()

    assert excinfo.value.status == 404
    assert not excinfo.value.retryable
    assert all(c[0] != "wait_for_load_state" for c in fake_playwright.calls)
    assert fake_playwright.pages[0].closed


@pytest.mark.asyncio()
async def test_browser_fetcher_maps_playwright_errors(make_config, fake_playwright):
    fake_playwright.page_kwargs = {"fail": "goto"}
    fetcher = BrowserFetcher(make_config("http://example.com/", renderer="browser"))
    await fetcher.open()
    with pytest.raises(NavigationError) as excinfo:
        await fetcher.fetch("http://unresolvable.invalid/")
    await fetcher.close()

    assert "ERR_NAME_NOT_RESOLVED" in str(excinfo.value)
    assert excinfo.value.retryable
    assert fake_playwright.pages[0].closed


@pytest.mark.asyncio()
async def test_browser_fetcher_requires_open(make_config):
    with pytest.raises(RuntimeError):
        await BrowserFetcher(make_config("http://example.com/")).fetch("http://example.com/")
