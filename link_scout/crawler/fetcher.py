# link_scout/crawler/fetcher.py
"""
Page loaders for the crawling engine.

:class:`HttpFetcher` downloads raw HTML with aiohttp; :class:`BrowserFetcher`
renders pages in headless Chromium through Playwright so that links added by
JavaScript are visible.  Both return :class:`PageData` or raise
:class:`NavigationError`; retries are the engine's business.
"""
from __future__ import annotations

import asyncio
from typing import Optional, Protocol

from aiohttp import ClientError, ClientSession, ClientTimeout, InvalidURL
from playwright.async_api import Browser, BrowserContext, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

from link_scout.config import CrawlConfig
from link_scout.crawler.models import PageData
from link_scout.errors import NavigationError
from link_scout.logger import get_logger

log = get_logger("fetcher")


class PageFetcher(Protocol):
    async def open(self) -> None: ...

    async def close(self) -> None: ...

    async def fetch(self, url: str) -> PageData: ...


class HttpFetcher:
    """Plain HTTP loader: follows redirects, keeps HTML bodies only."""

    def __init__(self, config: CrawlConfig, session: Optional[ClientSession] = None) -> None:
        self.config = config
        self.session = session
        self._owns_session = session is None

    async def open(self) -> None:
        if self.session is None:
            self.session = ClientSession(
                timeout=ClientTimeout(total=self.config.navigation_timeout),
                headers={"User-Agent": self.config.user_agent},
                raise_for_status=False,
            )

    async def close(self) -> None:
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    async def fetch(self, url: str) -> PageData:
        if not self.session:
            raise RuntimeError("Session not initialized")
        try:
            async with self.session.get(url, allow_redirects=True) as resp:
                status = resp.status
                ctype = resp.headers.get("Content-Type", "").lower()
                if status >= 400:
                    raise NavigationError(url, f"HTTP {status}", status)
                # non-HTML bodies are never parsed for links
                text = await resp.text(errors="replace") if "html" in ctype else ""
                return PageData(url=str(resp.url), content=text, status=status, content_type=ctype)
        except asyncio.TimeoutError as exc:
            raise NavigationError(url, "navigation timed out") from exc
        except InvalidURL as exc:
            raise NavigationError(url, "invalid URL", permanent=True) from exc
        except ClientError as exc:
            raise NavigationError(url, str(exc) or type(exc).__name__) from exc
        except ValueError as exc:
            # yarl rejects hosts like "a..b" with UnicodeError
            raise NavigationError(url, f"invalid URL: {exc}", permanent=True) from exc


class BrowserFetcher:
    """Playwright loader honouring ``headless`` and ``wait_until``."""

    def __init__(self, config: CrawlConfig) -> None:
        self.config = config
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None

    async def open(self) -> None:
        self._playwright = await async_playwright().start()
        self._browser = await self._playwright.chromium.launch(headless=self.config.headless)
        self._context = await self._browser.new_context(user_agent=self.config.user_agent)
        log.debug("Chromium started (headless=%s)", self.config.headless)

    async def close(self) -> None:
        if self._context is not None:
            await self._context.close()
        if self._browser is not None:
            await self._browser.close()
        if self._playwright is not None:
            await self._playwright.stop()
        self._context = self._browser = self._playwright = None

    async def fetch(self, url: str) -> PageData:
        if self._context is None:
            raise RuntimeError("Browser not started")
        timeout_ms = self.config.navigation_timeout * 1000
        page = await self._context.new_page()
        try:
            response = await page.goto(url, wait_until="domcontentloaded", timeout=timeout_ms)
            status = response.status if response else None
            if status is not None and status >= 400:
                raise NavigationError(url, f"HTTP {status}", status)
            await page.wait_for_load_state(self.config.wait_until, timeout=timeout_ms)
            ctype = (await response.header_value("content-type") or "") if response else "text/html"
            content = await page.content()
            return PageData(url=page.url, content=content, status=status, content_type=ctype.lower())
        except PlaywrightError as exc:
            raise NavigationError(url, exc.message) from exc
        finally:
            await page.close()


def make_fetcher(config: CrawlConfig) -> PageFetcher:
    if config.renderer == "browser":
        return BrowserFetcher(config)
    return HttpFetcher(config)


__all__ = ["PageFetcher", "HttpFetcher", "BrowserFetcher", "make_fetcher"]
