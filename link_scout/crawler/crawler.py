from __future__ import annotations

import asyncio
import random
import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Iterable, List, Optional, Set
from urllib.parse import urlsplit

from link_scout.config import CrawlConfig
from link_scout.crawler.fetcher import PageFetcher, make_fetcher
from link_scout.crawler.link_extractor import extract_hrefs
from link_scout.crawler.models import CrawlRequest, CrawlStatistics, EnqueueStrategy, PageData
from link_scout.errors import HandlerTimeoutError, NavigationError
from link_scout.logger import get_logger

__all__ = ("AsyncCrawler", "CrawlingContext", "RequestHandler", "TransformRequest")

TransformRequest = Callable[[CrawlRequest], Optional[CrawlRequest]]


@dataclass(slots=True)
class CrawlingContext:
    """Handed to the request handler once per successfully loaded page."""

    request: CrawlRequest
    page: PageData
    crawler: AsyncCrawler = field(repr=False)

    async def extract_links(self, selector: str = "a[href]") -> List[str]:
        """Absolute hrefs of every matching element, unfiltered."""
        return extract_hrefs(self.page, selector)

    async def enqueue_links(
        self,
        *,
        strategy: EnqueueStrategy | str = EnqueueStrategy.SAME_HOSTNAME,
        selector: str = "a[href]",
        transform_request_function: Optional[TransformRequest] = None,
    ) -> int:
        """Harvest links from the page and schedule the ones that survive.

        Only absolute http(s) links reach *transform_request_function*; it may
        rewrite the request or return ``None`` to drop it.  Returns the number
        of newly scheduled requests.
        """
        return await self.crawler.enqueue_from_page(
            self,
            strategy=EnqueueStrategy(strategy),
            selector=selector,
            transform=transform_request_function,
        )


RequestHandler = Callable[[CrawlingContext], Awaitable[None]]


class AsyncCrawler:
    """Асинхронный краулер: пул воркеров, лимит запросов, таймауты и retry."""

    def __init__(
        self,
        config: CrawlConfig,
        request_handler: RequestHandler,
        fetcher: Optional[PageFetcher] = None,
        backoff_base: float = 0.5,
    ) -> None:
        self.config = config
        self.request_handler = request_handler
        self.fetcher: PageFetcher = fetcher or make_fetcher(config)
        self.backoff_base = backoff_base
        self.stats = CrawlStatistics()
        self.logger = get_logger("crawler")
        self._seen: Set[str] = set()
        self._queue: Optional[asyncio.Queue[CrawlRequest]] = None
        self._limit_logged = False

    async def __aenter__(self) -> AsyncCrawler:
        await self.fetcher.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.fetcher.close()

    # ------------------------------------------------------------------ #
    # Scheduling                                                         #
    # ------------------------------------------------------------------ #

    async def add_requests(self, requests: Iterable[CrawlRequest | str]) -> int:
        """Schedule unseen requests until the request ceiling is reached."""
        if self._queue is None:
            raise RuntimeError("Crawler is not running")
        added = 0
        for item in requests:
            req = CrawlRequest(url=item) if isinstance(item, str) else item
            if req.unique_key in self._seen:
                continue
            if len(self._seen) >= self.config.max_requests_per_crawl:
                self.stats.requests_dropped_by_limit += 1
                if not self._limit_logged:
                    self._limit_logged = True
                    self.logger.info(
                        "Достигнут лимит %d запросов, новые ссылки больше не ставятся в очередь",
                        self.config.max_requests_per_crawl,
                    )
                continue
            self._seen.add(req.unique_key)
            self.stats.requests_total += 1
            await self._queue.put(req)
            added += 1
        return added

    async def enqueue_from_page(
        self,
        context: CrawlingContext,
        *,
        strategy: EnqueueStrategy,
        selector: str,
        transform: Optional[TransformRequest],
    ) -> int:
        page_host = urlsplit(context.page.url).hostname
        candidates: List[CrawlRequest] = []
        for href in extract_hrefs(context.page, selector):
            try:
                parts = urlsplit(href)
                host = parts.hostname
            except ValueError:
                continue
            if parts.scheme.lower() not in ("http", "https") or not host:
                continue
            if strategy is EnqueueStrategy.SAME_HOSTNAME and host != page_host:
                continue
            req: Optional[CrawlRequest] = CrawlRequest(url=href, depth=context.request.depth + 1)
            if transform is not None:
                req = transform(req)
                if req is None:
                    continue
            candidates.append(req)
        return await self.add_requests(candidates)

    # ------------------------------------------------------------------ #
    # Run loop                                                           #
    # ------------------------------------------------------------------ #

    async def run(self, start_urls: Iterable[str]) -> CrawlStatistics:
        self._queue = asyncio.Queue()
        seeds = list(start_urls)
        self.logger.info("Старт обхода: %s", ", ".join(seeds))
        start = time.monotonic()
        await self.add_requests(seeds)
        workers = [asyncio.create_task(self._worker()) for _ in range(self.config.max_concurrency)]
        try:
            await self._queue.join()
        finally:
            for w in workers:
                w.cancel()
            await asyncio.gather(*workers, return_exceptions=True)
        self.stats.duration = time.monotonic() - start
        self.logger.info(
            "Завершено: %d страниц за %.2f с (%.2f стр/с), ошибок: %d",
            self.stats.requests_finished,
            self.stats.duration,
            self.stats.pages_per_second,
            self.stats.requests_failed,
        )
        return self.stats

    async def _worker(self) -> None:
        assert self._queue is not None
        while True:
            try:
                request = await self._queue.get()
            except asyncio.CancelledError:
                break
            try:
                await self._process(request)
            except Exception:
                self.stats.requests_failed += 1
                self.logger.exception("Необработанная ошибка для %s", request.url)
            finally:
                self._queue.task_done()

    async def _process(self, request: CrawlRequest) -> None:
        try:
            page = await asyncio.wait_for(
                self.fetcher.fetch(request.url), timeout=self.config.navigation_timeout
            )
        except asyncio.TimeoutError:
            await self._failed(request, NavigationError(request.url, "navigation timed out"))
            return
        except NavigationError as exc:
            await self._failed(request, exc)
            return
        except Exception as exc:
            self.logger.exception("Ошибка загрузки %s", request.url)
            await self._failed(
                request, NavigationError(request.url, f"{type(exc).__name__}: {exc}", permanent=True)
            )
            return

        context = CrawlingContext(request=request, page=page, crawler=self)
        try:
            await asyncio.wait_for(
                self.request_handler(context), timeout=self.config.request_handler_timeout
            )
        except asyncio.TimeoutError:
            await self._failed(
                request, HandlerTimeoutError(request.url, self.config.request_handler_timeout)
            )
            return
        except Exception as exc:
            self.logger.exception("Ошибка обработчика страницы %s", request.url)
            await self._failed(request, exc)
            return
        self.stats.requests_finished += 1

    async def _failed(self, request: CrawlRequest, error: Exception) -> None:
        retryable = not isinstance(error, NavigationError) or error.retryable
        if retryable and request.retry_count < self.config.max_request_retries:
            request.retry_count += 1
            self.stats.requests_retried += 1
            backoff = min(60.0, self.backoff_base * 2 ** (request.retry_count - 1) + random.random() * 0.1)
            self.logger.debug(
                "Повтор %d/%d для %s через %.2f с (%s)",
                request.retry_count,
                self.config.max_request_retries,
                request.url,
                backoff,
                error,
            )
            await asyncio.sleep(backoff)
            assert self._queue is not None
            await self._queue.put(request)
            return
        self.stats.requests_failed += 1
        self.logger.warning("Не удалось загрузить %s: %s", request.url, error)
