"""
Оркестратор запуска: таблицы области обхода, движок и сбор найденных ссылок.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from link_scout.config import CrawlConfig
from link_scout.crawler.crawler import AsyncCrawler, CrawlingContext
from link_scout.crawler.fetcher import PageFetcher
from link_scout.crawler.models import CrawlStatistics, EnqueueStrategy
from link_scout.discovery import DiscoverySet
from link_scout.errors import ConfigError
from link_scout.frontier import FrontierFilter
from link_scout.logger import get_logger
from link_scout.scope import NormalizedUrl, ScopePolicy, normalize_href

log = get_logger("scanner")


@dataclass(slots=True)
class ScanResult:
    """Sorted discovered links plus run bookkeeping."""

    links: List[str]
    seeds: List[str]
    stats: CrawlStatistics = field(default_factory=CrawlStatistics)
    dropped: Dict[str, int] = field(default_factory=dict)
    frontier: Dict[str, int] = field(default_factory=dict)


class LinkScanner:
    """Wires seeds, scope policy and the crawling engine together.

    The scoping tables are computed once here; every page callback shares the
    same read-only :class:`ScopePolicy` and the same :class:`DiscoverySet`.
    """

    def __init__(self, config: CrawlConfig, fetcher: Optional[PageFetcher] = None) -> None:
        if not config.start_urls:
            raise ConfigError("No start URL provided. Pass a URL as a CLI arg or set START_URL.")
        self.config = config
        self.fetcher = fetcher
        self.policy = ScopePolicy.from_seeds(config.start_urls, config.same_domain_only)
        self.discovered = DiscoverySet()
        self.frontier = FrontierFilter(self.policy)
        self.dropped: Counter[str] = Counter()

    def seed_urls(self) -> List[str]:
        """Seeds the engine can actually load; malformed ones are skipped."""
        seeds: List[str] = []
        for raw in self.config.start_urls:
            parsed = normalize_href(raw)
            if isinstance(parsed, NormalizedUrl):
                seeds.append(parsed.url)
            else:
                log.warning("Стартовый URL пропущен (%s): %s", parsed.reason.value, raw)
        return seeds

    def collect(self, href: str, base_url: Optional[str] = None) -> bool:
        """Normalize, classify and record one href; True if it was new."""
        parsed = normalize_href(href, base_url)
        if not isinstance(parsed, NormalizedUrl):
            self.dropped[parsed.reason.value] += 1
            return False
        if not self.policy.admits_discovery(parsed):
            self.dropped["out-of-scope"] += 1
            return False
        return self.discovered.record(parsed.url)

    async def handle_page(self, context: CrawlingContext) -> None:
        hrefs = await context.extract_links("a[href]")
        new = sum(self.collect(href, context.page.url) for href in hrefs)
        log.debug("%s: %d ссылок, новых %d", context.request.url, len(hrefs), new)
        # the frontier filter enforces hostnames itself, so the engine proposes everything
        await context.enqueue_links(
            strategy=EnqueueStrategy.ALL,
            selector="a[href]",
            transform_request_function=self.frontier,
        )

    async def run(self) -> ScanResult:
        seeds = self.seed_urls()
        log.info("Область обхода: %s", self.policy.describe())
        async with AsyncCrawler(self.config, self.handle_page, fetcher=self.fetcher) as crawler:
            stats = await crawler.run(seeds)
        links = self.discovered.snapshot()
        log.info("Найдено ссылок: %d", len(links))
        return ScanResult(
            links=links,
            seeds=seeds,
            stats=stats,
            dropped=dict(self.dropped),
            frontier=dict(self.frontier.verdicts),
        )


async def start_scan(cfg: CrawlConfig) -> ScanResult:
    """
    Запускает обход по конфигурации и возвращает ScanResult.

    Parameters
    ----------
    cfg : CrawlConfig
        Конфигурация запуска.
    """
    return await LinkScanner(cfg).run()


__all__ = ["LinkScanner", "ScanResult", "start_scan"]
