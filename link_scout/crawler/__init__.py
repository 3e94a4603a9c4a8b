"""link_scout.crawler: async crawling engine (worker pool, page loaders, link harvesting)."""

from .crawler import AsyncCrawler, CrawlingContext
from .models import CrawlRequest, CrawlStatistics, EnqueueStrategy, PageData

__all__ = [
    "AsyncCrawler",
    "CrawlingContext",
    "CrawlRequest",
    "CrawlStatistics",
    "EnqueueStrategy",
    "PageData",
]
