# link_scout/crawler/models.py
"""
Data models for the LinkScout crawling engine.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from link_scout.scope.urls import strip_fragment


@dataclass(slots=True)
class PageData:
    """A loaded page: final URL (after redirects) and its HTML."""

    url: str
    content: str
    status: Optional[int] = None
    content_type: str = ""

    @property
    def is_html(self) -> bool:
        return "html" in self.content_type.lower()


@dataclass(slots=True)
class CrawlRequest:
    """One unit of work for the engine.

    ``unique_key`` defaults to the URL without fragment; two requests with the
    same key are crawled once.
    """

    url: str
    unique_key: str = ""
    depth: int = 0
    retry_count: int = 0
    user_data: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.unique_key:
            self.unique_key = strip_fragment(self.url)


class EnqueueStrategy(str, enum.Enum):
    """Which harvested links ``enqueue_links`` may propose at all."""

    ALL = "all"
    SAME_HOSTNAME = "same-hostname"


@dataclass(slots=True)
class CrawlStatistics:
    requests_total: int = 0
    requests_finished: int = 0
    requests_failed: int = 0
    requests_retried: int = 0
    requests_dropped_by_limit: int = 0
    duration: float = 0.0

    @property
    def pages_per_second(self) -> float:
        return self.requests_finished / self.duration if self.duration else 0.0
