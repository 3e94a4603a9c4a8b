# link_scout/frontier.py
"""
Frontier filter: decides which harvested links become new crawl requests.

Used as the engine's ``transform_request_function``.  It applies the same
:class:`~link_scout.scope.ScopePolicy` as result collection, so a page is
navigated exactly when it would also be reported as an in-scope page.
"""
from __future__ import annotations

from collections import Counter
from typing import Optional

from link_scout.crawler.models import CrawlRequest
from link_scout.logger import get_logger
from link_scout.scope import LinkKind, NormalizedUrl, ScopePolicy, normalize_href

log = get_logger("frontier")


class FrontierFilter:
    """Accept/reject predicate for crawl candidates."""

    def __init__(self, policy: ScopePolicy) -> None:
        self.policy = policy
        self.verdicts: Counter[str] = Counter()

    def __call__(self, request: CrawlRequest) -> Optional[CrawlRequest]:
        parsed = normalize_href(request.url)
        if not isinstance(parsed, NormalizedUrl):
            self.verdicts[parsed.reason.value] += 1
            return None

        kind = self.policy.classify(parsed)
        if kind is not LinkKind.PAGE:
            # assets are reported by the page callback but never navigated
            self.verdicts[kind.value] += 1
            log.debug("Not enqueued (%s): %s", kind.value, parsed.url)
            return None

        self.verdicts["accepted"] += 1
        request.url = parsed.url
        request.unique_key = parsed.url
        return request


__all__ = ["FrontierFilter"]
