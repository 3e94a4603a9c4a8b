# File: link_scout/aggregator.py
"""link_scout.aggregator: Модуль агрегатора отчетов обхода."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Dict, List, TypedDict

from link_scout.scanner import ScanResult
from link_scout.scope import NormalizedUrl, is_asset, normalize_href


class RunStats(TypedDict, total=False):
    """Счётчики запуска."""

    requests_total: int
    requests_finished: int
    requests_failed: int
    requests_retried: int
    requests_dropped_by_limit: int
    duration: float


@dataclass(slots=True)
class ScanReport:
    """Результаты обхода: все найденные ссылки, отдельно страницы и файлы."""

    seeds: List[str] = field(default_factory=list)
    links: List[str] = field(default_factory=list)
    pages: List[str] = field(default_factory=list)
    assets: List[str] = field(default_factory=list)
    stats: RunStats = field(default_factory=RunStats)
    dropped: Dict[str, int] = field(default_factory=dict)

    def json(self, *, pretty: bool = False) -> str:
        """Возвращает JSON-представление ScanReport."""
        return json.dumps(asdict(self), ensure_ascii=False, indent=2 if pretty else None)


def _is_asset_url(url: str) -> bool:
    parsed = normalize_href(url)
    return isinstance(parsed, NormalizedUrl) and is_asset(parsed.path)


def aggregate_results(result: ScanResult) -> ScanReport:
    """Собирает ScanResult в ScanReport; порядок ссылок сохраняется (отсортирован)."""
    assets = [u for u in result.links if _is_asset_url(u)]
    asset_set = set(assets)
    stats = RunStats(
        requests_total=result.stats.requests_total,
        requests_finished=result.stats.requests_finished,
        requests_failed=result.stats.requests_failed,
        requests_retried=result.stats.requests_retried,
        requests_dropped_by_limit=result.stats.requests_dropped_by_limit,
        duration=round(result.stats.duration, 3),
    )
    return ScanReport(
        seeds=list(result.seeds),
        links=list(result.links),
        pages=[u for u in result.links if u not in asset_set],
        assets=assets,
        stats=stats,
        dropped=dict(result.dropped),
    )


__all__ = ["ScanReport", "RunStats", "aggregate_results"]
