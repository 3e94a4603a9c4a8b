# link_scout/discovery.py
"""
Discovery set: every URL a run decides to report, crawled or not.
"""
from __future__ import annotations

import threading
from typing import Iterator, List, Set


class DiscoverySet:
    """Grow-only, de-duplicating collection of normalized URLs.

    Inserts are guarded by a lock so page callbacks may run on several workers
    (or threads) at once.  :meth:`snapshot` returns a sorted list, so output
    does not depend on the order pages happened to finish.
    """

    __slots__ = ("_urls", "_lock")

    def __init__(self) -> None:
        self._urls: Set[str] = set()
        self._lock = threading.Lock()

    def record(self, url: str) -> bool:
        """Add *url*; return True if it was not present before."""
        with self._lock:
            if url in self._urls:
                return False
            self._urls.add(url)
            return True

    def snapshot(self) -> List[str]:
        with self._lock:
            return sorted(self._urls)

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._urls

    def __len__(self) -> int:
        with self._lock:
            return len(self._urls)

    def __iter__(self) -> Iterator[str]:
        return iter(self.snapshot())


__all__ = ["DiscoverySet"]
