"""Exception hierarchy for LinkScout.

Per-link problems (bad hrefs, foreign schemes, out-of-scope targets) are never
raised; they travel as :class:`~link_scout.scope.urls.LinkRejection` values.
The exceptions below cover run-level configuration and page-level failures.
"""
from __future__ import annotations

from typing import Optional


class LinkScoutError(Exception):
    """Base class for all LinkScout errors."""


class ConfigError(LinkScoutError):
    """Configuration cannot be used to start a run (e.g. no seed URLs)."""


class NavigationError(LinkScoutError):
    """A page could not be loaded."""

    def __init__(
        self, url: str, message: str, status: Optional[int] = None, permanent: bool = False
    ) -> None:
        super().__init__(f"{url}: {message}")
        self.url = url
        self.status = status
        self.permanent = permanent

    @property
    def retryable(self) -> bool:
        """Network failures, 5xx and 429 are worth another attempt."""
        if self.permanent:
            return False
        return self.status is None or self.status == 429 or 500 <= self.status < 600


class HandlerTimeoutError(LinkScoutError):
    """The page callback ran longer than ``request_handler_timeout``."""

    def __init__(self, url: str, timeout: float) -> None:
        super().__init__(f"request handler for {url} timed out after {timeout:.1f} s")
        self.url = url
        self.timeout = timeout


__all__ = ["LinkScoutError", "ConfigError", "NavigationError", "HandlerTimeoutError"]
