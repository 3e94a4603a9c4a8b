# link_scout/scope/policy.py
"""
Crawl scope built from the seed URLs.

One :class:`ScopePolicy` answers every "is this link interesting?" question for
a run.  It is computed once before crawling starts and is read-only afterwards,
so workers may consult it concurrently without locking.

Pages
    With ``same_domain_only`` the hostname must be one of the seed hostnames
    (exact match, no subdomains).  If the host was seeded with a non-root path,
    the candidate's normalized path must start with one of that host's seed
    prefixes.
Assets
    Host check as above, then the lower-cased path must *contain* one of the
    host's scope tokens (first segment of each seed prefix).  A host without
    tokens accepts every asset.  Substring matching is deliberate: a brochure
    at ``/downloads/dubai-brochure.pdf`` belongs to a ``/dubai/`` seed.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping

from link_scout.logger import get_logger
from link_scout.scope.assets import is_asset
from link_scout.scope.urls import NormalizedUrl, normalize_href

__all__ = ("LinkKind", "ScopePolicy", "normalize_path_prefix")

log = get_logger("scope")


class LinkKind(str, enum.Enum):
    PAGE = "page"
    ASSET = "asset"
    OUT_OF_SCOPE = "out-of-scope"


def normalize_path_prefix(pathname: str) -> str:
    """Return *pathname* stripped, starting and ending with ``/``."""
    p = (pathname or "").strip()
    if not p:
        return "/"
    if not p.startswith("/"):
        p = "/" + p
    if not p.endswith("/"):
        p += "/"
    return p


@dataclass(frozen=True, slots=True)
class ScopePolicy:
    same_domain_only: bool
    allowed_hostnames: frozenset[str]
    path_prefixes: Mapping[str, tuple[str, ...]]
    scope_tokens: Mapping[str, frozenset[str]]

    @classmethod
    def from_seeds(cls, seeds: Iterable[str], same_domain_only: bool = True) -> ScopePolicy:
        """Build the scoping tables.

        Malformed or non-web seeds are skipped.  A root seed (``/``) leaves the
        host's pages unconstrained, since matching any seed is enough.  Asset
        tokens still come from the host's deeper seeds, if any.
        """
        prefixes: dict[str, list[str]] = {}
        unconstrained: set[str] = set()
        for seed in seeds:
            parsed = normalize_href(seed)
            if not isinstance(parsed, NormalizedUrl):
                log.debug("Seed ignored for scoping (%s): %r", parsed.reason.value, seed)
                continue
            host_prefixes = prefixes.setdefault(parsed.hostname, [])
            prefix = normalize_path_prefix(parsed.path).lower()
            if prefix == "/":
                unconstrained.add(parsed.hostname)
            elif prefix not in host_prefixes:
                host_prefixes.append(prefix)

        table: dict[str, tuple[str, ...]] = {
            host: () if host in unconstrained else tuple(values) for host, values in prefixes.items()
        }
        # tokens come from every deeper prefix, root-seeded hosts included
        tokens: dict[str, frozenset[str]] = {}
        for host, values in prefixes.items():
            segments = (next((s for s in p.split("/") if s), "") for p in values)
            tokens[host] = frozenset(s.lower() for s in segments if s)

        return cls(
            same_domain_only=same_domain_only,
            allowed_hostnames=frozenset(table),
            path_prefixes=MappingProxyType(table),
            scope_tokens=MappingProxyType(tokens),
        )

    # ------------------------------------------------------------------ #
    # Rules                                                              #
    # ------------------------------------------------------------------ #

    def host_allowed(self, hostname: str) -> bool:
        return not self.same_domain_only or hostname in self.allowed_hostnames

    def page_in_scope(self, url: NormalizedUrl) -> bool:
        if not self.host_allowed(url.hostname):
            return False
        prefixes = self.path_prefixes.get(url.hostname)
        if prefixes:
            candidate = normalize_path_prefix(url.path).lower()
            return any(candidate.startswith(p) for p in prefixes)
        return True

    def asset_in_scope(self, url: NormalizedUrl) -> bool:
        if not self.host_allowed(url.hostname):
            return False
        tokens = self.scope_tokens.get(url.hostname)
        if not tokens:
            return True
        lower_path = url.path.lower()
        return any(t in lower_path for t in tokens)

    def classify(self, url: NormalizedUrl) -> LinkKind:
        if is_asset(url.path):
            return LinkKind.ASSET if self.asset_in_scope(url) else LinkKind.OUT_OF_SCOPE
        return LinkKind.PAGE if self.page_in_scope(url) else LinkKind.OUT_OF_SCOPE

    def admits_discovery(self, url: NormalizedUrl) -> bool:
        """Should *url* be reported as a result?"""
        return self.classify(url) is not LinkKind.OUT_OF_SCOPE

    def admits_navigation(self, url: NormalizedUrl) -> bool:
        """Should *url* be crawled?  Assets never are."""
        return self.classify(url) is LinkKind.PAGE

    def describe(self) -> str:
        parts = []
        for host in sorted(self.path_prefixes):
            prefixes = ", ".join(self.path_prefixes[host]) or "/"
            parts.append(f"{host} [{prefixes}]")
        mode = "same-domain" if self.same_domain_only else "any-domain"
        return f"{mode}: " + "; ".join(parts)
