# link_scout/scope/urls.py
"""
URL normalization for discovered hrefs.

Turns a raw anchor value into a comparable absolute URL (fragment removed,
relative references resolved, scheme/host lower-cased, default port dropped).
Never raises: failures come back as :class:`LinkRejection` values so one bad
link cannot disturb the rest of the page.
"""
from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Optional, Union
from urllib.parse import quote, urldefrag, urljoin, urlsplit, urlunsplit

__all__ = (
    "RejectReason",
    "LinkRejection",
    "NormalizedUrl",
    "NormalizeResult",
    "SKIPPABLE_SCHEMES",
    "normalize_href",
    "strip_fragment",
)

SKIPPABLE_SCHEMES: frozenset[str] = frozenset(("javascript", "mailto", "tel", "data"))
WEB_SCHEMES: frozenset[str] = frozenset(("http", "https"))
_DEFAULT_PORTS = {"http": 80, "https": 443}

_SCHEME_RE = re.compile(r"^([a-zA-Z][a-zA-Z0-9+.\-]*):")
# browsers drop ASCII tab and newlines anywhere inside an href
_STRIPPED_CHARS = str.maketrans("", "", "\t\n\r")

_PATH_SAFE = "/%:@!$&'()*+,;=-._~"
_QUERY_SAFE = _PATH_SAFE + "?[]"


class RejectReason(str, enum.Enum):
    UNPARSEABLE = "unparseable"
    UNSUPPORTED_SCHEME = "unsupported scheme"


@dataclass(frozen=True, slots=True)
class LinkRejection:
    """An href that was dropped before scoping."""

    href: str
    reason: RejectReason

    @property
    def ok(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class NormalizedUrl:
    """Absolute http(s) URL without fragment, plus the parts scoping needs."""

    url: str
    scheme: str
    hostname: str
    path: str

    @property
    def ok(self) -> bool:
        return True

    def __str__(self) -> str:
        return self.url


NormalizeResult = Union[NormalizedUrl, LinkRejection]


def _remove_dot_segments(path: str) -> str:
    """RFC 3986 §5.2.4; keeps empty segments and the trailing slash."""
    if "." not in path:
        return path
    output: list[str] = []
    for segment in path.split("/")[1:]:
        if segment == "..":
            if output:
                output.pop()
        elif segment != ".":
            output.append(segment)
    if path.endswith(("/.", "/..")):
        output.append("")
    return "/" + "/".join(output)


def _netloc(parts, hostname: str, port: Optional[int]) -> str:
    userinfo, sep, _ = parts.netloc.rpartition("@")
    host = f"[{hostname}]" if ":" in hostname else hostname
    if port is not None and port != _DEFAULT_PORTS.get(parts.scheme.lower()):
        host = f"{host}:{port}"
    return f"{userinfo}@{host}" if sep else host


def normalize_href(href: object, base_url: Optional[str] = None) -> NormalizeResult:
    """Resolve *href* against *base_url* and canonicalise it.

    Returns a :class:`NormalizedUrl` or a :class:`LinkRejection` describing why
    the link was dropped (``javascript:``/``mailto:``/``tel:``/``data:`` and any
    other non-web scheme are *unsupported*; anything that cannot be resolved to
    an absolute URL with a host is *unparseable*).
    """
    if not isinstance(href, str):
        return LinkRejection(repr(href), RejectReason.UNPARSEABLE)
    raw = href.strip().translate(_STRIPPED_CHARS)
    if not raw:
        return LinkRejection(href, RejectReason.UNPARSEABLE)

    m = _SCHEME_RE.match(raw)
    if m and m.group(1).lower() in SKIPPABLE_SCHEMES:
        return LinkRejection(href, RejectReason.UNSUPPORTED_SCHEME)

    try:
        joined = urljoin(base_url, raw) if base_url else raw
        absolute, _fragment = urldefrag(joined)
        parts = urlsplit(absolute)
        hostname = parts.hostname
        port = parts.port
    except ValueError:
        return LinkRejection(href, RejectReason.UNPARSEABLE)

    scheme = parts.scheme.lower()
    if not scheme:
        return LinkRejection(href, RejectReason.UNPARSEABLE)
    if scheme not in WEB_SCHEMES:
        return LinkRejection(href, RejectReason.UNSUPPORTED_SCHEME)
    if not hostname:
        return LinkRejection(href, RejectReason.UNPARSEABLE)

    path = quote(_remove_dot_segments(parts.path or "/"), safe=_PATH_SAFE)
    query = quote(parts.query, safe=_QUERY_SAFE)
    url = urlunsplit((scheme, _netloc(parts, hostname, port), path, query, ""))
    return NormalizedUrl(url=url, scheme=scheme, hostname=hostname, path=path)


def strip_fragment(url: str) -> str:
    """Return *url* without its ``#fragment`` (no other change)."""
    return urldefrag(url).url
