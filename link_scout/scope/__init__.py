"""link_scout.scope: URL normalization, asset classification and crawl scope."""

from .assets import ASSET_EXTENSIONS, is_asset
from .policy import LinkKind, ScopePolicy, normalize_path_prefix
from .urls import LinkRejection, NormalizedUrl, RejectReason, normalize_href, strip_fragment

__all__ = [
    "ASSET_EXTENSIONS",
    "is_asset",
    "LinkKind",
    "ScopePolicy",
    "normalize_path_prefix",
    "LinkRejection",
    "NormalizedUrl",
    "RejectReason",
    "normalize_href",
    "strip_fragment",
]
