# link_scout/scope/assets.py
"""
Asset classification by path extension.

Decided from the URL alone so it can run before any request is issued.
"""
from __future__ import annotations

__all__ = ("ASSET_EXTENSIONS", "is_asset")

ASSET_EXTENSIONS: tuple[str, ...] = (
    # documents
    ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".csv",
    # archives
    ".zip", ".rar", ".7z",
    # images
    ".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg",
    # video
    ".mp4", ".mov", ".avi",
    # audio
    ".mp3", ".wav", ".m4a",
)


def is_asset(path: str) -> bool:
    """True if *path* ends with a known non-HTML extension (case-insensitive)."""
    return path.lower().endswith(ASSET_EXTENSIONS)
