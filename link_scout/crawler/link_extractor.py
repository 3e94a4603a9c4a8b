# link_scout/crawler/link_extractor.py
"""
Anchor harvesting for loaded pages.
"""
from __future__ import annotations

from typing import List
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag

from link_scout.crawler.models import PageData


def document_base(soup: BeautifulSoup, page_url: str) -> str:
    """Base URL for relative hrefs: ``<base href>`` if present, else the page URL."""
    base_tag = soup.find("base", href=True)
    if isinstance(base_tag, Tag):
        href = base_tag.get("href")
        if isinstance(href, str) and href.strip():
            try:
                return urljoin(page_url, href.strip())
            except ValueError:
                pass
    return page_url


def extract_hrefs(page: PageData, selector: str = "a[href]") -> List[str]:
    """
    Return the href of every element matching *selector*, resolved to absolute.

    Mirrors what a browser reports for ``anchor.href``: relative values are
    resolved against the document base, values with their own scheme
    (``mailto:``, ``javascript:`` ...) come back as written.  Nothing is
    filtered here; values that cannot be resolved are returned raw.
    """
    if not page.content:
        return []
    soup = BeautifulSoup(page.content, "html.parser")
    base = document_base(soup, page.url)
    hrefs: List[str] = []
    for tag in soup.select(selector):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str):
            continue
        raw = href_val.strip()
        if not raw:
            continue
        try:
            hrefs.append(urljoin(base, raw))
        except ValueError:
            hrefs.append(raw)
    return hrefs


__all__ = ["extract_hrefs", "document_base"]
