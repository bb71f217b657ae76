"""
HTML extraction: visible page text for scraping, and organic result blocks for HTML search pages.
Pure functions over an HTML string. Malformed blocks are skipped, never fatal.
"""
import logging
import re
from typing import Optional
from urllib.parse import parse_qs, urlparse

from bs4 import BeautifulSoup, Comment
from bs4.element import Tag

from tools.base import SearchResult

logger = logging.getLogger(__name__)

MAX_SEARCH_RESULTS = 3

_INVISIBLE_TAGS = ["script", "style", "noscript", "template", "head", "svg", "iframe"]
_AD_CLASSES = ("result--ad", "result--ad--small")


def extract_text(html: str) -> str:
    """Visible text of the page: one line per text run, inner whitespace collapsed, blank lines dropped."""
    if not html:
        return ""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup.find_all(_INVISIBLE_TAGS):
        tag.decompose()
    for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
        comment.extract()
    raw = soup.get_text(separator="\n")
    lines = (re.sub(r"\s+", " ", line).strip() for line in raw.splitlines())
    return "\n".join(line for line in lines if line)


def _unwrap_link(href: Optional[str]) -> Optional[str]:
    """Resolve search-engine redirect links (/l/?uddg=<target>) and protocol-relative URLs."""
    if not href:
        return None
    href = href.strip()
    if href.startswith("//"):
        href = "https:" + href
    parsed = urlparse(href)
    if parsed.path.rstrip("/").endswith("/l"):
        target = parse_qs(parsed.query).get("uddg")
        if target:
            href = target[0]
            parsed = urlparse(href)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None
    return href


def _is_ad(block: Tag) -> bool:
    classes = block.get("class") or []
    if any(c in _AD_CLASSES for c in classes):
        return True
    if block.select_one(".badge--ad, .result__ad, [data-nrn='ad']"):
        return True
    link = block.select_one("a.result__a")
    href = (link.get("href") or "") if link else ""
    return "ad_domain=" in href or "/y.js?" in href


def _parse_block(block: Tag) -> Optional[SearchResult]:
    anchor = block.select_one("a.result__a") or block.select_one("h2 a[href]")
    if anchor is None:
        return None
    title = anchor.get_text(" ", strip=True)
    link = _unwrap_link(anchor.get("href"))
    if not title or not link:
        return None
    snippet_el = block.select_one(".result__snippet")
    snippet = snippet_el.get_text(" ", strip=True) if snippet_el else ""
    return SearchResult(title=title, link=link, snippet=snippet)


def extract_search_results(html: str, limit: int = MAX_SEARCH_RESULTS) -> list[SearchResult]:
    """
    Collect up to `limit` non-ad results in page order from an HTML search result page.
    Returns an empty list when nothing qualifies.
    """
    if not html:
        return []
    soup = BeautifulSoup(html, "html.parser")
    container = soup.select_one("#links") or soup
    results: list[SearchResult] = []
    for block in container.select("div.result"):
        if len(results) >= limit:
            break
        if _is_ad(block):
            continue
        try:
            parsed = _parse_block(block)
        except (AttributeError, TypeError, ValueError) as e:
            logger.debug("Skipping malformed result block: %s", e)
            continue
        if parsed is not None:
            results.append(parsed)
    return results
