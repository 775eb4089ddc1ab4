"""
HTML listing scrapers for Japanese AI news sites without usable feeds.

These depend on each site's current markup and are expected to break; every
parser returns an empty list rather than raising when nothing matches.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Iterator, List, Optional, Set

from bs4 import BeautifulSoup, Tag

from crawler.infra.http import HttpFetcher
from crawler.schemas.models import ScrapedLink

logger = logging.getLogger(__name__)

AINOW_URL = "https://ainow.ai/"
AISHINBUN_URL = "https://community.exawizards.com/aishinbun/"
LEDGE_URL = "https://ledge.ai/"

AISHINBUN_CARD_SELECTORS = [
    ".exa-archive-card--type-1",
    ".exa-archive-card--type-2",
    ".exa-archive-card--type-3",
    ".exa-archive-two-columns-layout__list-of-articles__card",
]

_SLASH_DATE = re.compile(r"(\d{4}/\d{1,2}/\d{1,2})")
_URL_DATE = re.compile(r"/(\d{4})/(\d{2})/(\d{2})/")


def fetch_listing_html(url: str, fetcher: Optional[HttpFetcher] = None) -> Optional[str]:
    fetcher = fetcher or HttpFetcher()
    return fetcher.fetch_text(url)


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "lxml")


def _text(node: Optional[Tag]) -> str:
    return node.get_text(" ", strip=True) if node is not None else ""


# --- AINOW (WordPress) -------------------------------------------------------


def parse_ainow(html: str, limit: int) -> List[ScrapedLink]:
    soup = _soup(html)
    links: List[ScrapedLink] = []
    seen: Set[str] = set()

    for article in soup.select("article, .post, .entry, [class*='article'], [class*='post']"):
        if len(links) >= limit:
            break
        title_link = article.select_one("h2 a, h3 a, .entry-title a, [class*='title'] a")
        href = title_link.get("href") if title_link else None
        title = _text(title_link)
        if not href:
            fallback = article.select_one("a[href*='ainow.ai']")
            href = fallback.get("href") if fallback else None
            title = title or _text(article.select_one("h2, h3, [class*='title']"))
        if not title or not href or href in seen:
            continue
        seen.add(href)

        time_tag = article.select_one("time, .entry-date, [class*='date']")
        date_text = ""
        if time_tag is not None:
            date_text = time_tag.get("datetime") or _text(time_tag)
        author = _text(article.select_one(".author, .entry-author, [class*='author']")) or None
        links.append(ScrapedLink(title=title, url=href, author=author, date_text=date_text or None))

    if links:
        return links

    # Fallback: permalinks carrying the date, e.g. https://ainow.ai/2024/01/15/...
    for anchor in soup.select("a[href*='ainow.ai/20']"):
        if len(links) >= limit:
            break
        href = anchor.get("href")
        title = _text(anchor)
        if not href or len(title) < 10:
            continue
        if "/tag/" in href or "/category/" in href or href in seen:
            continue
        seen.add(href)
        match = _URL_DATE.search(href)
        date_text = f"{match.group(1)}/{match.group(2)}/{match.group(3)}" if match else None
        links.append(ScrapedLink(title=title, url=href, date_text=date_text))
    return links


# --- AI新聞 (exawizards) -------------------------------------------------------


def parse_aishinbun(html: str, limit: int) -> List[ScrapedLink]:
    soup = _soup(html)
    links: List[ScrapedLink] = []
    for card in soup.select(", ".join(AISHINBUN_CARD_SELECTORS)):
        if len(links) >= limit:
            break
        anchor = card.find("a")
        href = anchor.get("href") if anchor else None
        title = _text(card.select_one("h2, h3")) or _text(anchor)
        if not title or not href:
            continue
        match = _SLASH_DATE.search(card.get_text(" "))
        links.append(ScrapedLink(title=title, url=href, date_text=match.group(1) if match else None))
    return links


# --- Ledge.ai (Nuxt) -----------------------------------------------------------


def parse_ledge(html: str, limit: int) -> List[ScrapedLink]:
    soup = _soup(html)
    for script in soup.find_all("script"):
        content = script.string or script.get_text() or ""
        if "__NUXT__" not in content and "fetchNewestArticles" not in content:
            continue
        articles = extract_nuxt_articles(content)
        if articles:
            return articles[:limit]
    return _parse_ledge_links(soup, limit)


def extract_nuxt_articles(script_content: str) -> List[ScrapedLink]:
    """Pull `{"data": [{id, attributes: {...}}]}` arrays out of an inline Nuxt payload."""
    articles: List[ScrapedLink] = []
    for payload in _json_arrays_after(script_content, '"data":'):
        for item in payload:
            if not isinstance(item, dict):
                continue
            attrs = item.get("attributes") or {}
            title, slug = attrs.get("title"), attrs.get("slug")
            if not title or not slug:
                continue
            editor = (((attrs.get("editor") or {}).get("data") or {}).get("attributes") or {}).get("name")
            articles.append(
                ScrapedLink(
                    title=title,
                    url=f"https://ledge.ai/articles/{slug}",
                    author=editor,
                    date_text=attrs.get("scheduled_at") or attrs.get("publishedAt"),
                    native_id=str(item["id"]) if item.get("id") is not None else slug,
                )
            )
    return articles


def _json_arrays_after(text: str, marker: str) -> Iterator[List[Any]]:
    decoder = json.JSONDecoder()
    start = 0
    while True:
        pos = text.find(marker, start)
        if pos < 0:
            return
        cursor = pos + len(marker)
        while cursor < len(text) and text[cursor].isspace():
            cursor += 1
        start = cursor
        if cursor >= len(text) or text[cursor] != "[":
            continue
        try:
            value, end = decoder.raw_decode(text, cursor)
        except json.JSONDecodeError:
            continue
        start = end
        if isinstance(value, list):
            yield value


def _parse_ledge_links(soup: BeautifulSoup, limit: int) -> List[ScrapedLink]:
    links: List[ScrapedLink] = []
    seen: Set[str] = set()
    for anchor in soup.select("a[href*='/articles/']"):
        if len(links) >= limit:
            break
        href = anchor.get("href")
        if not href or href in seen:
            continue
        container = anchor.find_parent(["article", "div", "li"])
        title = ""
        if container is not None:
            title = _text(container.select_one("h2, h3, [class*='title']"))
        title = title or _text(anchor)
        if len(title) < 5:
            continue
        seen.add(href)
        date_text = _text(container.select_one("time, [class*='date']")) if container is not None else ""
        slug = href.rstrip("/").rsplit("/", 1)[-1]
        links.append(ScrapedLink(title=title, url=href, date_text=date_text or None, native_id=slug))
    return links
