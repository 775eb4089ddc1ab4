"""
Main-text extraction for article pages, used as LLM summarization input.
"""
from __future__ import annotations

import logging
import re
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Dict, List, Optional

from bs4 import BeautifulSoup

from crawler.infra.http import HttpFetcher
from crawler.schemas.models import ArticleContent, ScrapingResult

logger = logging.getLogger(__name__)

TIMEOUT_SECONDS = 10

REMOVE_SELECTORS = [
    "script",
    "style",
    "nav",
    "header",
    "footer",
    "aside",
    "iframe",
    "noscript",
    ".advertisement",
    ".ads",
    ".ad",
    ".sidebar",
    ".comments",
    ".comment",
    ".social-share",
    ".related-posts",
    "[role='navigation']",
    "[role='banner']",
    "[role='complementary']",
]

CONTENT_SELECTORS = [
    "article",
    "[role='main']",
    "main",
    ".post-content",
    ".article-content",
    ".entry-content",
    ".content",
    ".post-body",
    "#content",
]

MIN_SECTION_LENGTH = 100
MIN_CONTENT_LENGTH = 50

_WHITESPACE = re.compile(r"\s+")


def clean_text(text: str) -> str:
    return _WHITESPACE.sub(" ", text or "").strip()


def create_excerpt(content: str, max_length: int = 200) -> str:
    if len(content) <= max_length:
        return content
    return content[:max_length].strip() + "..."


def extract_title(soup: BeautifulSoup) -> str:
    og_title = soup.select_one('meta[property="og:title"]')
    if og_title and og_title.get("content"):
        return og_title["content"].strip()
    if soup.title and soup.title.get_text():
        return clean_text(soup.title.get_text())
    h1 = soup.find("h1")
    if h1 and h1.get_text():
        return clean_text(h1.get_text())
    return ""


def extract_site_name(soup: BeautifulSoup) -> Optional[str]:
    for selector in ('meta[property="og:site_name"]', 'meta[name="application-name"]'):
        tag = soup.select_one(selector)
        if tag and tag.get("content"):
            return tag["content"].strip()
    return None


def extract_content(soup: BeautifulSoup) -> str:
    for selector in REMOVE_SELECTORS:
        for node in soup.select(selector):
            node.decompose()

    for selector in CONTENT_SELECTORS:
        node = soup.select_one(selector)
        if node is None:
            continue
        cleaned = clean_text(node.get_text(" "))
        if len(cleaned) > MIN_SECTION_LENGTH:
            return cleaned

    body = soup.body or soup
    return clean_text(body.get_text(" "))


def parse_article(html: str, url: str) -> ScrapingResult:
    soup = BeautifulSoup(html, "lxml")
    # Title and site name come from <head>, read them before boilerplate removal
    title = extract_title(soup)
    site_name = extract_site_name(soup)
    content = extract_content(soup)

    if len(content) < MIN_CONTENT_LENGTH:
        return ScrapingResult(success=False, error="Could not extract meaningful content from the page")

    return ScrapingResult(
        success=True,
        data=ArticleContent(
            url=url,
            title=title,
            content=content,
            excerpt=create_excerpt(content),
            site_name=site_name,
            fetched_at=datetime.now(timezone.utc),
        ),
    )


def scrape_article(url: str, fetcher: Optional[HttpFetcher] = None) -> ScrapingResult:
    fetcher = fetcher or HttpFetcher(timeout=TIMEOUT_SECONDS, max_retries=1)
    try:
        response = fetcher.fetch_or_raise(url)
    except Exception as exc:
        return ScrapingResult(success=False, error=str(exc) or exc.__class__.__name__)
    if response is None:
        return ScrapingResult(success=False, error="Not modified")
    if not response.encoding or response.encoding.lower() == "iso-8859-1":
        response.encoding = response.apparent_encoding
    return parse_article(response.text, url)


def scrape_articles(
    urls: List[str],
    concurrency: int = 3,
    delay: float = 0.5,
    fetcher: Optional[HttpFetcher] = None,
) -> Dict[str, ScrapingResult]:
    """Scrape in batches of `concurrency`, pausing `delay` seconds between batches."""
    results: Dict[str, ScrapingResult] = {}
    concurrency = max(1, concurrency)
    with ThreadPoolExecutor(max_workers=concurrency) as executor:
        for start in range(0, len(urls), concurrency):
            batch = urls[start : start + concurrency]
            for url, result in zip(batch, executor.map(lambda u: scrape_article(u, fetcher), batch)):
                results[url] = result
            if start + concurrency < len(urls):
                time.sleep(delay)
    return results
