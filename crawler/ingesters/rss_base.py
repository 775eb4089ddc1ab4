"""
Shared helpers for RSS 2.0 / Atom ingestion.
"""
from __future__ import annotations

import logging
from typing import List

import feedparser
import requests

from crawler.infra.http import FEED_ACCEPT, HttpFetcher
from crawler.schemas.models import FeedEntry

logger = logging.getLogger(__name__)


class FeedFetchError(RuntimeError):
    """Raised when a feed cannot be downloaded or parsed at all."""


def make_feed_fetcher(user_agent: str | None = None) -> HttpFetcher:
    return HttpFetcher(user_agent=user_agent, accept=FEED_ACCEPT, max_retries=2)


def fetch_feed(url: str, fetcher: HttpFetcher | None = None) -> List[FeedEntry]:
    """
    Download and parse a feed. Unlike the other fetch helpers this raises
    FeedFetchError so aggregating callers can decide how to report it.
    """
    fetcher = fetcher or make_feed_fetcher()
    try:
        response = fetcher.fetch_or_raise(url)
    except requests.RequestException as exc:
        raise FeedFetchError(f"Failed to fetch feed {url}: {exc}") from exc
    if response is None:
        # 304 Not Modified
        return []
    return parse_feed_entries(response.content, url)


def parse_feed_entries(feed_content: bytes | str, feed_url: str = "") -> List[FeedEntry]:
    feed = feedparser.parse(feed_content)
    entries = getattr(feed, "entries", [])
    if getattr(feed, "bozo", False) and not entries:
        raise FeedFetchError(f"Unparseable feed {feed_url}: {getattr(feed, 'bozo_exception', '')}")

    items: List[FeedEntry] = []
    for entry in entries:
        items.append(
            FeedEntry(
                title=entry.get("title"),
                link=_entry_link(entry),
                description=entry.get("summary") or entry.get("description"),
                published=entry.get("published"),
                updated=entry.get("updated"),
                author=entry.get("author"),
                guid=entry.get("id") or entry.get("guid"),
                categories=[tag.get("term") for tag in entry.get("tags", []) if tag.get("term")],
            )
        )
    return items


def _entry_link(entry) -> str | None:
    # Atom entries may carry several links; prefer rel="alternate"
    for link in entry.get("links", []) or []:
        if link.get("rel", "alternate") == "alternate" and link.get("href"):
            return link["href"]
    return entry.get("link")
