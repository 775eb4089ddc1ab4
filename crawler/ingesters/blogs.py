"""
Company/research blog feeds.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from crawler.infra.http import HttpFetcher
from crawler.ingesters.rss_base import FeedFetchError, fetch_feed, make_feed_fetcher
from crawler.schemas.models import FeedEntry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlogSource:
    id: str
    name: str
    feed_url: str
    site_url: str


BLOG_SOURCES: List[BlogSource] = [
    BlogSource("openai", "OpenAI", "https://openai.com/news/rss.xml", "https://openai.com"),
    BlogSource("google-research", "Google Research", "https://research.google/blog/rss", "https://research.google"),
    BlogSource(
        "microsoft-research",
        "Microsoft Research",
        "https://www.microsoft.com/en-us/research/blog/feed/",
        "https://www.microsoft.com/en-us/research",
    ),
    BlogSource("huggingface", "Hugging Face", "https://huggingface.co/blog/feed.xml", "https://huggingface.co"),
]


def blog_sources_from_config(entries: Iterable[Dict[str, str]]) -> List[BlogSource]:
    sources: List[BlogSource] = []
    for raw in entries:
        try:
            sources.append(
                BlogSource(
                    id=str(raw["id"]),
                    name=str(raw.get("name") or raw["id"]),
                    feed_url=str(raw["feed_url"]),
                    site_url=str(raw.get("site_url") or raw["feed_url"]),
                )
            )
        except KeyError as exc:
            logger.warning("Ignoring blog source without %s: %s", exc, raw)
    return sources


def fetch_blog_entries(
    sources: Iterable[BlogSource] = BLOG_SOURCES,
    limit_per_source: int = 10,
    fetcher: Optional[HttpFetcher] = None,
) -> List[Tuple[BlogSource, FeedEntry]]:
    """
    Entries from every blog, at most `limit_per_source` each.
    A failing feed is logged and skipped.
    """
    fetcher = fetcher or make_feed_fetcher()
    collected: List[Tuple[BlogSource, FeedEntry]] = []
    for source in sources:
        try:
            entries = fetch_feed(source.feed_url, fetcher)
        except FeedFetchError as exc:
            logger.error("  - %s: failed to fetch: %s", source.name, exc)
            continue
        picked = entries[:limit_per_source]
        collected.extend((source, entry) for entry in picked)
        logger.info("  - %s: %d items", source.name, len(picked))
    return collected
