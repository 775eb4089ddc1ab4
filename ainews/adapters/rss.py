"""
Feed-backed adapters: ITmedia AI+ (RSS 2.0), Qiita tag feeds (Atom) and
company research blogs (RSS).
"""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Set

from crawler.infra.http import HttpFetcher
from crawler.ingesters.blogs import BLOG_SOURCES, BlogSource, fetch_blog_entries
from crawler.ingesters.rss_base import FeedFetchError, fetch_feed, make_feed_fetcher
from crawler.schemas.models import FeedEntry

from ainews.dates import parse_date
from ainews.models import FeedMetadata, Language, NewsItem, SourceConfig, SourceType

logger = logging.getLogger(__name__)

ITMEDIA_RSS_URL = "https://rss.itmedia.co.jp/rss/2.0/aiplus.xml"

QIITA_FEED_URLS = [
    "https://qiita.com/tags/machinelearning/feed",
    "https://qiita.com/tags/ai/feed",
    "https://qiita.com/tags/llm/feed",
]


def entry_to_item(
    entry: FeedEntry,
    item_id: str,
    source: SourceType,
    feed_name: str,
    author: Optional[str] = None,
) -> NewsItem:
    parsed = parse_date(entry.published or entry.updated)
    return NewsItem(
        id=item_id,
        title=entry.title or "Untitled",
        url=entry.link or None,
        author=entry.author or author,
        published_at=parsed.value,
        source=source,
        metadata=FeedMetadata(description=entry.description, feed_name=feed_name),
        published_at_defaulted=parsed.defaulted,
    )


class ITMediaSource:
    """Single RSS feed; a failing feed raises FeedFetchError to the caller."""

    def __init__(self, feed_url: str = ITMEDIA_RSS_URL, fetcher: Optional[HttpFetcher] = None, enabled: bool = True) -> None:
        self.config = SourceConfig(name="ITmedia AI+", type=SourceType.ITMEDIA, language=Language.JA, enabled=enabled)
        self.feed_url = feed_url
        self.fetcher = fetcher or make_feed_fetcher()

    def fetch_news(self, limit: int) -> List[NewsItem]:
        logger.info("Fetching news from %s...", self.config.name)
        entries = fetch_feed(self.feed_url, self.fetcher)
        items = [
            entry_to_item(entry, f"itmedia-{entry.guid or index}", self.config.type, self.config.name)
            for index, entry in enumerate(entries[:limit])
        ]
        logger.info("Found %d articles from %s", len(items), self.config.name)
        return items


class QiitaSource:
    def __init__(
        self,
        feed_urls: Sequence[str] = QIITA_FEED_URLS,
        fetcher: Optional[HttpFetcher] = None,
        enabled: bool = True,
    ) -> None:
        self.config = SourceConfig(name="Qiita", type=SourceType.QIITA, language=Language.JA, enabled=enabled)
        self.feed_urls = list(feed_urls)
        self.fetcher = fetcher or make_feed_fetcher()

    def fetch_news(self, limit: int) -> List[NewsItem]:
        logger.info("Fetching news from %s...", self.config.name)
        items: List[NewsItem] = []
        seen: Set[str] = set()
        for feed_url in self.feed_urls:
            try:
                entries = fetch_feed(feed_url, self.fetcher)
            except FeedFetchError as exc:
                logger.error("Failed to fetch %s: %s", feed_url, exc)
                continue
            for entry in entries:
                # The same article is commonly tagged with several of the feeds
                if not entry.link or entry.link in seen:
                    continue
                seen.add(entry.link)
                items.append(
                    entry_to_item(entry, f"qiita-{entry.guid or entry.link}", self.config.type, self.config.name)
                )

        items.sort(key=lambda item: item.published_at, reverse=True)
        logger.info("Found %d articles from %s", min(len(items), limit), self.config.name)
        return items[:limit]


class BlogFeedSource:
    """Research/company blogs; `limit` applies per blog."""

    def __init__(
        self,
        blogs: Optional[Sequence[BlogSource]] = None,
        fetcher: Optional[HttpFetcher] = None,
        enabled: bool = True,
    ) -> None:
        self.config = SourceConfig(name="AI Blogs", type=SourceType.BLOG, language=Language.EN, enabled=enabled)
        self.blogs = list(blogs or BLOG_SOURCES)
        self.fetcher = fetcher or make_feed_fetcher()

    def fetch_news(self, limit: int) -> List[NewsItem]:
        logger.info("Fetching news from %d blog sources...", len(self.blogs))
        pairs = fetch_blog_entries(self.blogs, limit_per_source=limit, fetcher=self.fetcher)
        items = [
            entry_to_item(
                entry,
                f"blog-{blog.id}-{entry.guid or entry.link or index}",
                self.config.type,
                blog.name,
                author=blog.name,
            )
            for index, (blog, entry) in enumerate(pairs)
        ]
        items.sort(key=lambda item: item.published_at, reverse=True)
        logger.info("Total blog news items: %d", len(items))
        return items
