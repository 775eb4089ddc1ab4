"""
Hacker News adapter: AI-related top stories.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from crawler.ingesters.hackernews import HackerNewsClient
from crawler.schemas.models import HNStory

from ainews.dates import from_timestamp, utc_now
from ainews.models import HackerNewsMetadata, Language, NewsItem, SourceConfig, SourceType

logger = logging.getLogger(__name__)


class HackerNewsSource:
    def __init__(self, client: Optional[HackerNewsClient] = None, scan_depth: int = 200, enabled: bool = True) -> None:
        self.config = SourceConfig(name="Hacker News", type=SourceType.HACKERNEWS, language=Language.EN, enabled=enabled)
        self.client = client or HackerNewsClient()
        self.scan_depth = scan_depth

    def fetch_news(self, limit: int) -> List[NewsItem]:
        try:
            stories = self.client.ai_stories(limit=limit, scan=self.scan_depth)
        except Exception as exc:
            logger.warning("Hacker News fetch failed: %s", exc)
            return []
        return [self._to_item(story) for story in stories]

    def _to_item(self, story: HNStory) -> NewsItem:
        return NewsItem(
            id=f"hn-{story.id}",
            title=story.title or "Untitled",
            url=story.url or None,
            author=story.by or None,
            published_at=from_timestamp(story.time) if story.time else utc_now(),
            source=self.config.type,
            metadata=HackerNewsMetadata(score=story.score, comments_count=story.descendants or 0, hn_id=story.id),
            published_at_defaulted=not story.time,
        )
