"""
Reddit adapter: high-scoring posts from AI subreddits.
"""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from crawler.ingesters.reddit import DEFAULT_AI_SUBREDDITS, RedditClient, post_url
from crawler.schemas.models import RedditPost

from ainews.dates import from_timestamp, utc_now
from ainews.models import Language, NewsItem, RedditMetadata, SourceConfig, SourceType

logger = logging.getLogger(__name__)


class RedditSource:
    def __init__(
        self,
        client: Optional[RedditClient] = None,
        subreddits: Optional[Sequence[str]] = None,
        sort: str = "hot",
        timeframe: str = "day",
        min_score: int = 10,
        enabled: bool = True,
    ) -> None:
        self.config = SourceConfig(name="Reddit", type=SourceType.REDDIT, language=Language.EN, enabled=enabled)
        self.client = client or RedditClient()
        self.subreddits = list(subreddits or DEFAULT_AI_SUBREDDITS)
        self.sort = sort
        self.timeframe = timeframe
        self.min_score = min_score

    def fetch_news(self, limit: int) -> List[NewsItem]:
        try:
            posts = self.client.ai_posts(
                subreddits=self.subreddits,
                sort=self.sort,
                timeframe=self.timeframe,
                min_score=self.min_score,
                limit=limit,
            )
        except Exception as exc:
            logger.warning("Reddit fetch failed: %s", exc)
            return []
        return [self._to_item(post) for post in posts]

    def _to_item(self, post: RedditPost) -> NewsItem:
        return NewsItem(
            id=f"reddit-{post.id}",
            title=f"[r/{post.subreddit}] {post.title}",
            url=post_url(post),
            author=post.author or None,
            published_at=from_timestamp(post.created_utc) if post.created_utc else utc_now(),
            source=self.config.type,
            metadata=RedditMetadata(
                score=post.score,
                comments_count=post.num_comments,
                subreddit=post.subreddit,
                permalink=post.permalink,
            ),
            published_at_defaulted=not post.created_utc,
        )
