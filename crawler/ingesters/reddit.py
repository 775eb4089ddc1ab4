"""
Reddit listing JSON ingestion (`/r/{subreddit}/{sort}.json`).
"""
from __future__ import annotations

import logging
from typing import List, Optional, Sequence

import requests

from crawler.infra.http import HttpFetcher
from crawler.infra.rate_limiter import RateLimiter
from crawler.schemas.models import RedditPost

logger = logging.getLogger(__name__)

REDDIT_BASE_URL = "https://www.reddit.com"
USER_AGENT = "ai-news-pipeline/1.0"
DEFAULT_AI_SUBREDDITS = ["MachineLearning", "artificial", "deeplearning", "LocalLLaMA"]
VALID_SORTS = {"hot", "top", "new"}

# Reddit asks unauthenticated clients to stay under 60 requests per minute
DELAY_BETWEEN_REQUESTS = 1.0


class RedditRateLimitError(RuntimeError):
    pass


class RedditClient:
    def __init__(
        self,
        fetcher: Optional[HttpFetcher] = None,
        limiter: Optional[RateLimiter] = None,
        delay: float = DELAY_BETWEEN_REQUESTS,
    ) -> None:
        # 429 must not be retried by the fetcher, it is surfaced as RedditRateLimitError
        self.fetcher = fetcher or HttpFetcher(
            user_agent=USER_AGENT,
            accept="application/json",
            retry_statuses=[500, 502, 503, 504],
        )
        self.limiter = limiter or RateLimiter()
        self.limiter.configure("reddit", delay)

    def listing(self, subreddit: str, sort: str = "hot", timeframe: str = "day", limit: int = 25) -> List[RedditPost]:
        """Raw listing request; raises on HTTP errors."""
        if sort not in VALID_SORTS:
            raise ValueError(f"Unsupported Reddit sort '{sort}'")
        params = {"limit": str(limit)}
        if sort == "top":
            params["t"] = timeframe

        self.limiter.wait("reddit")
        try:
            response = self.fetcher.fetch_or_raise(f"{REDDIT_BASE_URL}/r/{subreddit}/{sort}.json", params=params)
        except requests.HTTPError as exc:
            if exc.response is not None and exc.response.status_code == 429:
                raise RedditRateLimitError("Reddit rate limit exceeded. Please try again later.") from exc
            raise
        if response is None:
            return []
        children = (response.json().get("data") or {}).get("children") or []
        return [RedditPost.model_validate(child["data"]) for child in children if isinstance(child, dict) and "data" in child]

    def subreddit_posts(self, subreddit: str, sort: str = "hot", timeframe: str = "day", limit: int = 25) -> List[RedditPost]:
        """Listing without stickied/NSFW posts; any failure yields an empty list."""
        try:
            posts = self.listing(subreddit, sort=sort, timeframe=timeframe, limit=limit)
        except (requests.RequestException, RedditRateLimitError, ValueError) as exc:
            logger.error("Failed to fetch r/%s: %s", subreddit, exc)
            return []
        return [post for post in posts if not post.stickied and not post.over_18]

    def ai_posts(
        self,
        subreddits: Sequence[str] = DEFAULT_AI_SUBREDDITS,
        sort: str = "hot",
        timeframe: str = "day",
        min_score: int = 10,
        limit: int = 20,
    ) -> List[RedditPost]:
        """Posts across subreddits with score >= min_score, highest score first."""
        logger.info("Fetching posts from Reddit: %s...", ", ".join(subreddits))
        collected: List[RedditPost] = []
        for subreddit in subreddits:
            collected.extend(self.subreddit_posts(subreddit, sort=sort, timeframe=timeframe, limit=50))

        filtered = sorted((p for p in collected if p.score >= min_score), key=lambda p: p.score, reverse=True)[:limit]
        logger.info("Found %d Reddit posts (score >= %d)", len(filtered), min_score)
        return filtered


def post_url(post: RedditPost) -> str:
    """Self posts link to their Reddit permalink, link posts to the target URL."""
    if post.is_self or not post.url:
        return f"{REDDIT_BASE_URL}{post.permalink}"
    return post.url
