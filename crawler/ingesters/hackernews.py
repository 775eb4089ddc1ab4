"""
Hacker News Firebase API ingestion.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

from crawler.infra.http import HttpFetcher
from crawler.schemas.models import HNStory

logger = logging.getLogger(__name__)

HN_API_BASE = "https://hacker-news.firebaseio.com/v0"

AI_KEYWORDS = [
    "ai",
    "artificial intelligence",
    "machine learning",
    "ml",
    "deep learning",
    "neural network",
    "gpt",
    "llm",
    "chatgpt",
    "openai",
    "anthropic",
    "claude",
    "gemini",
    "transformer",
    "diffusion",
    "stable diffusion",
    "midjourney",
    "generative ai",
    "langchain",
    "rag",
    "embedding",
]


def is_ai_related(title: str) -> bool:
    # Plain substring match: "ai" also hits words like "said".
    lowered = title.lower()
    return any(keyword in lowered for keyword in AI_KEYWORDS)


class HackerNewsClient:
    def __init__(self, fetcher: Optional[HttpFetcher] = None, max_workers: int = 16) -> None:
        self.fetcher = fetcher or HttpFetcher(user_agent="ai-news-pipeline/1.0", accept="application/json")
        self.max_workers = max_workers

    def top_story_ids(self, limit: int = 100) -> List[int]:
        ids = self.fetcher.fetch_json(f"{HN_API_BASE}/topstories.json")
        if not isinstance(ids, list):
            return []
        return [int(i) for i in ids[:limit]]

    def story(self, story_id: int) -> Optional[HNStory]:
        payload = self.fetcher.fetch_json(f"{HN_API_BASE}/item/{story_id}.json")
        if not isinstance(payload, dict):
            return None
        try:
            return HNStory.model_validate(payload)
        except ValueError as exc:
            logger.debug("Skipping malformed HN item %s: %s", story_id, exc)
            return None

    def stories(self, ids: List[int]) -> List[HNStory]:
        if not ids:
            return []
        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(ids))) as executor:
            results = list(executor.map(self.story, ids))
        return [story for story in results if story is not None]

    def ai_stories(self, limit: int = 20, scan: int = 200) -> List[HNStory]:
        """Top stories whose title looks AI-related, in ranking order."""
        logger.info("Fetching top stories from Hacker News...")
        stories = self.stories(self.top_story_ids(scan))
        matched = [s for s in stories if s.type == "story" and is_ai_related(s.title)][:limit]
        logger.info("Found %d AI-related stories", len(matched))
        return matched
