from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Optional

from crawler.schemas.models import ArticleContent

from ainews.dates import isoformat_z, utc_now
from ainews.llm import LLMClient, LLMError
from ainews.models import Language, NewsItem, NewsSummary
from ainews.summarizer.prompts import (
    DEFAULT_MAX_LENGTH,
    SummaryParseError,
    create_user_prompt,
    get_system_prompt,
    parse_summary_response,
)

logger = logging.getLogger(__name__)


@dataclass
class SummaryResult:
    success: bool
    data: Optional[NewsSummary] = None
    error: Optional[str] = None
    usage: Dict[str, int] = field(default_factory=dict)

    @property
    def total_tokens(self) -> int:
        return self.usage.get("input_tokens", 0) + self.usage.get("output_tokens", 0)


class SummarizerService:
    def __init__(self, client: LLMClient, language: Language = Language.JA, max_length: int = DEFAULT_MAX_LENGTH) -> None:
        self.client = client
        self.language = Language(language)
        self.max_length = max_length

    def summarize(self, item: NewsItem, article: ArticleContent, now: Optional[datetime] = None) -> SummaryResult:
        """Summarize one scraped article; failures come back as an unsuccessful result."""
        system_prompt = get_system_prompt(self.language)
        user_prompt = create_user_prompt(item.title, article.content, self.language, self.max_length)
        try:
            response = self.client.complete(user_prompt, system_prompt)
            parsed = parse_summary_response(response.content)
        except (LLMError, SummaryParseError) as exc:
            logger.warning("Summary failed for %s: %s", item.id, exc)
            return SummaryResult(success=False, error=str(exc))

        summary = NewsSummary(
            id=item.id,
            title=item.title,
            url=item.url,
            summary=parsed.summary,
            key_points=parsed.key_points,
            category=parsed.category,
            sentiment=parsed.sentiment,
            created_at=isoformat_z(now or utc_now()),
        )
        return SummaryResult(success=True, data=summary, usage=dict(response.usage))


def simple_summary(item: NewsItem, now: Optional[datetime] = None) -> NewsSummary:
    """LLM-less summary: the feed description when there is one, else the title."""
    return NewsSummary(
        id=item.id,
        title=item.title,
        url=item.url,
        summary=(item.description or "").strip() or item.title,
        key_points=[],
        category="Other",
        sentiment="neutral",
        created_at=isoformat_z(now or utc_now()),
    )
