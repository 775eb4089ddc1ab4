"""
High-level orchestration: fetch from the source manager, scrape, summarize and
write the active news file.
"""
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional

from crawler.extractors.article import scrape_articles
from crawler.schemas.models import ScrapingResult

from ainews.dates import isoformat_z, utc_now
from ainews.manager import SourceFilter, SourceManager
from ainews.models import NewsData, NewsItem, NewsSummary, SourceType
from ainews.storage import NewsStore
from ainews.summarizer.service import SummarizerService, simple_summary

logger = logging.getLogger(__name__)

FETCH_MODES = ("hackernews", "reddit", "blogs", "japan", "all")

Scraper = Callable[[List[str]], Dict[str, ScrapingResult]]


def filter_for_mode(mode: str) -> SourceFilter:
    if mode == "hackernews":
        return SourceFilter(enabled_sources=[SourceType.HACKERNEWS])
    if mode == "reddit":
        return SourceFilter(enabled_sources=[SourceType.REDDIT])
    if mode == "blogs":
        return SourceFilter(enabled_sources=[SourceType.BLOG])
    if mode == "japan":
        return SourceFilter(japanese_only=True)
    if mode == "all":
        return SourceFilter()
    raise ValueError(f"Unknown fetch mode '{mode}'. Expected one of: {', '.join(FETCH_MODES)}")


@dataclass
class PipelineError:
    id: str
    title: str
    source: str
    error: str


@dataclass
class PipelineStats:
    total_fetched: int = 0
    successful_scrapes: int = 0
    successful_summaries: int = 0
    total_tokens: int = 0
    by_source: Dict[str, int] = field(default_factory=dict)


@dataclass
class PipelineResult:
    summaries: List[NewsSummary] = field(default_factory=list)
    errors: List[PipelineError] = field(default_factory=list)
    stats: PipelineStats = field(default_factory=PipelineStats)
    simple_mode: bool = False


class NewsPipeline:
    def __init__(
        self,
        manager: SourceManager,
        store: NewsStore,
        summarizer: Optional[SummarizerService] = None,
        scraper: Optional[Scraper] = None,
        scrape_concurrency: int = 3,
        scrape_delay: float = 0.5,
    ) -> None:
        self.manager = manager
        self.store = store
        # None means simple mode: no scraping, no LLM
        self.summarizer = summarizer
        self.scraper: Scraper = scraper or (
            lambda urls: scrape_articles(urls, concurrency=scrape_concurrency, delay=scrape_delay)
        )

    @property
    def simple_mode(self) -> bool:
        return self.summarizer is None

    def run(self, mode: str = "all", limit_per_source: int = 5, now: Optional[datetime] = None) -> PipelineResult:
        options = filter_for_mode(mode)
        now = now or utc_now()
        result = PipelineResult(simple_mode=self.simple_mode)

        items = self.manager.fetch_all_news(limit_per_source, options)
        result.stats.total_fetched = len(items)
        result.stats.by_source = dict(Counter(item.source.value for item in items))
        logger.info("Fetched %d articles (%s)", len(items), _format_counts(result.stats.by_source))

        if self.simple_mode:
            result.summaries = [simple_summary(item, now=now) for item in items]
            result.stats.successful_summaries = len(result.summaries)
            logger.info("Simple mode: %d summaries built without LLM", len(result.summaries))
            return result

        linkable: List[NewsItem] = []
        for item in items:
            if item.url:
                linkable.append(item)
            else:
                result.errors.append(_error(item, "No URL available"))

        scraped = self.scraper([item.url for item in linkable]) if linkable else {}
        for item in linkable:
            self._process_item(item, scraped.get(item.url), result, now)

        logger.info(
            "Pipeline completed: fetched=%d scraped=%d summarized=%d tokens=%d errors=%d",
            result.stats.total_fetched,
            result.stats.successful_scrapes,
            result.stats.successful_summaries,
            result.stats.total_tokens,
            len(result.errors),
        )
        return result

    def _process_item(
        self,
        item: NewsItem,
        scrape: Optional[ScrapingResult],
        result: PipelineResult,
        now: datetime,
    ) -> None:
        if scrape is None or not scrape.success or scrape.data is None:
            reason = scrape.error if scrape is not None else "no result"
            logger.info("Scraping failed for %s: %s", item.url, reason)
            result.errors.append(_error(item, f"Scraping failed: {reason}"))
            return
        result.stats.successful_scrapes += 1

        summary = self.summarizer.summarize(item, scrape.data, now=now)  # type: ignore[union-attr]
        if not summary.success or summary.data is None:
            result.errors.append(_error(item, f"Summary failed: {summary.error}"))
            return

        result.summaries.append(summary.data)
        result.stats.successful_summaries += 1
        result.stats.total_tokens += summary.total_tokens
        logger.debug("Summary generated for %s (%s)", item.id, summary.data.category)

    def write_active(self, summaries: List[NewsSummary], now: Optional[datetime] = None) -> NewsData:
        """
        Put new summaries in front of the current active articles. An id that
        already exists is replaced by the new summary.
        """
        existing = self.store.load_news()
        new_ids = {summary.id for summary in summaries}
        kept = [article for article in (existing.articles if existing else []) if article.id not in new_ids]

        merged: List[NewsSummary] = []
        seen = set()
        for summary in summaries:
            if summary.id in seen:
                continue
            seen.add(summary.id)
            merged.append(summary)
        merged.extend(kept)

        data = NewsData(generated_at=isoformat_z(now or utc_now()), articles=merged)
        self.store.save_news(data)
        logger.info("Wrote %d active articles (%d new) to %s", len(merged), len(seen), self.store.news_file)
        return data


def _error(item: NewsItem, message: str) -> PipelineError:
    return PipelineError(id=item.id, title=item.title, source=item.source.value, error=message)


def _format_counts(counts: Dict[str, int]) -> str:
    return ", ".join(f"{source}: {count}" for source, count in counts.items()) or "none"
