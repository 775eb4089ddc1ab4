"""
Moves aged articles out of the active news file into monthly archive files
and recomputes the aggregate stats.

Not safe to run concurrently against the same data directory.
"""
from __future__ import annotations

import logging
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from ainews.dates import isoformat_z, parse_timestamp, utc_now
from ainews.models import ArchiveData, ArchiveResult, MonthlyStats, NewsData, NewsStats, NewsSummary
from ainews.storage import NewsStore

logger = logging.getLogger(__name__)

ARCHIVE_THRESHOLD_DAYS = 30
SECONDS_PER_DAY = 24 * 60 * 60

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def month_key(created_at: datetime) -> str:
    """Calendar month of the timestamp in local time, e.g. "2026-01"."""
    return created_at.astimezone().strftime("%Y-%m")


def age_in_days(created_at: datetime, now: datetime) -> float:
    return (now - created_at).total_seconds() / SECONDS_PER_DAY


def _created_sort_key(article: NewsSummary) -> datetime:
    try:
        return parse_timestamp(article.created_at)
    except (ValueError, TypeError):
        return _OLDEST


class ArchiveRotator:
    def __init__(self, store: NewsStore, threshold_days: float = ARCHIVE_THRESHOLD_DAYS) -> None:
        self.store = store
        self.threshold_days = threshold_days

    def run(self, now: Optional[datetime] = None) -> ArchiveResult:
        now = now or utc_now()
        news = self.store.load_news()
        if news is None:
            return ArchiveResult(archived=0, remaining=0)

        active, to_archive = self.partition(news.articles, now)
        if not to_archive:
            logger.info("No articles to archive.")
            return ArchiveResult(archived=0, remaining=len(news.articles))

        for month, articles in self.group_by_month(to_archive).items():
            added = self.merge_month(month, articles, now)
            logger.info("Archived %d new articles to %s", added, month)

        # generatedAt belongs to whoever produced the active file
        self.store.save_news(NewsData(generated_at=news.generated_at, articles=active))
        self.store.save_stats(self.compute_stats(len(active), now))

        return ArchiveResult(archived=len(to_archive), remaining=len(active))

    def partition(self, articles: List[NewsSummary], now: datetime) -> Tuple[List[NewsSummary], List[NewsSummary]]:
        """Split into (active, to_archive); strictly older than the threshold is archived."""
        active: List[NewsSummary] = []
        to_archive: List[NewsSummary] = []
        for article in articles:
            try:
                created = parse_timestamp(article.created_at)
            except (ValueError, TypeError):
                logger.warning("Article %s has unparseable createdAt %r; keeping it active", article.id, article.created_at)
                active.append(article)
                continue
            if age_in_days(created, now) > self.threshold_days:
                to_archive.append(article)
            else:
                active.append(article)
        return active, to_archive

    @staticmethod
    def group_by_month(articles: List[NewsSummary]) -> Dict[str, List[NewsSummary]]:
        grouped: Dict[str, List[NewsSummary]] = OrderedDict()
        for article in articles:
            grouped.setdefault(month_key(parse_timestamp(article.created_at)), []).append(article)
        return grouped

    def merge_month(self, month: str, articles: List[NewsSummary], now: datetime) -> int:
        """Merge into the month's archive without duplicating ids; returns how many were new."""
        existing = self.store.load_archive(month)
        existing_articles = existing.articles if existing else []
        existing_ids = {article.id for article in existing_articles}

        new_articles: List[NewsSummary] = []
        for article in articles:
            if article.id in existing_ids:
                continue
            existing_ids.add(article.id)
            new_articles.append(article)

        merged = existing_articles + new_articles
        merged.sort(key=_created_sort_key, reverse=True)
        self.store.save_archive(ArchiveData(month=month, archived_at=isoformat_z(now), articles=merged))
        return len(new_articles)

    def compute_stats(self, active_count: int, now: datetime) -> NewsStats:
        monthly = [MonthlyStats(month=data.month, count=len(data.articles)) for data in self.store.iter_archives()]
        monthly.sort(key=lambda entry: entry.month, reverse=True)
        archived = sum(entry.count for entry in monthly)
        return NewsStats(
            total_articles=active_count + archived,
            active_articles=active_count,
            archived_articles=archived,
            monthly_stats=monthly,
            last_updated=isoformat_z(now),
        )


def run_archive(store: NewsStore, now: Optional[datetime] = None, threshold_days: float = ARCHIVE_THRESHOLD_DAYS) -> ArchiveResult:
    return ArchiveRotator(store, threshold_days=threshold_days).run(now=now)
