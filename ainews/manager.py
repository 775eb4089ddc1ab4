"""
Fan-out across the enabled source adapters, then merge, dedupe and sort.
"""
from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from crawler.pipelines.dedupe import dedupe_by_key

from ainews.adapters.base import AdapterRegistry, SourceAdapter
from ainews.models import HealthStatus, Language, NewsItem, SourceType
from ainews.security import redact_secrets

logger = logging.getLogger(__name__)


@dataclass
class SourceFilter:
    # None means every enabled source
    enabled_sources: Optional[Sequence[SourceType]] = None
    japanese_only: bool = False
    english_only: bool = False


@dataclass
class SourceInfo:
    name: str
    type: SourceType
    language: Language
    enabled: bool


class SourceManager:
    def __init__(self, registry: AdapterRegistry) -> None:
        self.registry = registry
        self._health: Dict[str, HealthStatus] = {}

    def get_enabled_sources(self, options: Optional[SourceFilter] = None) -> List[SourceAdapter]:
        options = options or SourceFilter()
        filtered = [adapter for adapter in self.registry.all() if adapter.config.enabled]

        if options.enabled_sources is not None:
            allowed = set(options.enabled_sources)
            filtered = [adapter for adapter in filtered if adapter.config.type in allowed]

        # Both flags may be set; the result is then empty
        if options.japanese_only:
            filtered = [adapter for adapter in filtered if adapter.config.language == Language.JA]
        if options.english_only:
            filtered = [adapter for adapter in filtered if adapter.config.language == Language.EN]

        return filtered

    def fetch_all_news(self, limit_per_source: int, options: Optional[SourceFilter] = None) -> List[NewsItem]:
        """
        Fetch from every enabled adapter concurrently. A failing adapter
        contributes nothing; the others are unaffected. Results are merged in
        registry order, deduplicated by URL (first wins, URL-less items are all
        kept) and sorted newest first. `limit_per_source` is not re-applied to
        the merged list.
        """
        sources = self.get_enabled_sources(options)
        logger.info(
            "Fetching news from %d sources: %s",
            len(sources),
            ", ".join(source.config.name for source in sources),
        )
        if not sources:
            return []

        per_source: List[List[NewsItem]] = [[] for _ in sources]
        with ThreadPoolExecutor(max_workers=len(sources)) as executor:
            futures = [executor.submit(self._fetch_one, source, limit_per_source) for source in sources]
            for index, future in enumerate(futures):
                per_source[index] = future.result()

        merged = [item for items in per_source for item in items]
        deduped = dedupe_by_key(merged, key_fn=lambda item: item.url)
        deduped.sort(key=lambda item: _sort_key(item.published_at), reverse=True)

        logger.info("Total: %d unique articles", len(deduped))
        return deduped

    def fetch_japanese_news(self, limit_per_source: int) -> List[NewsItem]:
        return self.fetch_all_news(limit_per_source, SourceFilter(japanese_only=True))

    def list_sources(self) -> List[SourceInfo]:
        return [
            SourceInfo(
                name=adapter.config.name,
                type=adapter.config.type,
                language=adapter.config.language,
                enabled=adapter.config.enabled,
            )
            for adapter in self.registry.all()
        ]

    def get_health(self) -> List[HealthStatus]:
        return list(self._health.values())

    def _fetch_one(self, source: SourceAdapter, limit: int) -> List[NewsItem]:
        start = time.time()
        name = source.config.name
        try:
            items = list(source.fetch_news(limit))
        except Exception as exc:
            message = redact_secrets(str(exc)) or exc.__class__.__name__
            logger.error("Failed to fetch from %s: %s", name, message)
            self._health[name] = HealthStatus(
                name=name,
                healthy=False,
                last_error=message,
                latency_ms=(time.time() - start) * 1000,
            )
            return []

        logger.debug("Adapter %s fetched %d items", name, len(items))
        self._health[name] = HealthStatus(
            name=name,
            healthy=True,
            last_success=datetime.now(timezone.utc),
            items_last_fetch=len(items),
            latency_ms=(time.time() - start) * 1000,
        )
        return items


def _sort_key(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
