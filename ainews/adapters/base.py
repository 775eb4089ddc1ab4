"""
Adapter protocol + registry for pluggable news sources.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Protocol

from ainews.models import NewsItem, SourceConfig, SourceType

logger = logging.getLogger(__name__)


class SourceAdapter(Protocol):
    config: SourceConfig

    def fetch_news(self, limit: int) -> List[NewsItem]:
        ...


class AdapterRegistry:
    """
    Ordered set of adapters, one per source type. Registration order is the
    order SourceManager merges results in, which decides dedupe winners.
    """

    def __init__(self, adapters: Optional[Iterable[SourceAdapter]] = None) -> None:
        self._adapters: Dict[SourceType, SourceAdapter] = {}
        for adapter in adapters or []:
            self.register(adapter)

    def register(self, adapter: SourceAdapter) -> None:
        key = adapter.config.type
        if key in self._adapters:
            raise ValueError(f"Adapter '{key.value}' already registered")
        self._adapters[key] = adapter

    def get(self, source_type: SourceType) -> Optional[SourceAdapter]:
        return self._adapters.get(source_type)

    def set_enabled(self, source_type: SourceType, enabled: bool) -> None:
        adapter = self._adapters.get(source_type)
        if adapter is None:
            logger.warning("Cannot toggle unknown source '%s'", source_type.value)
            return
        adapter.config = replace(adapter.config, enabled=enabled)

    def all(self) -> List[SourceAdapter]:
        return list(self._adapters.values())

    def keys(self) -> Iterable[SourceType]:
        return self._adapters.keys()

    def __len__(self) -> int:
        return len(self._adapters)
