"""
Builds the adapter registry from `config/sources.yaml`.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from crawler.ingesters.blogs import BLOG_SOURCES, blog_sources_from_config
from crawler.ingesters.reddit import DEFAULT_AI_SUBREDDITS

from ainews.adapters.base import AdapterRegistry, SourceAdapter
from ainews.adapters.hackernews import HackerNewsSource
from ainews.adapters.reddit import RedditSource
from ainews.adapters.rss import BlogFeedSource, ITMediaSource, QiitaSource
from ainews.adapters.scraped import AIShinbunSource, AINowSource, LedgeSource
from ainews.models import SourceType

logger = logging.getLogger(__name__)


def build_registry(config: Optional[Dict[str, Any]] = None) -> AdapterRegistry:
    """
    Default registry order: English API/feed sources first, then Japanese
    feeds, then the HTML scrapers.
    """
    config = config or {}
    sources_cfg: Dict[str, Any] = config.get("sources") or {}

    registry = AdapterRegistry()
    for adapter in (
        _configure_hackernews(sources_cfg.get("hackernews") or {}),
        _configure_reddit(sources_cfg.get("reddit") or {}),
        _configure_blogs(sources_cfg.get("blog") or {}),
        ITMediaSource(),
        QiitaSource(),
        AINowSource(),
        LedgeSource(),
        AIShinbunSource(),
    ):
        registry.register(adapter)

    _apply_enabled_overrides(registry, sources_cfg)
    return registry


def _configure_hackernews(cfg: Dict[str, Any]) -> SourceAdapter:
    return HackerNewsSource(scan_depth=int(cfg.get("scan_depth", 200)))


def _configure_reddit(cfg: Dict[str, Any]) -> SourceAdapter:
    subreddits = cfg.get("subreddits") or DEFAULT_AI_SUBREDDITS
    if isinstance(subreddits, str):
        subreddits = [s.strip() for s in subreddits.split(",") if s.strip()]
    return RedditSource(
        subreddits=subreddits,
        sort=cfg.get("sort", "hot"),
        timeframe=cfg.get("timeframe", "day"),
        min_score=int(cfg.get("min_score", 10)),
    )


def _configure_blogs(cfg: Dict[str, Any]) -> SourceAdapter:
    feeds: List[Dict[str, str]] = cfg.get("feeds") or []
    blogs = blog_sources_from_config(feeds) if feeds else BLOG_SOURCES
    return BlogFeedSource(blogs=blogs)


def _apply_enabled_overrides(registry: AdapterRegistry, sources_cfg: Dict[str, Any]) -> None:
    for key, cfg in sources_cfg.items():
        if not isinstance(cfg, dict) or "enabled" not in cfg:
            continue
        try:
            source_type = SourceType(key)
        except ValueError:
            logger.warning("Unknown source '%s' in sources config; skipping.", key)
            continue
        registry.set_enabled(source_type, bool(cfg["enabled"]))
