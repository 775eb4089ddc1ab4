"""
Public API for the AI news pipeline.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ainews.archive import ArchiveRotator
from ainews.config_loader import load_sources_config
from ainews.llm import LLMClient
from ainews.manager import SourceFilter, SourceManager
from ainews.models import ArchiveResult, Language
from ainews.pipeline import NewsPipeline, PipelineResult
from ainews.settings import NewsSettings, load_settings, require_llm
from ainews.sources import build_registry
from ainews.storage import NewsStore
from ainews.summarizer.service import SummarizerService

logger = logging.getLogger(__name__)

__all__ = [
    "ArchiveResult",
    "NewsPipeline",
    "NewsSettings",
    "PipelineResult",
    "SourceFilter",
    "SourceManager",
    "build_pipeline",
    "build_source_manager",
    "load_settings",
    "run_archive",
]


def build_source_manager(settings: NewsSettings) -> SourceManager:
    config = load_sources_config(settings.sources_config_path)
    return SourceManager(build_registry(config))


def build_summarizer(settings: NewsSettings, language: Optional[Language] = None) -> SummarizerService:
    client = LLMClient(
        api_key=require_llm(settings),
        model=settings.llm_model,
        max_tokens=settings.llm_max_tokens,
        temperature=settings.llm_temperature,
        base_url=settings.llm_base_url,
    )
    return SummarizerService(client, language=language or settings.language)


def build_pipeline(
    settings: NewsSettings,
    language: Optional[Language] = None,
    simple: bool = False,
    data_dir: Optional[Path] = None,
) -> NewsPipeline:
    """Wire a pipeline; falls back to simple mode when no LLM key is configured."""
    summarizer = None
    if not simple:
        if settings.llm_configured:
            summarizer = build_summarizer(settings, language)
        else:
            logger.warning("LLM API key not configured; running in simple mode")
    return NewsPipeline(
        manager=build_source_manager(settings),
        store=NewsStore(data_dir or settings.data_dir),
        summarizer=summarizer,
        scrape_concurrency=settings.scrape_concurrency,
        scrape_delay=settings.scrape_delay,
    )


def run_archive(settings: NewsSettings, data_dir: Optional[Path] = None) -> ArchiveResult:
    rotator = ArchiveRotator(NewsStore(data_dir or settings.data_dir), threshold_days=settings.archive_threshold_days)
    return rotator.run()
