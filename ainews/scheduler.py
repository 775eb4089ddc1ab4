"""
APScheduler entry point: fetch/summarize a few times a day, rotate the archive nightly.
"""
from __future__ import annotations

import logging

from apscheduler.schedulers.blocking import BlockingScheduler

from ainews import build_pipeline, run_archive
from ainews.settings import NewsSettings

logger = logging.getLogger(__name__)


def build_scheduler(settings: NewsSettings, fetch_hours: str = "0,6,12,18", archive_hour: int = 3) -> BlockingScheduler:
    scheduler = BlockingScheduler(timezone="UTC")

    def job_fetch():
        try:
            pipeline = build_pipeline(settings)
            result = pipeline.run("all", limit_per_source=settings.limit_per_source)
            pipeline.write_active(result.summaries)
        except Exception:
            logger.exception("Scheduled fetch failed")

    def job_archive():
        try:
            outcome = run_archive(settings)
            logger.info("Archive rotation: archived=%d remaining=%d", outcome.archived, outcome.remaining)
        except Exception:
            logger.exception("Scheduled archive rotation failed")

    scheduler.add_job(job_fetch, "cron", hour=fetch_hours, minute=0, id="fetch_news")
    scheduler.add_job(job_archive, "cron", hour=archive_hour, minute=30, id="archive_news")
    return scheduler


def run_scheduler(settings: NewsSettings) -> None:
    scheduler = build_scheduler(settings)
    logger.info("Starting scheduler with jobs: %s", ", ".join(job.id for job in scheduler.get_jobs()))
    scheduler.start()
