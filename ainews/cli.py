"""
Command line entry point: `ainews fetch|archive|sources|schedule`.
"""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click

from ainews import build_pipeline, build_source_manager, run_archive
from ainews.models import Language
from ainews.pipeline import FETCH_MODES
from ainews.settings import NewsSettings, load_settings
from ainews.status import build_status

logger = logging.getLogger("ainews")

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool):
    settings = load_settings()
    logging.basicConfig(level=logging.DEBUG if verbose else settings.log_level, format=LOG_FORMAT)
    ctx.obj = settings


@cli.command()
@click.option("--source", "mode", type=click.Choice(FETCH_MODES), default="all", show_default=True)
@click.option("--limit", type=int, default=None, help="Max articles per source.")
@click.option("--language", type=click.Choice([lang.value for lang in Language]), default=None)
@click.option("--simple", is_flag=True, help="Skip scraping and LLM summaries.")
@click.option("--output-dir", type=click.Path(file_okay=False, path_type=Path), default=None)
@click.pass_obj
def fetch(
    settings: NewsSettings,
    mode: str,
    limit: Optional[int],
    language: Optional[str],
    simple: bool,
    output_dir: Optional[Path],
):
    """Fetch, summarize and write the active news file."""
    try:
        pipeline = build_pipeline(
            settings,
            language=Language(language) if language else None,
            simple=simple,
            data_dir=output_dir,
        )
        result = pipeline.run(mode, limit_per_source=limit or settings.limit_per_source)
        pipeline.write_active(result.summaries)
    except Exception as exc:
        logger.exception("Pipeline failed: %s", exc)
        sys.exit(1)

    click.echo(
        json.dumps(
            {
                "mode": mode,
                "simple": result.simple_mode,
                "total_fetched": result.stats.total_fetched,
                "successful_scrapes": result.stats.successful_scrapes,
                "successful_summaries": result.stats.successful_summaries,
                "total_tokens": result.stats.total_tokens,
                "by_source": result.stats.by_source,
                "errors": len(result.errors),
            },
            ensure_ascii=False,
        )
    )
    for error in result.errors:
        logger.warning("[%s] %s: %s", error.source, error.title, error.error)


@cli.command()
@click.option("--data-dir", type=click.Path(file_okay=False, path_type=Path), default=None)
@click.pass_obj
def archive(settings: NewsSettings, data_dir: Optional[Path]):
    """Move articles older than the threshold into monthly archives."""
    try:
        outcome = run_archive(settings, data_dir=data_dir)
    except Exception as exc:
        logger.exception("Archive rotation failed: %s", exc)
        sys.exit(1)
    click.echo(f"Archived: {outcome.archived}, Remaining: {outcome.remaining}")


@cli.command()
@click.pass_obj
def sources(settings: NewsSettings):
    """List configured sources and effective settings."""
    manager = build_source_manager(settings)
    click.echo(json.dumps(build_status(manager, settings), ensure_ascii=False, indent=2))


@cli.command()
@click.pass_obj
def schedule(settings: NewsSettings):
    """Run the blocking fetch/archive scheduler."""
    from ainews.scheduler import run_scheduler

    run_scheduler(settings)


if __name__ == "__main__":  # pragma: no cover
    cli()
