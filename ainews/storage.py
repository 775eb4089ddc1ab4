"""
Flat JSON files consumed by the static site:

    <data_dir>/news.json            active articles (NewsData)
    <data_dir>/archive/YYYY-MM.json one file per month (ArchiveData)
    <data_dir>/stats.json           NewsStats
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

from ainews.models import ArchiveData, NewsData, NewsStats

logger = logging.getLogger(__name__)

NEWS_FILE = "news.json"
ARCHIVE_DIR = "archive"
STATS_FILE = "stats.json"


class NewsStore:
    def __init__(self, data_dir: Path) -> None:
        self.data_dir = Path(data_dir)
        self.news_file = self.data_dir / NEWS_FILE
        self.archive_dir = self.data_dir / ARCHIVE_DIR
        self.stats_file = self.data_dir / STATS_FILE

    # -- active --------------------------------------------------------------

    def load_news(self) -> Optional[NewsData]:
        if not self.news_file.exists():
            logger.info("News file not found: %s", self.news_file)
            return None
        return NewsData.from_dict(_read_json(self.news_file))

    def save_news(self, data: NewsData) -> None:
        _write_json(self.news_file, data.to_dict())
        logger.info("News data updated: %s", self.news_file)

    # -- archive -------------------------------------------------------------

    def archive_path(self, month: str) -> Path:
        return self.archive_dir / f"{month}.json"

    def load_archive(self, month: str) -> Optional[ArchiveData]:
        path = self.archive_path(month)
        if not path.exists():
            return None
        return ArchiveData.from_dict(_read_json(path))

    def save_archive(self, data: ArchiveData) -> None:
        path = self.archive_path(data.month)
        _write_json(path, data.to_dict())
        logger.info("Archive saved: %s", path)

    def archive_months(self) -> List[str]:
        """Months with an archive file, newest first."""
        if not self.archive_dir.exists():
            return []
        return sorted((p.stem for p in self.archive_dir.glob("*.json")), reverse=True)

    def iter_archives(self) -> Iterator[ArchiveData]:
        for month in self.archive_months():
            data = self.load_archive(month)
            if data is not None:
                yield data

    # -- stats ---------------------------------------------------------------

    def save_stats(self, stats: NewsStats) -> None:
        _write_json(self.stats_file, stats.to_dict())
        logger.info("Stats saved: %s", self.stats_file)


def _read_json(path: Path) -> Dict[str, Any]:
    return json.loads(path.read_text(encoding="utf-8"))


def _write_json(path: Path, payload: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")
