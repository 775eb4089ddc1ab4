"""
Centralised settings for the AI news pipeline (env-first, code-light).

`.env` is loaded once (path overridable via AINEWS_DOTENV); real environment
variables win over the file.
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from ainews.models import Language
from ainews.security import is_configured_key

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DEFAULT_LLM_MODEL = "gpt-4o-mini"


class ConfigError(RuntimeError):
    pass


@dataclass
class NewsSettings:
    data_dir: Path
    sources_config_path: Path
    archive_threshold_days: int
    limit_per_source: int
    language: Language
    scrape_concurrency: int
    scrape_delay: float
    llm_api_key: Optional[str]
    llm_model: str
    llm_base_url: Optional[str]
    llm_max_tokens: int
    llm_temperature: float
    log_level: str

    @property
    def llm_configured(self) -> bool:
        return is_configured_key(self.llm_api_key or "")


def _int_from_env(key: str, default: int) -> int:
    raw = os.getenv(key)
    if raw is None or str(raw).strip() == "":
        return default
    try:
        value = int(raw)
        return value if value > 0 else default
    except ValueError:
        logger.warning("Invalid int value for %s=%s; using default %s", key, raw, default)
        return default


def _float_from_env(key: str, default: float) -> float:
    raw = os.getenv(key)
    if raw is None or str(raw).strip() == "":
        return default
    try:
        value = float(raw)
        return value if value >= 0 else default
    except ValueError:
        logger.warning("Invalid float value for %s=%s; using default %s", key, raw, default)
        return default


def _language_from_env(key: str, default: Language) -> Language:
    raw = (os.getenv(key) or "").strip().lower()
    if not raw:
        return default
    try:
        return Language(raw)
    except ValueError:
        logger.warning("Unknown language '%s' in %s; using %s.", raw, key, default.value)
        return default


def load_settings(dotenv_path: Optional[str] = None) -> NewsSettings:
    load_dotenv(dotenv_path or os.getenv("AINEWS_DOTENV", ".env"))

    data_dir_env = os.getenv("AINEWS_DATA_DIR")
    sources_env = os.getenv("AINEWS_SOURCES_CONFIG")
    return NewsSettings(
        data_dir=Path(data_dir_env) if data_dir_env else PROJECT_ROOT / "web" / "data",
        sources_config_path=Path(sources_env) if sources_env else PROJECT_ROOT / "config" / "sources.yaml",
        archive_threshold_days=_int_from_env("AINEWS_ARCHIVE_DAYS", 30),
        limit_per_source=_int_from_env("AINEWS_LIMIT_PER_SOURCE", 5),
        language=_language_from_env("AINEWS_LANGUAGE", Language.JA),
        scrape_concurrency=_int_from_env("AINEWS_SCRAPE_CONCURRENCY", 3),
        scrape_delay=_float_from_env("AINEWS_SCRAPE_DELAY", 0.5),
        llm_api_key=os.getenv("LLM_API_KEY") or os.getenv("OPENAI_API_KEY"),
        llm_model=os.getenv("LLM_MODEL") or DEFAULT_LLM_MODEL,
        llm_base_url=os.getenv("LLM_BASE_URL") or None,
        llm_max_tokens=_int_from_env("LLM_MAX_TOKENS", 1024),
        llm_temperature=_float_from_env("LLM_TEMPERATURE", 0.7),
        log_level=(os.getenv("AINEWS_LOG_LEVEL") or "INFO").upper(),
    )


def require_llm(settings: NewsSettings) -> str:
    """Return the LLM API key or raise ConfigError."""
    if not settings.llm_configured:
        raise ConfigError("LLM_API_KEY (or OPENAI_API_KEY) is required. Please set it in .env file.")
    return settings.llm_api_key  # type: ignore[return-value]
