"""
Status payload for the `ainews sources` command and anything else that wants a
JSON view of the registry, source health and effective settings. Secrets are
never included.
"""
from __future__ import annotations

from typing import Any, Dict

from ainews.dates import isoformat_z, utc_now
from ainews.manager import SourceManager
from ainews.models import HealthStatus
from ainews.settings import NewsSettings


def _health_to_dict(status: HealthStatus) -> Dict[str, Any]:
    return {
        "name": status.name,
        "healthy": status.healthy,
        "last_error": status.last_error,
        "last_success": isoformat_z(status.last_success) if status.last_success else None,
        "items_last_fetch": status.items_last_fetch,
        "latency_ms": status.latency_ms,
    }


def build_status(manager: SourceManager, settings: NewsSettings) -> Dict[str, Any]:
    return {
        "generated_at": isoformat_z(utc_now()),
        "sources": [
            {
                "name": info.name,
                "type": info.type.value,
                "language": info.language.value,
                "enabled": info.enabled,
            }
            for info in manager.list_sources()
        ],
        "health": [_health_to_dict(entry) for entry in manager.get_health()],
        "config": {
            "data_dir": str(settings.data_dir),
            "sources_config": str(settings.sources_config_path),
            "archive_threshold_days": settings.archive_threshold_days,
            "limit_per_source": settings.limit_per_source,
            "language": settings.language.value,
            "llm_model": settings.llm_model,
            "llm_configured": settings.llm_configured,
        },
    }
