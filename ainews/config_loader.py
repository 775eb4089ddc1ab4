"""
Read `config/sources.yaml`. String values may reference environment
variables as `${NAME}` or `${NAME:-default}`, anywhere in the string.
"""
from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any, Dict

import yaml

logger = logging.getLogger(__name__)

_ENV_REF = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)(?::-([^}]*))?\}")


def load_sources_config(config_path: Path) -> Dict[str, Any]:
    if not config_path.exists():
        logger.warning("sources config not found at %s; using built-in defaults", config_path)
        return {}
    with config_path.open(encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        logger.error("sources config %s must be a mapping, got %s", config_path, type(data).__name__)
        return {}
    return expand_env(data)


def expand_env(value: Any) -> Any:
    if isinstance(value, str):
        return _ENV_REF.sub(lambda m: os.environ.get(m.group(1), m.group(2) or ""), value)
    if isinstance(value, dict):
        return {key: expand_env(item) for key, item in value.items()}
    if isinstance(value, list):
        return [expand_env(item) for item in value]
    return value
