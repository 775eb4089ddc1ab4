"""
Keeps credentials out of log lines and error strings.
"""
from __future__ import annotations

import re

_PATTERNS = [
    # api_key=..., token=..., secret=... in query strings
    (re.compile(r"(?i)\b(api[_-]?key|key|token|secret)=([^&\s]+)"), r"\1=***REDACTED***"),
    (re.compile(r"(?i)Bearer\s+[A-Za-z0-9._\-]+"), "Bearer ***REDACTED***"),
    # OpenAI-style secret keys
    (re.compile(r"\bsk-[A-Za-z0-9_\-]{8,}"), "sk-***REDACTED***"),
]


def redact_secrets(text: str) -> str:
    if not isinstance(text, str):
        return text
    for pattern, replacement in _PATTERNS:
        text = pattern.sub(replacement, text)
    return text


def is_configured_key(value: str | None) -> bool:
    """False for empty values and placeholders such as YOUR_API_KEY."""
    if not value or not value.strip():
        return False
    return "YOUR_" not in value and "your_" not in value
