"""
Date and URL normalization shared by the source adapters.

Every parser falls back to "now" instead of failing; the returned ParsedDate
says whether that happened so callers can tell a fresh item from a defaulted one.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import urljoin

from dateutil import parser as dtparser


@dataclass(frozen=True)
class ParsedDate:
    value: datetime
    defaulted: bool = False


# `<time datetime="...">` values keep their time of day
_ISO_DATETIME = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}")
_BRACKETED = re.compile(r"\s*[(（].*?[)）]\s*")
_JAPANESE_PATTERNS = [
    re.compile(r"(\d{4})[/.\-年](\d{1,2})[/.\-月](\d{1,2})日?"),
    re.compile(r"(\d{4})(\d{2})(\d{2})"),
]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _to_utc(dt: datetime) -> datetime:
    # Naive values are wall-clock time in the local zone
    if dt.tzinfo is None:
        dt = dt.astimezone()
    return dt.astimezone(timezone.utc)


def parse_date(value: Optional[str], now: Optional[datetime] = None) -> ParsedDate:
    """Parse ISO-8601 / RFC-822 style strings; missing or invalid input yields now."""
    if value and value.strip():
        try:
            return ParsedDate(_to_utc(dtparser.parse(value.strip())))
        except (ValueError, OverflowError):
            pass
    return ParsedDate(now or utc_now(), defaulted=True)


def parse_timestamp(value: str) -> datetime:
    """Strict ISO-8601 parsing for our own persisted timestamps; raises ValueError."""
    return _to_utc(dtparser.isoparse(value))


def isoformat_z(dt: datetime) -> str:
    """`2026-01-11T00:00:00.000Z`, the format the front end expects."""
    return _to_utc(dt).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def from_timestamp(seconds: float) -> datetime:
    return datetime.fromtimestamp(seconds, tz=timezone.utc)


def parse_japanese_date(value: Optional[str], now: Optional[datetime] = None) -> ParsedDate:
    """
    Parse dates as printed on Japanese sites: 2024/1/15, 2024.01.15,
    2024年1月15日 (optionally followed by a weekday like "(月)") or 20240115.
    Calendar dates are taken as local midnight.
    """
    if not value:
        return ParsedDate(now or utc_now(), defaulted=True)
    if _ISO_DATETIME.match(value.strip()):
        return parse_date(value, now=now)

    cleaned = _BRACKETED.sub("", value).strip()
    for pattern in _JAPANESE_PATTERNS:
        match = pattern.search(cleaned)
        if not match:
            continue
        year, month, day = (int(part) for part in match.groups())
        try:
            local_midnight = datetime(year, month, day).astimezone()
        except ValueError:
            continue
        return ParsedDate(local_midnight.astimezone(timezone.utc))

    return parse_date(value, now=now)


def resolve_url(base: str, href: str) -> str:
    if href.startswith(("http://", "https://")):
        return href
    return urljoin(base, href)
