"""
Deduplication helpers for crawler outputs.
"""
from __future__ import annotations

import hashlib
from typing import Callable, Hashable, Iterable, List, Optional, Sequence, TypeVar

T = TypeVar("T")


def make_digest(parts: Sequence[Optional[str]], length: int = 16) -> str:
    joined = "|".join(part or "" for part in parts)
    return hashlib.sha256(joined.encode("utf-8")).hexdigest()[:length]


def dedupe_by_key(items: Iterable[T], key_fn: Callable[[T], Optional[Hashable]]) -> List[T]:
    """
    Keep the first item for every key. Items whose key is None or empty are
    always kept and never compared with each other.
    """
    seen = set()
    result: List[T] = []
    for item in items:
        key = key_fn(item)
        if not key:
            result.append(item)
            continue
        if key in seen:
            continue
        seen.add(key)
        result.append(item)
    return result
