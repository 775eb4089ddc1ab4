"""
Minimum-interval limiter keyed by upstream (e.g. "reddit").
"""
from __future__ import annotations

import threading
import time
from typing import Callable, Dict


class RateLimiter:
    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._limits: Dict[str, float] = {}
        self._last_hit: Dict[str, float] = {}
        self._lock = threading.Lock()
        self._clock = clock
        self._sleep = sleep

    def configure(self, key: str, min_interval: float) -> None:
        self._limits[key] = min_interval

    def wait(self, key: str) -> float:
        """Block until `key` may be hit again; returns the seconds slept."""
        interval = self._limits.get(key)
        if interval is None:
            return 0.0
        slept = 0.0
        with self._lock:
            now = self._clock()
            last = self._last_hit.get(key)
            if last is not None and now - last < interval:
                slept = interval - (now - last)
                self._sleep(slept)
            self._last_hit[key] = self._clock()
        return slept
