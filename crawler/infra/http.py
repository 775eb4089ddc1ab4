"""
requests.Session wrapper shared by every ingester: browser-like headers,
conditional GETs, per-host spacing and retry with backoff on 5xx.
"""
from __future__ import annotations

import logging
import random
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import urlsplit

import requests

from crawler.infra.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

BROWSER_USER_AGENTS = [
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
]

HTML_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
FEED_ACCEPT = "application/rss+xml, application/atom+xml, application/xml, text/xml"

DEFAULT_RETRY_STATUSES = (500, 502, 503, 504)
BACKOFF_SECONDS = 0.5
MAX_BACKOFF_SECONDS = 30


def random_user_agent() -> str:
    return random.choice(BROWSER_USER_AGENTS)


@dataclass
class Validators:
    """ETag / Last-Modified seen on the last 2xx response for a URL, plus that response."""

    etag: Optional[str] = None
    last_modified: Optional[str] = None
    response: Optional[requests.Response] = None

    def as_headers(self) -> Dict[str, str]:
        headers = {}
        if self.etag:
            headers["If-None-Match"] = self.etag
        if self.last_modified:
            headers["If-Modified-Since"] = self.last_modified
        return headers


class HttpFetcher:
    def __init__(
        self,
        user_agent: Optional[str] = None,
        min_delay: float = 0.0,
        max_retries: int = 2,
        timeout: int = 10,
        accept: str = HTML_ACCEPT,
        accept_language: str = "ja,en;q=0.9",
        retry_statuses: Optional[List[int]] = None,
    ) -> None:
        self.session = requests.Session()
        self.session.headers.update(
            {
                "User-Agent": user_agent or random_user_agent(),
                "Accept": accept,
                "Accept-Language": accept_language,
            }
        )
        self.min_delay = min_delay
        self.max_attempts = max(1, max_retries)
        self.timeout = timeout
        self.retry_statuses = set(retry_statuses or DEFAULT_RETRY_STATUSES)
        self._validators: Dict[str, Validators] = {}
        self._hosts = RateLimiter()

    def fetch(self, url: str, params: Optional[Dict[str, Any]] = None) -> Optional[requests.Response]:
        """Like fetch_or_raise, but failures are logged and turned into None."""
        try:
            return self.fetch_or_raise(url, params=params)
        except requests.RequestException as exc:
            logger.warning("GET %s failed: %s", url, exc)
            return None

    def fetch_or_raise(self, url: str, params: Optional[Dict[str, Any]] = None) -> Optional[requests.Response]:
        """
        GET with conditional headers. A 304 replays the cached 2xx response
        for the URL (None if nothing is cached). Statuses outside
        `retry_statuses` raise HTTPError at once; retryable failures raise the
        last error after `max_retries` attempts.
        """
        error: Optional[requests.RequestException] = None
        for attempt in range(self.max_attempts):
            if attempt:
                self._backoff(attempt)
            self._throttle(url)
            validators = self._validators.get(url)
            headers = validators.as_headers() if validators else {}

            try:
                response = self.session.get(url, params=params, headers=headers, timeout=self.timeout)
            except requests.RequestException as exc:
                error = exc
                continue

            status = response.status_code
            if status == 304:
                return validators.response if validators else None
            if status < 400:
                etag = response.headers.get("ETag")
                last_modified = response.headers.get("Last-Modified")
                if etag or last_modified:
                    self._validators[url] = Validators(etag=etag, last_modified=last_modified, response=response)
                else:
                    self._validators.pop(url, None)
                return response

            error = requests.HTTPError(f"HTTP {status} for {url}", response=response)
            if status not in self.retry_statuses:
                raise error

        assert error is not None
        raise error

    def fetch_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        response = self.fetch(url, params=params)
        if response is None:
            return None
        try:
            return response.json()
        except ValueError as exc:
            logger.warning("Invalid JSON from %s: %s", url, exc)
            return None

    def fetch_text(self, url: str) -> Optional[str]:
        response = self.fetch(url)
        if response is None:
            return None
        # requests falls back to ISO-8859-1 when the header has no charset
        if not response.encoding or response.encoding.lower() == "iso-8859-1":
            response.encoding = response.apparent_encoding
        return response.text

    def _throttle(self, url: str) -> None:
        if self.min_delay <= 0:
            return
        host = urlsplit(url).netloc or url
        self._hosts.configure(host, self.min_delay)
        self._hosts.wait(host)

    @staticmethod
    def _backoff(attempt: int) -> None:
        delay = min(MAX_BACKOFF_SECONDS, BACKOFF_SECONDS * (2 ** (attempt - 1)))
        time.sleep(delay + random.random() * 0.5)
