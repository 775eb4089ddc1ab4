"""
Adapters over the HTML listing scrapers (AINOW, Ledge.ai, AI新聞).
"""
from __future__ import annotations

import logging
from typing import Callable, List, Optional

from crawler.infra.http import HttpFetcher
from crawler.ingesters import jp_sites
from crawler.pipelines.dedupe import make_digest
from crawler.schemas.models import ScrapedLink

from ainews.dates import parse_date, parse_japanese_date, resolve_url
from ainews.models import Language, NewsItem, ScrapedMetadata, SourceConfig, SourceType

logger = logging.getLogger(__name__)


class ScrapedSiteSource:
    """
    Fetches a listing page and normalizes the links a site parser finds.
    Ids hash the resolved URL so they stay stable between runs.
    """

    page_url: str = ""
    parser: Callable[[str, int], List[ScrapedLink]]
    japanese_dates: bool = True

    def __init__(self, config: SourceConfig, fetcher: Optional[HttpFetcher] = None) -> None:
        self.config = config
        self.fetcher = fetcher or HttpFetcher()

    def fetch_news(self, limit: int) -> List[NewsItem]:
        logger.info("Fetching news from %s...", self.config.name)
        html = jp_sites.fetch_listing_html(self.page_url, self.fetcher)
        if not html:
            logger.warning("No HTML received from %s", self.page_url)
            return []
        links = self.parser(html, limit)
        items = [self._to_item(link) for link in links]
        logger.info("Found %d articles from %s", len(items), self.config.name)
        return items

    def _to_item(self, link: ScrapedLink) -> NewsItem:
        url = resolve_url(self.page_url, link.url)
        parse = parse_japanese_date if self.japanese_dates else parse_date
        parsed = parse(link.date_text)
        native_id = link.native_id or make_digest([url], length=12)
        return NewsItem(
            id=f"{self.config.type.value}-{native_id}",
            title=link.title,
            url=url,
            author=link.author,
            published_at=parsed.value,
            source=self.config.type,
            metadata=ScrapedMetadata(site_name=self.config.name),
            published_at_defaulted=parsed.defaulted,
        )


class AINowSource(ScrapedSiteSource):
    page_url = jp_sites.AINOW_URL
    parser = staticmethod(jp_sites.parse_ainow)

    def __init__(self, fetcher: Optional[HttpFetcher] = None, enabled: bool = False) -> None:
        super().__init__(SourceConfig("AINOW", SourceType.AINOW, Language.JA, enabled), fetcher)


class LedgeSource(ScrapedSiteSource):
    page_url = jp_sites.LEDGE_URL
    parser = staticmethod(jp_sites.parse_ledge)
    # Nuxt payloads carry ISO timestamps
    japanese_dates = False

    def __init__(self, fetcher: Optional[HttpFetcher] = None, enabled: bool = False) -> None:
        super().__init__(SourceConfig("Ledge.ai", SourceType.LEDGE, Language.JA, enabled), fetcher)


class AIShinbunSource(ScrapedSiteSource):
    page_url = jp_sites.AISHINBUN_URL
    parser = staticmethod(jp_sites.parse_aishinbun)

    def __init__(self, fetcher: Optional[HttpFetcher] = None, enabled: bool = False) -> None:
        super().__init__(SourceConfig("AI新聞", SourceType.AISHINBUN, Language.JA, enabled), fetcher)
