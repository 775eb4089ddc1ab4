"""
Core data structures shared by the AI news pipeline.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union


class SourceType(str, Enum):
    HACKERNEWS = "hackernews"
    REDDIT = "reddit"
    BLOG = "blog"
    ITMEDIA = "itmedia"
    QIITA = "qiita"
    AINOW = "ainow"
    LEDGE = "ledge"
    AISHINBUN = "aishinbun"


class Language(str, Enum):
    JA = "ja"
    EN = "en"


Sentiment = Literal["positive", "negative", "neutral"]
SENTIMENTS = ("positive", "negative", "neutral")


@dataclass(frozen=True)
class SourceConfig:
    name: str
    type: SourceType
    language: Language
    enabled: bool = True


# Per-source metadata variants; `kind` tags which one a NewsItem carries.


@dataclass
class HackerNewsMetadata:
    score: int
    comments_count: int
    hn_id: int
    kind: Literal["hackernews"] = "hackernews"


@dataclass
class RedditMetadata:
    score: int
    comments_count: int
    subreddit: str
    permalink: str
    kind: Literal["reddit"] = "reddit"


@dataclass
class FeedMetadata:
    description: Optional[str] = None
    feed_name: Optional[str] = None
    kind: Literal["feed"] = "feed"


@dataclass
class ScrapedMetadata:
    site_name: str
    kind: Literal["scraped"] = "scraped"


SourceMetadata = Union[HackerNewsMetadata, RedditMetadata, FeedMetadata, ScrapedMetadata]


@dataclass
class NewsItem:
    """
    Normalized representation of an article/post across all upstream sources.
    """

    id: str
    title: str
    url: Optional[str]
    author: Optional[str]
    published_at: datetime
    source: SourceType
    metadata: Optional[SourceMetadata] = None
    # True when published_at is the "now" fallback for a missing/unparseable date
    published_at_defaulted: bool = False

    @property
    def description(self) -> Optional[str]:
        if isinstance(self.metadata, FeedMetadata):
            return self.metadata.description
        return None

    @property
    def score(self) -> int:
        if isinstance(self.metadata, (HackerNewsMetadata, RedditMetadata)):
            return self.metadata.score
        return 0


@dataclass
class HealthStatus:
    name: str
    healthy: bool
    last_error: Optional[str] = None
    last_success: Optional[datetime] = None
    items_last_fetch: int = 0
    latency_ms: Optional[float] = None


@dataclass
class NewsSummary:
    id: str
    title: str
    url: Optional[str]
    summary: str
    key_points: List[str]
    category: str
    sentiment: str
    created_at: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "url": self.url,
            "summary": self.summary,
            "keyPoints": list(self.key_points[:3]),
            "category": self.category,
            "sentiment": self.sentiment,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NewsSummary":
        sentiment = data.get("sentiment")
        return cls(
            # Older files stored numeric ids
            id=str(data["id"]),
            title=data.get("title") or "",
            url=data.get("url"),
            summary=data.get("summary") or "",
            key_points=list(data.get("keyPoints") or [])[:3],
            category=data.get("category") or "Other",
            sentiment=sentiment if sentiment in SENTIMENTS else "neutral",
            created_at=data.get("createdAt") or "",
        )


@dataclass
class NewsData:
    generated_at: str
    articles: List[NewsSummary] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"generatedAt": self.generated_at, "articles": [a.to_dict() for a in self.articles]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NewsData":
        return cls(
            generated_at=data.get("generatedAt") or "",
            articles=[NewsSummary.from_dict(a) for a in data.get("articles") or []],
        )


@dataclass
class ArchiveData:
    month: str
    archived_at: str
    articles: List[NewsSummary] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "month": self.month,
            "archivedAt": self.archived_at,
            "articles": [a.to_dict() for a in self.articles],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ArchiveData":
        return cls(
            month=data["month"],
            archived_at=data.get("archivedAt") or "",
            articles=[NewsSummary.from_dict(a) for a in data.get("articles") or []],
        )


@dataclass
class MonthlyStats:
    month: str
    count: int


@dataclass
class NewsStats:
    total_articles: int
    active_articles: int
    archived_articles: int
    monthly_stats: List[MonthlyStats]
    last_updated: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalArticles": self.total_articles,
            "activeArticles": self.active_articles,
            "archivedArticles": self.archived_articles,
            "monthlyStats": [{"month": m.month, "count": m.count} for m in self.monthly_stats],
            "lastUpdated": self.last_updated,
        }


@dataclass(frozen=True)
class ArchiveResult:
    archived: int
    remaining: int
