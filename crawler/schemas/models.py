"""
Pydantic models for crawler outputs.
These mirror the upstream payloads closely; normalization into NewsItem happens in ainews.adapters.
"""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class HNStory(BaseModel):
    """Item from the Hacker News Firebase API (`item/{id}.json`)."""

    model_config = ConfigDict(extra="ignore")

    id: int
    title: str = ""
    url: Optional[str] = None
    text: Optional[str] = None
    by: str = ""
    time: int = 0
    score: int = 0
    descendants: Optional[int] = None
    type: str = "story"


class RedditPost(BaseModel):
    """`data` member of a t3 child in a Reddit listing."""

    model_config = ConfigDict(extra="ignore")

    id: str
    title: str = ""
    url: str = ""
    selftext: str = ""
    author: str = ""
    score: int = 0
    num_comments: int = 0
    created_utc: float = 0
    subreddit: str = ""
    is_self: bool = False
    permalink: str = ""
    over_18: bool = False
    stickied: bool = False


class FeedEntry(BaseModel):
    """One RSS item or Atom entry, before date parsing."""

    title: Optional[str] = None
    link: Optional[str] = None
    description: Optional[str] = None
    published: Optional[str] = None
    updated: Optional[str] = None
    author: Optional[str] = None
    guid: Optional[str] = None
    categories: List[str] = []

    @field_validator("title", "link", "description", "author", "guid", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value


class ScrapedLink(BaseModel):
    """Article link found on an HTML listing page."""

    title: str
    url: str
    author: Optional[str] = None
    date_text: Optional[str] = None
    native_id: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def _trim_title(cls, value: str) -> str:
        return (value or "").strip()


class ArticleContent(BaseModel):
    url: str
    title: str
    content: str
    excerpt: str
    site_name: Optional[str] = None
    fetched_at: datetime


class ScrapingResult(BaseModel):
    success: bool
    data: Optional[ArticleContent] = None
    error: Optional[str] = None
