"""Shared data models for feedpages."""

from dataclasses import dataclass, field
from datetime import datetime

from feedpages.config import PageConfig


def format_time(value: datetime | None) -> str:
    """Format a timestamp as e.g. 'Monday 2 Jan 15:04', or '' when absent."""
    if value is None:
        return ""
    return f"{value:%A} {value.day} {value:%b %H:%M}"


@dataclass
class FailedFeed:
    """Represents a feed URL that failed to fetch or parse."""

    url: str
    reason: str


@dataclass(frozen=True)
class Article:
    """One feed item ready for rendering."""

    title: str
    url: str
    content: str
    feed_title: str
    feed_url: str
    published_at: datetime | None = None

    @property
    def formatted_time(self) -> str:
        return format_time(self.published_at)


@dataclass
class Page:
    """Everything the template needs to render one page."""

    title: str
    name: str
    fetched_at: datetime
    pages: list[PageConfig] = field(default_factory=list)
    articles: list[Article] = field(default_factory=list)

    @property
    def formatted_fetch_time(self) -> str:
        return format_time(self.fetched_at)
