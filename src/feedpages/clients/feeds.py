"""Feed document parsing on top of feedparser."""

import io
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import feedparser


class FeedParseError(Exception):
    """Raised when a document is not recognisable as RSS or Atom."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


@dataclass
class FeedItem:
    """A single entry of a parsed feed."""

    title: str = ""
    link: str = ""
    content: str = ""
    summary: str = ""
    published: datetime | None = None
    updated: datetime | None = None

    @property
    def timestamp(self) -> datetime | None:
        """Published time, falling back to the updated time."""
        return self.published or self.updated


@dataclass
class ParsedFeed:
    """Feed-level metadata plus its items in document order."""

    title: str = ""
    link: str = ""
    items: list[FeedItem] = field(default_factory=list)


def _to_datetime(parsed: time.struct_time | None) -> datetime | None:
    # feedparser normalises every date it understands to a UTC struct_time
    if not parsed:
        return None
    try:
        return datetime(*parsed[:6], tzinfo=UTC)
    except (TypeError, ValueError):
        return None


def _entry_content(entry: Any) -> str:
    for content in entry.get("content", []):
        value = content.get("value")
        if value:
            return value
    return ""


def _to_item(entry: Any) -> FeedItem:
    return FeedItem(
        title=entry.get("title", ""),
        link=entry.get("link", ""),
        content=_entry_content(entry),
        summary=entry.get("summary", ""),
        published=_to_datetime(entry.get("published_parsed")),
        updated=_to_datetime(entry.get("updated_parsed")),
    )


# The body is already decoded text; tell feedparser so, or it would trust the
# XML prolog's declared encoding over the UTF-8 bytes it is actually given.
_TEXT_HEADERS = {"content-type": "application/xml; charset=utf-8"}


def parse_feed(data: str) -> ParsedFeed:
    """Parse an RSS or Atom document.

    The body is always handed to feedparser as a stream, never as a string,
    which feedparser would first try to open as a URL or a local file.

    feedparser is lenient and never raises; a document is rejected only when
    it flagged a problem and no feed format could be detected at all. An
    empty body is an empty feed.

    Raises:
        FeedParseError: If the document is not a feed.
    """
    if not data.strip():
        return ParsedFeed()

    result = feedparser.parse(
        io.BytesIO(data.encode("utf-8")), response_headers=_TEXT_HEADERS
    )
    if result.get("bozo") and not result.get("version"):
        reason = result.get("bozo_exception") or "unrecognised feed format"
        raise FeedParseError(str(reason))

    feed = result.get("feed", {})
    return ParsedFeed(
        title=feed.get("title", ""),
        link=feed.get("link", ""),
        items=[_to_item(entry) for entry in result.get("entries", [])],
    )
