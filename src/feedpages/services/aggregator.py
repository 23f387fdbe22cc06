"""Merges the feeds of a page into one time-ordered article list."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

from feedpages.clients.feeds import FeedParseError, ParsedFeed, parse_feed
from feedpages.clients.fetcher import FeedFetcher, FetchError
from feedpages.config import PageConfig
from feedpages.models import Article, FailedFeed
from feedpages.services.sanitizer import Sanitizer
from feedpages.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_ARTICLES = 50

_OLDEST = datetime.min.replace(tzinfo=UTC)


@dataclass
class AggregationResult:
    """Articles kept for a page plus the feeds that had to be skipped."""

    articles: list[Article] = field(default_factory=list)
    failed: list[FailedFeed] = field(default_factory=list)


def _sort_key(article: Article) -> tuple[bool, datetime]:
    return article.published_at is not None, article.published_at or _OLDEST


def sort_articles(articles: list[Article]) -> list[Article]:
    """Order articles newest first, undated ones last.

    The sort is stable: articles with equal timestamps, and undated articles,
    keep the order in which they were collected.
    """
    return sorted(articles, key=_sort_key, reverse=True)


class Aggregator:
    """Builds the article list of a page from its configured feeds."""

    def __init__(
        self,
        fetcher: FeedFetcher,
        sanitizer: Sanitizer,
        max_articles: int = DEFAULT_MAX_ARTICLES,
    ) -> None:
        self._fetcher = fetcher
        self._sanitizer = sanitizer
        self._max_articles = max_articles

    def collect(self, page: PageConfig) -> AggregationResult:
        """Fetch, parse and merge every feed of a page.

        Feeds that fail to fetch or parse are logged and skipped; the page
        always gets a (possibly empty) list.

        Args:
            page: The page whose URLs to aggregate, in configured order.

        Returns:
            AggregationResult with at most max_articles articles, newest first.
        """
        result = AggregationResult()
        articles: list[Article] = []

        for url in page.urls:
            try:
                data = self._fetcher.fetch(url)
            except FetchError as e:
                logger.warning("Failed to fetch feed", page=page.name, url=url, reason=e.reason)
                result.failed.append(FailedFeed(url=url, reason=e.reason))
                continue

            try:
                feed = parse_feed(data)
            except FeedParseError as e:
                logger.warning("Failed to parse feed", page=page.name, url=url, reason=e.reason)
                result.failed.append(FailedFeed(url=url, reason=f"parse error: {e.reason}"))
                continue

            feed_articles = self.build_articles(feed)
            logger.debug("Feed parsed", page=page.name, url=url, items=len(feed_articles))
            articles.extend(feed_articles)

        result.articles = sort_articles(articles)[: self._max_articles]
        logger.info(
            "Page aggregated",
            page=page.name,
            collected=len(articles),
            kept=len(result.articles),
            failed=len(result.failed),
        )
        return result

    def build_articles(self, feed: ParsedFeed) -> list[Article]:
        """Turn parsed feed items into sanitised articles."""
        articles = []
        for item in feed.items:
            content = self._sanitizer.sanitize(item.content)
            if not content:
                content = self._sanitizer.sanitize(item.summary)
            articles.append(
                Article(
                    title=item.title,
                    url=item.link,
                    content=content,
                    feed_title=feed.title,
                    feed_url=feed.link,
                    published_at=item.timestamp,
                )
            )
        return articles
