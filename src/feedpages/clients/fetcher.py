"""Conditional HTTP fetcher backed by the feed cache."""

import codecs
import re
from datetime import UTC, datetime

import httpx

from feedpages.clients.cache import CacheEntry, CacheStore
from feedpages.utils.logging import get_logger

logger = get_logger(__name__)

XML_ENCODING_PATTERN = re.compile(
    rb"""^\s*<\?xml[^>]*?\sencoding\s*=\s*["']([A-Za-z][A-Za-z0-9._-]*)["']"""
)


def detect_encoding(content: bytes) -> str:
    """Encoding declared in an XML prolog, defaulting to UTF-8.

    Only consulted by httpx when the response carries no charset header.
    """
    match = XML_ENCODING_PATTERN.match(content[:1024])
    if match:
        try:
            return codecs.lookup(match.group(1).decode("ascii")).name
        except LookupError:
            logger.debug("Unknown declared encoding", encoding=match.group(1).decode("ascii"))
    return "utf-8"


class FetchError(Exception):
    """Raised when a feed URL cannot be retrieved."""

    def __init__(self, url: str, reason: str, status_code: int | None = None) -> None:
        self.url = url
        self.reason = reason
        self.status_code = status_code
        super().__init__(f"{reason} ({url})")


class FeedFetcher:
    """Fetches feed documents, revalidating against cached ETag/Last-Modified."""

    def __init__(
        self,
        cache: CacheStore,
        timeout: float = 30.0,
        user_agent: str | None = None,
    ) -> None:
        self._cache = cache
        headers = {"User-Agent": user_agent} if user_agent else {}
        self._client = httpx.Client(
            timeout=timeout,
            follow_redirects=True,
            headers=headers,
            default_encoding=detect_encoding,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "FeedFetcher":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    @staticmethod
    def conditional_headers(entry: CacheEntry | None) -> dict[str, str]:
        """Build revalidation preconditions from a cache entry."""
        headers: dict[str, str] = {}
        if entry is None:
            return headers
        if entry.etag:
            headers["If-None-Match"] = entry.etag
        if entry.last_modified:
            headers["If-Modified-Since"] = entry.last_modified
        return headers

    def fetch(self, url: str) -> str:
        """Fetch the current body of a URL.

        A 304 response returns the cached body and leaves the cache entry,
        including its timestamp, untouched. A 2xx response replaces the entry.

        Args:
            url: The feed URL.

        Returns:
            The feed document as text.

        Raises:
            FetchError: On timeout, transport error or any status other than 2xx/304.
        """
        entry = self._cache.get(url)

        try:
            response = self._client.get(url, headers=self.conditional_headers(entry))
        except httpx.TimeoutException as e:
            raise FetchError(url, "timeout") from e
        except httpx.RequestError as e:
            raise FetchError(url, f"request error: {e}") from e

        logger.debug("Feed response", url=url, status=response.status_code)

        if response.status_code == httpx.codes.NOT_MODIFIED:
            return entry.body if entry is not None else ""

        if not response.is_success:
            raise FetchError(
                url, f"HTTP {response.status_code}", status_code=response.status_code
            )

        body = response.text
        self._cache.put(
            url,
            CacheEntry(
                body=body,
                etag=response.headers.get("ETag", ""),
                last_modified=response.headers.get("Last-Modified", ""),
                timestamp=datetime.now(UTC),
            ),
        )
        return body
