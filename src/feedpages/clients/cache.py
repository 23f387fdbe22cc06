"""On-disk cache of feed bodies and their revalidation tokens."""

import os
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from feedpages.utils.logging import get_logger

logger = get_logger(__name__)


class CacheLoadError(Exception):
    """Raised when an existing cache snapshot cannot be read or parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to load cache {path}: {reason}")


class CacheSaveError(Exception):
    """Raised when the cache snapshot cannot be serialised or written."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to save cache {path}: {reason}")


@dataclass
class CacheEntry:
    """Last full response seen for a feed URL."""

    body: str = ""
    etag: str = ""
    last_modified: str = ""
    timestamp: datetime | None = None


_snapshot_adapter = TypeAdapter(dict[str, CacheEntry])


def _private_opener(path: str, flags: int) -> int:
    return os.open(path, flags, 0o600)


class CacheStore:
    """URL-keyed cache, loaded once per run and saved back whole.

    Not thread-safe; a run owns the store exclusively.
    """

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, url: object) -> bool:
        return url in self._entries

    def get(self, url: str) -> CacheEntry | None:
        """Return the entry stored for a URL, or None if it was never fetched."""
        return self._entries.get(url)

    def put(self, url: str, entry: CacheEntry) -> None:
        """Insert or replace the entry for a URL."""
        self._entries[url] = entry

    def load(self, path: Path) -> None:
        """Replace the store's contents with the snapshot at `path`.

        A missing snapshot leaves the store empty and is not an error.

        Raises:
            CacheLoadError: If the snapshot exists but cannot be read or parsed.
        """
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            logger.debug("No cache snapshot found", path=str(path))
            return
        except OSError as e:
            raise CacheLoadError(path, str(e)) from e

        try:
            self._entries = _snapshot_adapter.validate_json(raw)
        except ValidationError as e:
            raise CacheLoadError(path, str(e)) from e

        logger.info("Cache loaded", path=str(path), entries=len(self._entries))

    def save(self, path: Path) -> None:
        """Overwrite the snapshot at `path` with the store's contents.

        The write is not atomic; a failure part way may leave a truncated file.

        Raises:
            CacheSaveError: If serialisation or the write fails.
        """
        try:
            data = _snapshot_adapter.dump_json(self._entries)
        except ValueError as e:
            raise CacheSaveError(path, f"serialisation failed: {e}") from e

        try:
            with open(path, "wb", opener=_private_opener) as f:
                f.write(data)
        except OSError as e:
            raise CacheSaveError(path, str(e)) from e

        logger.info("Cache saved", path=str(path), entries=len(self._entries))
