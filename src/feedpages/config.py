"""Configuration loading for feedpages."""

import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from feedpages import __version__

CACHE_FILENAME = "cache.json"


class ConfigError(Exception):
    """Raised when the feeds configuration cannot be read or is invalid."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class Settings(BaseSettings):
    """Per-run settings, read from FEEDPAGES_* variables and command-line flags."""

    model_config = SettingsConfigDict(env_prefix="FEEDPAGES_")

    feeds_path: Path = Field(default=Path("feeds.json"), description="Feeds configuration file")
    output_path: Path = Field(default=Path("html"), description="Directory for rendered pages")
    cache_path: Path | None = Field(
        default=None,
        description="Cache snapshot location, defaults to cache.json inside output_path",
    )
    timeout: float = Field(default=30.0, gt=0, description="Per-request fetch timeout in seconds")
    max_articles: int = Field(default=50, ge=0, description="Maximum articles per page")
    verbose: bool = Field(default=False, description="Enable debug logging")
    log_level: str = Field(default="INFO", description="Logging level")
    user_agent: str = Field(
        default=f"feedpages/{__version__}",
        description="User-Agent header sent with every feed request",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate the log level is a known logging level name."""
        level = v.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"FEEDPAGES_LOG_LEVEL '{v}' is not a valid logging level.")
        return level

    @property
    def effective_cache_path(self) -> Path:
        """Where the cache snapshot is read from and written to."""
        if self.cache_path is not None:
            return self.cache_path
        return self.output_path / CACHE_FILENAME


class PageConfig(BaseModel):
    """A named group of feeds rendered as one page."""

    name: str = Field(min_length=1)
    title: str
    urls: list[str] = Field(default_factory=list)


class FeedsConfig(BaseModel):
    """Top-level feeds document."""

    pages: list[PageConfig] = Field(default_factory=list)


def load_feeds_config(path: Path) -> FeedsConfig:
    """Load and validate the feeds configuration document.

    Args:
        path: Path to a JSON file of the form {"pages": [{"name", "title", "urls"}]}.

    Returns:
        The validated FeedsConfig.

    Raises:
        ConfigError: If the file cannot be read or does not validate.
    """
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise ConfigError(f"Failed to read feeds config {path}: {e}") from e

    try:
        return FeedsConfig.model_validate_json(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid feeds config {path}: {e}") from e
