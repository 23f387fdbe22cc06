"""Unit tests for configuration loading."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from feedpages.config import ConfigError, Settings, load_feeds_config


class TestLoadFeedsConfig:
    """Tests for load_feeds_config."""

    def test_loads_pages_in_order(self, tmp_path: Path) -> None:
        path = tmp_path / "feeds.json"
        path.write_text(
            json.dumps(
                {
                    "pages": [
                        {"name": "index", "title": "News", "urls": ["https://a/", "https://b/"]},
                        {"name": "tech", "title": "Tech", "urls": ["https://a/"]},
                    ]
                }
            )
        )

        config = load_feeds_config(path)

        assert [p.name for p in config.pages] == ["index", "tech"]
        assert config.pages[0].urls == ["https://a/", "https://b/"]

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="Failed to read"):
            load_feeds_config(tmp_path / "missing.json")

    def test_malformed_json_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "feeds.json"
        path.write_text("{pages: ")

        with pytest.raises(ConfigError, match="Invalid feeds config"):
            load_feeds_config(path)

    def test_page_without_name_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "feeds.json"
        path.write_text(json.dumps({"pages": [{"title": "News", "urls": []}]}))

        with pytest.raises(ConfigError):
            load_feeds_config(path)


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for var in ("FEEDPAGES_OUTPUT_PATH", "FEEDPAGES_MAX_ARTICLES", "FEEDPAGES_TIMEOUT"):
            monkeypatch.delenv(var, raising=False)

        settings = Settings()

        assert settings.feeds_path == Path("feeds.json")
        assert settings.output_path == Path("html")
        assert settings.timeout == 30.0
        assert settings.max_articles == 50
        assert settings.verbose is False
        assert settings.effective_cache_path == Path("html") / "cache.json"

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FEEDPAGES_MAX_ARTICLES", "10")
        monkeypatch.setenv("FEEDPAGES_OUTPUT_PATH", "/tmp/site")

        settings = Settings()

        assert settings.max_articles == 10
        assert settings.effective_cache_path == Path("/tmp/site/cache.json")

    def test_explicit_cache_path(self) -> None:
        settings = Settings(cache_path=Path("/var/cache/feedpages.json"))
        assert settings.effective_cache_path == Path("/var/cache/feedpages.json")

    def test_rejects_non_positive_timeout(self) -> None:
        with pytest.raises(ValidationError):
            Settings(timeout=0)

    def test_rejects_unknown_log_level(self) -> None:
        with pytest.raises(ValidationError):
            Settings(log_level="LOUD")

    def test_normalises_log_level(self) -> None:
        assert Settings(log_level="debug").log_level == "DEBUG"
