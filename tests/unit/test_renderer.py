"""Unit tests for page rendering."""

from datetime import datetime, timezone
from pathlib import Path

import pytest
from jinja2 import DictLoader, Environment

from feedpages.config import PageConfig
from feedpages.models import Article, Page
from feedpages.services.renderer import PageRenderer, RenderError


def _page(articles: list[Article] | None = None) -> Page:
    pages = [
        PageConfig(name="index", title="News", urls=[]),
        PageConfig(name="python", title="Python", urls=[]),
    ]
    return Page(
        title="News",
        name="index",
        fetched_at=datetime(2024, 1, 2, 15, 4, tzinfo=timezone.utc),
        pages=pages,
        articles=articles or [],
    )


def _article(title: str = "Hello <world>", content: str = "<p>Body</p>") -> Article:
    return Article(
        title=title,
        url="https://blog.example.com/hello",
        content=content,
        feed_title="Example Blog",
        feed_url="https://blog.example.com/",
        published_at=datetime(2024, 1, 1, 9, 30, tzinfo=timezone.utc),
    )


class TestPageRenderer:
    """Tests for PageRenderer."""

    @pytest.fixture
    def renderer(self) -> PageRenderer:
        return PageRenderer()

    def test_renders_articles_and_navigation(self, renderer: PageRenderer) -> None:
        """Should render articles, provenance, times and links to every page."""
        html = renderer.render(_page([_article()]))

        assert "<title>News</title>" in html
        assert 'href="index.html" class="current"' in html
        assert 'href="python.html"' in html
        assert "1. Hello &lt;world&gt;" in html
        assert "<p>Body</p>" in html
        assert "Example Blog" in html
        assert "Monday 1 Jan 09:30" in html
        assert "Fetched Tuesday 2 Jan 15:04." in html

    def test_numbers_articles_from_one(self, renderer: PageRenderer) -> None:
        html = renderer.render(_page([_article(title="First"), _article(title="Second")]))

        assert "1. First" in html
        assert "2. Second" in html

    def test_empty_page(self, renderer: PageRenderer) -> None:
        """A page without articles should still render."""
        assert "No articles to show." in renderer.render(_page())

    def test_write_creates_named_file(self, renderer: PageRenderer, tmp_path: Path) -> None:
        """Should write the page to <name>.html in the output directory."""
        path = renderer.write(_page([_article()]), tmp_path)

        assert path == tmp_path / "index.html"
        assert "Hello &lt;world&gt;" in path.read_text(encoding="utf-8")

    def test_write_failure_raises(self, renderer: PageRenderer, tmp_path: Path) -> None:
        """An unwritable output location should raise RenderError."""
        with pytest.raises(RenderError) as exc_info:
            renderer.write(_page(), tmp_path / "missing")
        assert exc_info.value.page_name == "index"

    def test_template_error_raises(self) -> None:
        """A broken template should raise RenderError."""
        env = Environment(loader=DictLoader({"page.html": "{{ page.title | nosuchfilter }}"}))
        renderer = PageRenderer(env=env)

        with pytest.raises(RenderError):
            renderer.render(_page())

    def test_script_links_from_feeds_are_neutralised(self, renderer: PageRenderer) -> None:
        """Item and feed links with a javascript: scheme should not reach an href."""
        article = Article(
            title="t",
            url="javascript:alert(1)",
            content="",
            feed_title="f",
            feed_url=" javascript:alert(2)",
            published_at=None,
        )

        html = renderer.render(_page([article]))

        assert "javascript:" not in html
        assert '<a href="#" class="article-title">1. t</a>' in html
        assert '<a href="#">f</a>' in html
