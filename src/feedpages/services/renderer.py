"""Page rendering with Jinja2."""

from pathlib import Path

from jinja2 import Environment, PackageLoader, TemplateError, select_autoescape

from feedpages.models import Page
from feedpages.services.sanitizer import safe_url
from feedpages.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TEMPLATE = "page.html"


class RenderError(Exception):
    """Raised when a page cannot be rendered or written."""

    def __init__(self, page_name: str, reason: str) -> None:
        self.page_name = page_name
        self.reason = reason
        super().__init__(f"Failed to render page {page_name}: {reason}")


class PageRenderer:
    """Renders pages with the packaged HTML template."""

    def __init__(self, template_name: str = DEFAULT_TEMPLATE, env: Environment | None = None) -> None:
        self._env = env or Environment(
            loader=PackageLoader("feedpages", "templates"),
            autoescape=select_autoescape(["html", "xml"]),
        )
        # Feed-supplied links only reach an href through this filter.
        self._env.filters["safe_url"] = safe_url
        self._template_name = template_name

    def render(self, page: Page) -> str:
        """Render a page to an HTML string.

        Raises:
            RenderError: If the template cannot be loaded or rendered.
        """
        try:
            template = self._env.get_template(self._template_name)
            return template.render(page=page)
        except TemplateError as e:
            raise RenderError(page.name, str(e)) from e

    def write(self, page: Page, output_dir: Path) -> Path:
        """Render a page to `<output_dir>/<page.name>.html`.

        Returns:
            Path to the written file.

        Raises:
            RenderError: If rendering or writing fails.
        """
        html = self.render(page)
        path = output_dir / f"{page.name}.html"
        try:
            path.write_text(html, encoding="utf-8")
        except OSError as e:
            raise RenderError(page.name, str(e)) from e

        logger.info("Page written", page=page.name, path=str(path), articles=len(page.articles))
        return path
