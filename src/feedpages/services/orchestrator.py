"""Main workflow orchestrator for feedpages."""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from feedpages.clients.cache import CacheLoadError, CacheSaveError, CacheStore
from feedpages.config import PageConfig
from feedpages.models import FailedFeed, Page
from feedpages.services.aggregator import Aggregator
from feedpages.services.renderer import PageRenderer
from feedpages.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class OrchestrationResult:
    """Result of one pass over all pages."""

    pages_rendered: int
    articles_rendered: int
    feeds_failed: int
    cache_loaded: bool
    cache_saved: bool


class Orchestrator:
    """Runs a single sequential pass: load cache, render every page, save cache."""

    def __init__(
        self,
        pages: list[PageConfig],
        cache: CacheStore,
        aggregator: Aggregator,
        renderer: PageRenderer,
        output_path: Path,
        cache_path: Path,
    ) -> None:
        self._pages = pages
        self._cache = cache
        self._aggregator = aggregator
        self._renderer = renderer
        self._output_path = output_path
        self._cache_path = cache_path

    def run(self) -> OrchestrationResult:
        """Run the complete workflow.

        Feed and cache problems are logged and do not stop the run.

        Returns:
            OrchestrationResult with statistics about the run.

        Raises:
            OSError: If the output directory cannot be created.
            RenderError: If any page fails to render or be written.
        """
        logger.info(
            "Starting run",
            pages=len(self._pages),
            output=str(self._output_path),
            cache=str(self._cache_path),
        )

        self._output_path.mkdir(parents=True, exist_ok=True)

        cache_loaded = True
        try:
            self._cache.load(self._cache_path)
        except CacheLoadError as e:
            logger.error("Cache unavailable, starting empty", path=str(e.path), reason=e.reason)
            cache_loaded = False

        articles_rendered = 0
        failed_feeds: list[FailedFeed] = []

        for page_config in self._pages:
            page = self._build_page(page_config, failed_feeds)
            self._renderer.write(page, self._output_path)
            articles_rendered += len(page.articles)

        cache_saved = True
        try:
            self._cache.save(self._cache_path)
        except CacheSaveError as e:
            logger.error("Failed to save cache", path=str(e.path), reason=e.reason)
            cache_saved = False

        result = OrchestrationResult(
            pages_rendered=len(self._pages),
            articles_rendered=articles_rendered,
            feeds_failed=len(failed_feeds),
            cache_loaded=cache_loaded,
            cache_saved=cache_saved,
        )
        logger.info(
            "Run complete",
            pages=result.pages_rendered,
            articles=result.articles_rendered,
            feeds_failed=result.feeds_failed,
            cache_saved=result.cache_saved,
        )
        return result

    def _build_page(self, page_config: PageConfig, failed_feeds: list[FailedFeed]) -> Page:
        aggregated = self._aggregator.collect(page_config)
        failed_feeds.extend(aggregated.failed)
        return Page(
            title=page_config.title,
            name=page_config.name,
            fetched_at=datetime.now().astimezone(),
            pages=self._pages,
            articles=aggregated.articles,
        )
