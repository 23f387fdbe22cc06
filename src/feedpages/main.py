"""Command-line entry point for feedpages."""

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from feedpages import __version__
from feedpages.clients.cache import CacheStore
from feedpages.clients.fetcher import FeedFetcher
from feedpages.config import ConfigError, Settings, load_feeds_config
from feedpages.services.aggregator import Aggregator
from feedpages.services.orchestrator import Orchestrator
from feedpages.services.renderer import PageRenderer, RenderError
from feedpages.services.sanitizer import Sanitizer
from feedpages.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="feedpages",
        description="Render pages of articles aggregated from RSS and Atom feeds.",
    )
    parser.add_argument("--feeds", dest="feeds_path", type=Path, help="File containing feed URLs")
    parser.add_argument("--output", dest="output_path", type=Path, help="Directory for rendered HTML")
    parser.add_argument("--cache", dest="cache_path", type=Path, help="Cache snapshot file")
    parser.add_argument("--timeout", type=float, help="Fetch timeout in seconds")
    parser.add_argument(
        "--max-articles", dest="max_articles", type=int, help="Maximum articles per page"
    )
    parser.add_argument(
        "--verbose", action="store_true", default=None, help="Enable verbose logging"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    """Build settings, letting explicit command-line flags override the environment."""
    overrides: dict[str, Any] = {k: v for k, v in vars(args).items() if v is not None}
    return Settings(**overrides)


def run(settings: Settings) -> int:
    """Run one pass over all configured pages.

    Returns:
        Process exit status.
    """
    try:
        feeds = load_feeds_config(settings.feeds_path)
    except ConfigError as e:
        logger.error("Cannot load feeds configuration", reason=e.reason)
        return 1

    cache = CacheStore()
    with FeedFetcher(cache, timeout=settings.timeout, user_agent=settings.user_agent) as fetcher:
        orchestrator = Orchestrator(
            pages=feeds.pages,
            cache=cache,
            aggregator=Aggregator(fetcher, Sanitizer(), max_articles=settings.max_articles),
            renderer=PageRenderer(),
            output_path=settings.output_path,
            cache_path=settings.effective_cache_path,
        )
        try:
            orchestrator.run()
        except RenderError as e:
            logger.error("Rendering failed", page=e.page_name, reason=e.reason)
            return 1
        except OSError as e:
            logger.error("Cannot write output", path=str(settings.output_path), error=str(e))
            return 1

    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = settings_from_args(args)
    except ValidationError as e:
        setup_logging(verbose=bool(args.verbose))
        logger.error("Invalid settings", error=str(e))
        return 2

    setup_logging(settings.log_level, verbose=settings.verbose)
    logger.info("feedpages starting", version=__version__)
    return run(settings)


if __name__ == "__main__":
    sys.exit(main())
