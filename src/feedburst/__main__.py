"""Entry point for feedburst: python -m feedburst"""

import argparse
import logging
import sys

from feedburst import __version__
from feedburst.config_parser import parse_config
from feedburst.errors import FeedburstError
from feedburst.feed_parser import fetch_links
from feedburst.presenter import BrowserPresenter
from feedburst.runner import run_feeds
from feedburst.settings import (
    log_level,
    read_config_text,
    resolve_config_path,
    resolve_data_dir,
)
from feedburst.store import FeedStore

logger = logging.getLogger("feedburst")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="feedburst",
        description="Presents you your RSS feeds in chunks",
    )
    parser.add_argument(
        "--config",
        metavar="FILE",
        help="The config file to load feeds from",
    )
    parser.add_argument(
        "--fetch",
        action="store_true",
        help="Only download feeds, don't view them",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output to stderr",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else log_level()
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    )
    # Quiet noisy loggers
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def run(args: argparse.Namespace) -> None:
    """Load the config and process every feed.

    Raises:
        FeedburstError: If the config cannot be found, read, or parsed.
    """
    config_path = resolve_config_path(args.config)
    subscriptions = parse_config(read_config_text(config_path))
    logger.debug("Loaded %d feeds from %s", len(subscriptions), config_path)

    store = FeedStore(resolve_data_dir())
    run_feeds(
        subscriptions,
        store,
        fetcher=fetch_links,
        presenter=BrowserPresenter(),
        fetch_only=args.fetch,
    )


def main(argv: list[str] | None = None) -> int:
    """Run feedburst. Returns the process exit code."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        run(args)
    except FeedburstError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
