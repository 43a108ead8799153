"""One pass over every configured feed: fetch, merge, present, commit."""

import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TextIO

from feedburst.batching import evaluate_and_take_batch, mark_consumed, merge_new_items
from feedburst.errors import FeedError
from feedburst.models import FeedSubscription
from feedburst.store import FeedStore

logger = logging.getLogger(__name__)

NOTHING_READY_MESSAGE = "No new comics. Check back tomorrow!"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class RunSummary:
    """Counts from a single run."""

    processed: int = 0
    failed: int = 0
    new_links: int = 0
    presented: int = 0


def run_feeds(
    subscriptions: list[FeedSubscription],
    store: FeedStore,
    fetcher: Callable[[str], list[str]],
    presenter: Callable[[str, list[str]], None],
    fetch_only: bool = False,
    clock: Callable[[], datetime] = utc_now,
    err: TextIO | None = None,
    out: TextIO | None = None,
) -> RunSummary:
    """Process each subscription in order. A failing feed never stops the run.

    Args:
        subscriptions: Feeds to process, in config order.
        store: Where feed records live.
        fetcher: Returns a feed URL's links, oldest first.
        presenter: Shows a ready batch, given the feed name and its links.
        fetch_only: Merge new links but don't present or commit any batch.
        clock: Source of the current time.
        err: Stream for per-feed error lines (default stderr).
        out: Stream for the nothing-ready message (default stdout).

    Returns:
        RunSummary with per-run counts.
    """
    err = err if err is not None else sys.stderr
    out = out if out is not None else sys.stdout
    summary = RunSummary()

    for subscription in subscriptions:
        try:
            new_links, presented = process_feed(
                subscription, store, fetcher, presenter, fetch_only, clock
            )
        except (FeedError, OSError) as e:
            summary.failed += 1
            logger.debug("Feed '%s' failed", subscription.name, exc_info=True)
            print(f"Error in feed {subscription.name}: {e}", file=err)
            continue
        except Exception as e:
            summary.failed += 1
            logger.warning("Feed '%s' unexpected error: %s", subscription.name, e, exc_info=True)
            print(f"Error in feed {subscription.name}: {e}", file=err)
            continue

        summary.processed += 1
        summary.new_links += new_links
        if presented:
            summary.presented += 1

    if not fetch_only and summary.presented == 0:
        print(NOTHING_READY_MESSAGE, file=out)

    return summary


def process_feed(
    subscription: FeedSubscription,
    store: FeedStore,
    fetcher: Callable[[str], list[str]],
    presenter: Callable[[str, list[str]], None],
    fetch_only: bool = False,
    clock: Callable[[], datetime] = utc_now,
) -> tuple[int, bool]:
    """Run the full cycle for one feed. Returns (links added, batch presented)."""
    name = subscription.name
    logger.debug("Fetching '%s' from <%s>", name, subscription.source_url)
    links = fetcher(subscription.source_url)

    record = store.load(name)
    added = merge_new_items(record, links)
    store.save(name, record)
    if added:
        logger.info("Feed '%s': %d new links", name, added)

    if fetch_only:
        return added, False

    now = clock()
    batch = evaluate_and_take_batch(record, subscription.policy, now)
    if not batch:
        logger.debug("Feed '%s' not ready", name)
        return added, False

    # If presenting fails the record is left unread, so the same batch
    # comes back next run.
    presenter(name, batch)
    mark_consumed(record, now)
    store.save(name, record)
    logger.info("Feed '%s': presented %d links", name, len(batch))
    return added, True
