"""Merging fetched links into a feed record and deciding when to hand them out."""

from collections.abc import Iterable
from datetime import datetime

from feedburst.models import BatchingPolicy, FeedRecord


def merge_new_items(record: FeedRecord, fetched_links: Iterable[str]) -> int:
    """Append links not yet known to the record, keeping their order.

    ``fetched_links`` must be oldest first. Known links are never moved or
    removed, so merging the same links again is a no-op.

    Returns:
        The number of links appended.
    """
    return sum(1 for link in fetched_links if record.append(link))


def is_ready(record: FeedRecord, policy: BatchingPolicy, now: datetime) -> bool:
    """Whether the record's unread links satisfy ``policy`` at ``now``."""
    unread_count = len(record.known_links) - record.read_count
    return policy.is_ready(unread_count, record.last_read_at, now)


def evaluate_and_take_batch(
    record: FeedRecord, policy: BatchingPolicy, now: datetime
) -> list[str]:
    """Return every unread link if the policy is satisfied, else an empty list.

    This only decides; it does not mark anything read. Call mark_consumed
    once the batch has been presented.
    """
    if not is_ready(record, policy, now):
        return []
    return record.unread_links


def mark_consumed(record: FeedRecord, now: datetime) -> None:
    """Mark every known link as read as of ``now``."""
    record.read_count = len(record.known_links)
    record.last_read_at = now
