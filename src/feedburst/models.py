"""Data models for feedburst."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta


@dataclass(frozen=True)
class Immediate:
    """Every new item is ready as soon as it shows up."""

    def is_ready(
        self, unread_count: int, last_read_at: datetime | None, now: datetime
    ) -> bool:
        return unread_count > 0


@dataclass(frozen=True)
class MinimumCount:
    """Ready once at least ``count`` unread items have piled up.

    The count is a trigger, not a cap: the whole unread backlog is handed
    out once it is reached.
    """

    count: int

    def __post_init__(self):
        if self.count < 1:
            raise ValueError(f"count must be at least 1, got {self.count}")

    def is_ready(
        self, unread_count: int, last_read_at: datetime | None, now: datetime
    ) -> bool:
        return unread_count >= self.count


@dataclass(frozen=True)
class Interval:
    """Ready when something is unread and ``duration`` has passed since the last read."""

    duration: timedelta

    def __post_init__(self):
        if self.duration <= timedelta(0):
            raise ValueError(f"duration must be positive, got {self.duration}")

    def is_ready(
        self, unread_count: int, last_read_at: datetime | None, now: datetime
    ) -> bool:
        if unread_count < 1:
            return False
        return last_read_at is None or now - last_read_at >= self.duration


BatchingPolicy = Immediate | MinimumCount | Interval


@dataclass(frozen=True)
class FeedSubscription:
    """One configured feed: its name, where to fetch it, and when to show it."""

    name: str
    source_url: str
    policy: BatchingPolicy


@dataclass
class FeedRecord:
    """Durable per-feed state: every link seen, and how many have been read."""

    known_links: list[str] = field(default_factory=list)
    read_count: int = 0
    last_read_at: datetime | None = None
    _known: set[str] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        self._known = set(self.known_links)

    def __contains__(self, link: str) -> bool:
        return link in self._known

    def append(self, link: str) -> bool:
        """Append ``link`` if it is new. Returns True if it was added."""
        if link in self._known:
            return False
        self.known_links.append(link)
        self._known.add(link)
        return True

    @property
    def read_links(self) -> list[str]:
        return self.known_links[: self.read_count]

    @property
    def unread_links(self) -> list[str]:
        return self.known_links[self.read_count :]
