"""Tests for merging and batch readiness."""

from datetime import timedelta

import pytest

from feedburst.batching import (
    evaluate_and_take_batch,
    is_ready,
    mark_consumed,
    merge_new_items,
)
from feedburst.models import FeedRecord, Immediate, Interval, MinimumCount

WEEK = Interval(timedelta(days=7))


def _unread(links, last_read_at=None) -> FeedRecord:
    """A record whose only links are ``links``, all unread."""
    return FeedRecord(list(links), 0, last_read_at)


class TestMerge:
    """Tests for merge_new_items."""

    def test_appends_new_links_in_order(self):
        record = FeedRecord(["a", "b"], 1)
        added = merge_new_items(record, ["b", "c", "a", "d"])
        assert added == 2
        assert record.known_links == ["a", "b", "c", "d"]
        assert record.read_count == 1

    def test_idempotent(self):
        once = FeedRecord(["x"])
        twice = FeedRecord(["x"])
        fetched = ["a", "x", "b", "c"]

        merge_new_items(once, fetched)
        merge_new_items(twice, fetched)
        assert merge_new_items(twice, fetched) == 0
        assert twice.known_links == once.known_links

    def test_duplicates_within_fetch(self):
        record = FeedRecord()
        assert merge_new_items(record, ["a", "a", "b", "a"]) == 2
        assert record.known_links == ["a", "b"]

    def test_never_reorders_known_links(self):
        """Should keep old links first even if the feed now lists them later."""
        record = FeedRecord(["c", "b", "a"], 2)
        merge_new_items(record, ["a", "b", "c", "d"])
        assert record.known_links == ["c", "b", "a", "d"]
        assert record.read_links == ["c", "b"]

    def test_exact_string_comparison(self):
        record = FeedRecord(["https://a/1"])
        merge_new_items(record, ["https://a/1/", "HTTPS://A/1"])
        assert record.known_links == ["https://a/1", "https://a/1/", "HTTPS://A/1"]

    def test_accepts_generators(self):
        record = FeedRecord()
        assert merge_new_items(record, (f"l{i}" for i in range(3))) == 3


class TestReadiness:
    """Readiness of each policy."""

    def test_immediate_ready(self, now):
        assert evaluate_and_take_batch(_unread(["a"]), Immediate(), now) == ["a"]

    def test_immediate_empty(self, now):
        assert evaluate_and_take_batch(FeedRecord(["a"], 1), Immediate(), now) == []

    def test_minimum_count_not_reached(self, now):
        assert evaluate_and_take_batch(_unread(["a", "b"]), MinimumCount(3), now) == []

    def test_minimum_count_returns_whole_backlog(self, now):
        """Should hand out all unread links, not just the threshold."""
        batch = evaluate_and_take_batch(_unread(["a", "b", "c", "d"]), MinimumCount(3), now)
        assert batch == ["a", "b", "c", "d"]

    def test_minimum_count_ignores_read_links(self, now):
        record = FeedRecord(["a", "b", "c", "d"], 2)
        assert evaluate_and_take_batch(record, MinimumCount(3), now) == []
        assert evaluate_and_take_batch(record, MinimumCount(2), now) == ["c", "d"]

    def test_interval_elapsed(self, now):
        record = _unread(["a"], last_read_at=now - timedelta(days=10))
        assert evaluate_and_take_batch(record, WEEK, now) == ["a"]

    def test_interval_not_elapsed(self, now):
        record = _unread(["a"], last_read_at=now - timedelta(days=1))
        assert evaluate_and_take_batch(record, WEEK, now) == []

    def test_interval_exact_boundary(self, now):
        record = _unread(["a"], last_read_at=now - timedelta(days=7))
        assert is_ready(record, WEEK, now)

    def test_interval_never_read(self, now):
        assert evaluate_and_take_batch(_unread(["a"]), WEEK, now) == ["a"]

    def test_interval_needs_unread(self, now):
        record = FeedRecord(["a"], 1, now - timedelta(days=30))
        assert evaluate_and_take_batch(record, WEEK, now) == []

    def test_evaluate_does_not_mutate(self, now):
        record = _unread(["a", "b"])
        evaluate_and_take_batch(record, Immediate(), now)
        assert record.read_count == 0
        assert record.last_read_at is None

    def test_batch_is_a_copy(self, now):
        record = _unread(["a"])
        batch = evaluate_and_take_batch(record, Immediate(), now)
        batch.append("z")
        assert record.known_links == ["a"]

    @pytest.mark.parametrize("count", [0, -1])
    def test_minimum_count_must_be_positive(self, count):
        with pytest.raises(ValueError):
            MinimumCount(count)

    def test_interval_must_be_positive(self):
        with pytest.raises(ValueError):
            Interval(timedelta(0))


class TestMarkConsumed:
    """Tests for committing a batch."""

    def test_marks_everything_read(self, now):
        record = FeedRecord(["a", "b", "c"], 1)
        mark_consumed(record, now)
        assert record.read_count == 3
        assert record.last_read_at == now
        assert record.unread_links == []

    @pytest.mark.parametrize(
        "policy", [Immediate(), MinimumCount(1), Interval(timedelta(days=1))]
    )
    def test_commit_is_final(self, policy, now):
        """Should return nothing after a commit until new links arrive."""
        record = _unread(["a", "b"])
        batch = evaluate_and_take_batch(record, policy, now)
        assert batch == ["a", "b"]
        mark_consumed(record, now)
        assert evaluate_and_take_batch(record, policy, now) == []

    def test_read_prefix_invariant_over_cycles(self, now):
        record = FeedRecord()
        policy = MinimumCount(2)
        fetches = [["a"], ["a", "b"], ["b", "c"], [], ["d", "e", "f"], ["f"]]
        for day, fetched in enumerate(fetches):
            moment = now + timedelta(days=day)
            merge_new_items(record, fetched)
            batch = evaluate_and_take_batch(record, policy, moment)
            if batch:
                assert batch == record.known_links[record.read_count :]
                mark_consumed(record, moment)
            assert 0 <= record.read_count <= len(record.known_links)
            assert record.read_links + record.unread_links == record.known_links
        assert record.known_links == ["a", "b", "c", "d", "e", "f"]
        assert record.read_count == 6
