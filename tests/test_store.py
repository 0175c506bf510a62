"""Tests for the in-memory link store and click log."""

import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone

import pytest

from shortlinks.errors import AllocationExhausted
from shortlinks.store.memory import InMemoryClickLog, InMemoryLinkStore
from shortlinks.store.models import ClickEvent, LinkRecord, is_expired

T0 = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_record(token: str, minutes: int = 30, created_at: datetime = T0) -> LinkRecord:
    return LinkRecord(
        token=token,
        target=f"https://example.com/{token}",
        created_at=created_at,
        expires_at=created_at + timedelta(minutes=minutes),
    )


def make_event(token: str, seconds: int = 0, referrer: str = None) -> ClickEvent:
    return ClickEvent(token=token, timestamp=T0 + timedelta(seconds=seconds), referrer=referrer)


class TestExpiryPredicate:

    def test_boundary_is_expired(self):
        assert is_expired(T0, T0) is True
        assert is_expired(T0, T0 + timedelta(microseconds=1)) is True
        assert is_expired(T0, T0 - timedelta(microseconds=1)) is False

    def test_record_uses_shared_predicate(self):
        record = make_record("abc", minutes=1)
        assert not record.is_expired(T0 + timedelta(seconds=59))
        assert record.is_expired(T0 + timedelta(seconds=60))


class TestInMemoryLinkStore:
    """Test link store operations."""

    def test_try_insert_and_get(self, link_store):
        assert link_store.try_insert("abc123", make_record("abc123"))

        record = link_store.get("abc123")
        assert record.token == "abc123"
        assert record.target == "https://example.com/abc123"
        assert record.hit_count == 0
        assert len(link_store) == 1

    def test_try_insert_collision(self, link_store):
        assert link_store.try_insert("abc123", make_record("abc123"))
        assert not link_store.try_insert("abc123", make_record("abc123", minutes=5))

        # Original record untouched
        assert link_store.get("abc123").expires_at == T0 + timedelta(minutes=30)

    def test_tokens_are_case_sensitive(self, link_store):
        assert link_store.try_insert("AbC", make_record("AbC"))
        assert link_store.try_insert("abc", make_record("abc"))
        assert len(link_store) == 2

    def test_expired_but_unreaped_token_still_collides(self, link_store):
        link_store.try_insert("old", make_record("old", minutes=1, created_at=T0 - timedelta(days=1)))
        assert not link_store.try_insert("old", make_record("old"))

    def test_get_missing(self, link_store):
        assert link_store.get("nope") is None

    def test_get_returns_copy(self, link_store):
        link_store.try_insert("abc", make_record("abc"))

        record = link_store.get("abc")
        record.hit_count = 99
        record.target = "https://evil.example.com"

        stored = link_store.get("abc")
        assert stored.hit_count == 0
        assert stored.target == "https://example.com/abc"

    def test_inserted_record_is_copied(self, link_store):
        record = make_record("abc")
        link_store.try_insert("abc", record)
        record.hit_count = 5

        assert link_store.get("abc").hit_count == 0

    def test_increment_hit(self, link_store):
        link_store.try_insert("abc", make_record("abc"))

        assert link_store.increment_hit("abc")
        assert link_store.increment_hit("abc")
        assert link_store.get("abc").hit_count == 2

    def test_increment_hit_missing(self, link_store):
        assert not link_store.increment_hit("nope")

    def test_increment_hit_checks_generation(self, link_store):
        link_store.try_insert("abc", make_record("abc"))

        assert not link_store.increment_hit("abc", created_at=T0 - timedelta(minutes=1))
        assert link_store.increment_hit("abc", created_at=T0)
        assert link_store.get("abc").hit_count == 1

    def test_delete_is_idempotent(self, link_store):
        link_store.try_insert("abc", make_record("abc"))

        assert link_store.delete("abc") is True
        assert link_store.delete("abc") is False
        assert link_store.get("abc") is None
        assert len(link_store) == 0

    def test_delete_if_expired(self, link_store):
        link_store.try_insert("abc", make_record("abc", minutes=1))

        assert not link_store.delete_if_expired("abc", T0 + timedelta(seconds=30))
        assert link_store.get("abc") is not None

        removed = link_store.delete_if_expired("abc", T0 + timedelta(seconds=60))
        assert removed.token == "abc"
        assert removed.expires_at == T0 + timedelta(minutes=1)
        assert link_store.get("abc") is None
        assert not link_store.delete_if_expired("abc", T0 + timedelta(seconds=60))

    def test_snapshot_is_point_in_time(self, link_store):
        link_store.try_insert("a1", make_record("a1"))
        link_store.try_insert("b2", make_record("b2"))

        snapshot = link_store.snapshot_all()
        link_store.increment_hit("a1")
        link_store.delete("b2")
        link_store.try_insert("c3", make_record("c3"))

        assert sorted(r.token for r in snapshot) == ["a1", "b2"]
        assert all(r.hit_count == 0 for r in snapshot)

    def test_allocate_first_try(self, link_store):
        token = link_store.allocate(lambda: "zzz111", 3, make_record)

        assert token == "zzz111"
        assert link_store.get("zzz111").target == "https://example.com/zzz111"

    def test_allocate_retries_on_collision(self, link_store):
        link_store.try_insert("taken1", make_record("taken1"))
        link_store.try_insert("taken2", make_record("taken2"))
        candidates = iter(["taken1", "taken2", "free01"])

        token = link_store.allocate(lambda: next(candidates), 5, make_record)

        assert token == "free01"
        assert len(link_store) == 3

    def test_allocate_exhausted(self, link_store):
        link_store.try_insert("taken1", make_record("taken1"))
        calls = []

        def candidate():
            calls.append(1)
            return "taken1"

        with pytest.raises(AllocationExhausted):
            link_store.allocate(candidate, 4, make_record)

        assert len(calls) == 4
        assert len(link_store) == 1

    def test_rejects_invalid_stripe_count(self):
        with pytest.raises(ValueError):
            InMemoryLinkStore(stripes=0)

    def test_concurrent_try_insert_single_winner(self):
        store = InMemoryLinkStore(stripes=4)
        barrier = threading.Barrier(16)

        def attempt(i):
            barrier.wait()
            return store.try_insert("race", make_record("race", minutes=i + 1))

        with ThreadPoolExecutor(max_workers=16) as pool:
            results = list(pool.map(attempt, range(16)))

        assert results.count(True) == 1
        assert len(store) == 1

    def test_concurrent_increments_not_lost(self):
        store = InMemoryLinkStore(stripes=4)
        store.try_insert("hot", make_record("hot"))

        def hit(_):
            for _ in range(50):
                store.increment_hit("hot")

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(hit, range(8)))

        assert store.get("hot").hit_count == 400


class TestInMemoryClickLog:
    """Test click log operations."""

    def test_append_preserves_insertion_order(self, click_log):
        for i in range(5):
            click_log.append("abc", make_event("abc", seconds=10 - i, referrer=str(i)))

        events = click_log.get_all("abc")
        assert [e.referrer for e in events] == ["0", "1", "2", "3", "4"]
        assert click_log.count("abc") == 5

    def test_duplicates_are_kept(self, click_log):
        event = make_event("abc")
        click_log.append("abc", event)
        click_log.append("abc", event)

        assert click_log.get_all("abc") == [event, event]

    def test_sequences_are_per_token(self, click_log):
        click_log.append("abc", make_event("abc"))
        click_log.append("xyz", make_event("xyz"))
        click_log.append("abc", make_event("abc", seconds=1))

        assert click_log.count("abc") == 2
        assert click_log.count("xyz") == 1

    def test_get_all_empty(self, click_log):
        assert click_log.get_all("nope") == []
        assert click_log.count("nope") == 0

    def test_get_all_returns_copy(self, click_log):
        click_log.append("abc", make_event("abc"))

        events = click_log.get_all("abc")
        events.clear()

        assert click_log.count("abc") == 1

    def test_delete_is_idempotent(self, click_log):
        click_log.append("abc", make_event("abc"))

        click_log.delete("abc")
        click_log.delete("abc")

        assert click_log.get_all("abc") == []

    def test_delete_before_keeps_later_events(self, click_log):
        click_log.append("abc", make_event("abc", seconds=10, referrer="old"))
        click_log.append("abc", make_event("abc", seconds=60, referrer="new"))
        click_log.append("abc", make_event("abc", seconds=90, referrer="newer"))

        click_log.delete("abc", before=T0 + timedelta(seconds=60))

        assert [e.referrer for e in click_log.get_all("abc")] == ["new", "newer"]

    def test_delete_before_drops_emptied_sequence(self, click_log):
        click_log.append("abc", make_event("abc", seconds=10))

        click_log.delete("abc", before=T0 + timedelta(seconds=60))
        click_log.delete("missing", before=T0)

        assert click_log.get_all("abc") == []
        assert click_log.purge_orphans(lambda token: False) == 0

    def test_purge_orphans(self, click_log):
        click_log.append("live", make_event("live"))
        click_log.append("gone1", make_event("gone1"))
        click_log.append("gone2", make_event("gone2"))

        removed = click_log.purge_orphans(lambda token: token == "live")

        assert removed == 2
        assert click_log.count("live") == 1
        assert click_log.count("gone1") == 0

    def test_concurrent_appends(self):
        log = InMemoryClickLog(stripes=2)

        def append_many(worker):
            for i in range(100):
                log.append("shared", make_event("shared", seconds=i, referrer=f"{worker}:{i}"))

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(append_many, range(8)))

        events = log.get_all("shared")
        assert len(events) == 800
        # Each worker's own events keep their relative order
        for worker in range(8):
            mine = [e.referrer for e in events if e.referrer.startswith(f"{worker}:")]
            assert mine == [f"{worker}:{i}" for i in range(100)]
