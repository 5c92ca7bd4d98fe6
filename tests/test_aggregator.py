from __future__ import annotations

import threading
from datetime import datetime, timezone

import pytest

from jobfeed.aggregator import dedupe, run_scan
from jobfeed.config import FEED_KEY
from jobfeed.errors import StoreUnavailable
from jobfeed.feed_store import FeedStore
from jobfeed.sources import get_sources
from tests.helpers import BrokenStore, StaticSource, make_item


class SlowSource(StaticSource):
    def __init__(self, name, items, release: threading.Event) -> None:
        super().__init__(name, items)
        self.release = release

    def fetch_postings(self, settings):
        self.release.wait(timeout=5)
        return super().fetch_postings(settings)


class ExplodingSource(StaticSource):
    def fetch_postings(self, settings):
        raise RuntimeError("adapter bug")


def test_dedupe_keeps_first_occurrence() -> None:
    first = make_item("reed-1", title="first")
    items = [first, make_item("adzuna-1"), make_item("reed-1", title="second")]

    unique = dedupe(items)

    assert [i.id for i in unique] == ["reed-1", "adzuna-1"]
    assert unique[0].title == "first"


def test_run_scan_merges_in_registration_order(feed_store, settings) -> None:
    reed = StaticSource("reed", [make_item("reed-1")])
    adzuna = StaticSource("adzuna", [make_item("adzuna-1"), make_item("reed-1", title="dup")])

    result = run_scan([reed, adzuna], feed_store, settings)

    assert result.total_items == 2
    assert result.counts_per_source == {"reed": 1, "adzuna": 2}
    snapshot = feed_store.read_snapshot()
    assert [i.id for i in snapshot.items] == ["reed-1", "adzuna-1"]
    assert snapshot.items[0].title == "Title reed-1"


def test_run_scan_each_id_once(feed_store, settings) -> None:
    ids = ["reed-1", "reed-2", "reed-1", "reed-3", "reed-2"]
    source = StaticSource("reed", [make_item(i) for i in ids])

    run_scan([source], feed_store, settings)

    stored = [i.id for i in feed_store.read_snapshot().items]
    assert stored == ["reed-1", "reed-2", "reed-3"]


def test_run_scan_records_meta(feed_store, settings) -> None:
    now = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)
    run_scan([StaticSource("reed", [make_item("reed-1")])], feed_store, settings, now=now)

    assert feed_store.read_snapshot().meta == {
        "lastScan": "2024-05-01T09:30:00.000Z",
        "countsPerSource": {"reed": 1},
    }


def test_run_scan_replaces_previous_snapshot(feed_store, settings) -> None:
    run_scan([StaticSource("reed", [make_item("reed-1"), make_item("reed-2")])], feed_store, settings)
    run_scan([StaticSource("reed", [make_item("reed-3")])], feed_store, settings)

    assert [i.id for i in feed_store.read_snapshot().items] == ["reed-3"]


def test_run_scan_without_credentials_stores_empty_feed(feed_store, settings) -> None:
    result = run_scan(get_sources(lambda key: ""), feed_store, settings)

    assert result.to_dict() == {"success": True, "totalItems": 0, "reed": 0, "adzuna": 0}
    assert feed_store.read_snapshot().items == []


def test_failing_adapter_does_not_abort_scan(feed_store, settings) -> None:
    sources = [ExplodingSource("reed", []), StaticSource("adzuna", [make_item("adzuna-1")])]

    result = run_scan(sources, feed_store, settings)

    assert result.counts_per_source == {"reed": 0, "adzuna": 1}
    assert result.total_items == 1


def test_slow_adapter_is_cut_off_at_deadline(feed_store, settings) -> None:
    settings.scan_timeout = 0.2
    release = threading.Event()
    slow = SlowSource("reed", [make_item("reed-1")], release)
    fast = StaticSource("adzuna", [make_item("adzuna-1")])

    try:
        result = run_scan([slow, fast], feed_store, settings)
    finally:
        release.set()

    assert result.counts_per_source == {"reed": 0, "adzuna": 1}
    assert [i.id for i in feed_store.read_snapshot().items] == ["adzuna-1"]


def test_store_failure_aborts_scan(settings) -> None:
    with pytest.raises(StoreUnavailable):
        run_scan([StaticSource("reed", [make_item("reed-1")])], FeedStore(BrokenStore()), settings)


def test_snapshot_is_versioned(store, feed_store, settings) -> None:
    run_scan([StaticSource("reed", [make_item("reed-1")])], feed_store, settings)

    raw = store.get(FEED_KEY)
    assert raw["version"] == 1
    assert raw["items"][0]["id"] == "reed-1"
    assert raw["items"][0]["jobLink"] == "https://example.com/reed-1"
