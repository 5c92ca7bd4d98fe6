from __future__ import annotations

from datetime import datetime, timezone

import pytest

from jobfeed.config import JOBS_KEY
from jobfeed.errors import FeedItemNotFound, StoreUnavailable
from jobfeed.models import FeedSnapshot
from jobfeed.promotion import build_tracker_job, promote
from jobfeed.tracker import TrackerStore
from tests.helpers import make_item

NOW = datetime(2024, 5, 1, 9, 30, 15, 250000, tzinfo=timezone.utc)


@pytest.fixture
def tracker(store) -> TrackerStore:
    return TrackerStore(store)


def test_build_tracker_job_maps_fields() -> None:
    item = make_item("adzuna-7", salary_text="£80,000", job_type="permanent")

    job = build_tracker_job(item, NOW).to_dict()

    assert job["id"] == f"job-{int(NOW.timestamp() * 1000)}"
    assert job["title"] == item.title
    assert job["company"] == item.company
    assert job["location"] == item.location
    assert job["rate"] == "£80,000"
    assert job["jobType"] == "permanent"
    assert job["jobLink"] == item.job_link
    assert job["status"] == "want"
    assert job["starred"] is False
    assert job["notes"] == "Added from adzuna"
    assert job["createdAt"] == job["updatedAt"] == "2024-05-01T09:30:15.250Z"
    assert job["recruiter"] == job["ir35"] == job["duration"] == job["dateApplied"] == ""


def test_notes_fall_back_to_feed_without_source() -> None:
    assert build_tracker_job(make_item("reed-1", source=""), NOW).notes == "Added from feed"


def test_promote_appends_job_and_dismisses(feed_store, tracker) -> None:
    feed_store.write_snapshot(FeedSnapshot(items=[make_item("reed-1"), make_item("reed-2")]))
    tracker.save_jobs([{"id": "job-1", "title": "Existing"}])

    job = promote(feed_store, tracker, "reed-1", now=NOW)

    jobs = tracker.get_jobs()
    assert len(jobs) == 2
    assert jobs[0]["id"] == "job-1"
    assert jobs[1] == job.to_dict()
    assert (jobs[1]["title"], jobs[1]["company"], jobs[1]["jobLink"]) == (
        "Title reed-1",
        "Company reed-1",
        "https://example.com/reed-1",
    )
    assert [i.id for i in feed_store.read_visible_feed()[0]] == ["reed-2"]


def test_promote_missing_item_changes_nothing(store, feed_store, tracker) -> None:
    feed_store.write_snapshot(FeedSnapshot(items=[make_item("reed-1")]))

    with pytest.raises(FeedItemNotFound):
        promote(feed_store, tracker, "missing-id")

    assert tracker.get_jobs() == []
    assert feed_store.read_dismissed() == []


def test_promote_before_first_scan_is_not_found(feed_store, tracker) -> None:
    with pytest.raises(FeedItemNotFound):
        promote(feed_store, tracker, "reed-1")


def test_promote_keeps_jobs_stored_in_wrapped_shape(store, feed_store, tracker) -> None:
    feed_store.write_snapshot(FeedSnapshot(items=[make_item("reed-1")]))
    store.set(JOBS_KEY, {"jobs": [{"id": "job-1"}, {"id": "job-2"}]})

    job = promote(feed_store, tracker, "reed-1", now=NOW)

    assert [j["id"] for j in store.get(JOBS_KEY)] == ["job-1", "job-2", job.id]
    assert [j["id"] for j in tracker.get_jobs()] == ["job-1", "job-2", job.id]


def test_promote_refuses_to_overwrite_unreadable_jobs(store, feed_store, tracker) -> None:
    feed_store.write_snapshot(FeedSnapshot(items=[make_item("reed-1")]))
    store.set(JOBS_KEY, {"unexpected": True})

    with pytest.raises(StoreUnavailable):
        promote(feed_store, tracker, "reed-1", now=NOW)

    assert store.get(JOBS_KEY) == {"unexpected": True}
    assert feed_store.read_dismissed() == []
