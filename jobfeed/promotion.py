"""Turn a feed item into a tracker job and hide it from the feed."""
from __future__ import annotations

from datetime import datetime

from jobfeed.errors import FeedItemNotFound
from jobfeed.feed_store import FeedStore
from jobfeed.log import get_logger
from jobfeed.models import FeedItem, TrackerJob, iso_timestamp, utc_now
from jobfeed.tracker import TrackerStore

log = get_logger(__name__)


def build_tracker_job(item: FeedItem, now: datetime | None = None) -> TrackerJob:
    now = now or utc_now()
    stamp = iso_timestamp(now)
    return TrackerJob(
        id=f"job-{int(now.timestamp() * 1000)}",
        title=item.title,
        company=item.company,
        location=item.location,
        rate=item.salary_text,
        job_type=item.job_type,
        job_link=item.job_link,
        notes=f"Added from {item.source or 'feed'}",
        created_at=stamp,
        updated_at=stamp,
    )


def promote(
    feed_store: FeedStore,
    tracker: TrackerStore,
    feed_item_id: str,
    now: datetime | None = None,
) -> TrackerJob:
    """Append the item to the tracker, then dismiss it.

    The two writes are separate: if dismissing fails after the append, the
    job exists in the tracker while the item stays visible in the feed.
    """
    item = feed_store.find_item(feed_item_id)
    if item is None:
        raise FeedItemNotFound(feed_item_id)

    job = build_tracker_job(item, now)
    tracker.append_job(job.to_dict())
    feed_store.dismiss(feed_item_id)
    log.info("Promoted %s to tracker as %s", feed_item_id, job.id)
    return job
