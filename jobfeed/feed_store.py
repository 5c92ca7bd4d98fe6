"""Feed snapshot and dismissed-id list on top of a KeyValueStore."""
from __future__ import annotations

from typing import Any

from jobfeed.config import DISMISSED_KEY, FEED_KEY
from jobfeed.errors import StoreUnavailable
from jobfeed.log import get_logger
from jobfeed.models import SNAPSHOT_VERSION, FeedItem, FeedSnapshot
from jobfeed.store import KeyValueStore

log = get_logger(__name__)


def _as_id_list(value: Any) -> list[str]:
    return list(value) if isinstance(value, list) else []


class FeedStore:
    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def read_snapshot(self) -> FeedSnapshot | None:
        """Stored snapshot, or None before the first scan. Store errors propagate."""
        data = self.store.get(FEED_KEY)
        if data is None:
            return None
        if not isinstance(data, dict) or data.get("version") != SNAPSHOT_VERSION:
            log.warning("Ignoring feed snapshot with unsupported schema under %r", FEED_KEY)
            return None
        try:
            return FeedSnapshot.from_dict(data)
        except ValueError as exc:
            log.warning("Ignoring malformed feed snapshot under %r: %s", FEED_KEY, exc)
            return None

    def write_snapshot(self, snapshot: FeedSnapshot) -> None:
        self.store.set(FEED_KEY, snapshot.to_dict())

    def read_dismissed(self) -> list[str]:
        return _as_id_list(self.store.get(DISMISSED_KEY))

    def read_visible_feed(self) -> tuple[list[FeedItem], dict[str, Any]]:
        """Snapshot items minus dismissed ids, in stored order.

        An unavailable store reads as an empty feed.
        """
        try:
            snapshot = self.read_snapshot()
            dismissed = set(self.read_dismissed())
        except StoreUnavailable as exc:
            log.warning("Feed read degraded to empty: %s", exc)
            return [], {}

        if snapshot is None:
            return [], {}
        items = [item for item in snapshot.items if item.id not in dismissed]
        return items, snapshot.meta

    def find_item(self, feed_item_id: str) -> FeedItem | None:
        """Look up an id in the unfiltered snapshot."""
        snapshot = self.read_snapshot()
        if snapshot is None:
            return None
        return next((item for item in snapshot.items if item.id == feed_item_id), None)

    def dismiss(self, feed_item_id: str) -> None:
        def add(current: Any) -> list[str]:
            ids = _as_id_list(current)
            if feed_item_id not in ids:
                ids.append(feed_item_id)
            return ids

        self.store.update(DISMISSED_KEY, add)
        log.debug("Dismissed %s", feed_item_id)
