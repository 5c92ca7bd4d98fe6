"""
Feed scan: fan out to every source, merge, dedupe, store the snapshot.

Runs: sources in parallel → concatenate in registration order → drop repeated
ids (first wins) → persist snapshot with per-source counts.
"""
from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from datetime import datetime
from typing import Iterable

from jobfeed.config import FeedSettings
from jobfeed.feed_store import FeedStore
from jobfeed.log import get_logger
from jobfeed.models import FeedItem, FeedSnapshot, ScanResult, iso_timestamp, utc_now
from jobfeed.sources.base import FeedSource

log = get_logger(__name__)


def _fetch_source(source: FeedSource, settings: FeedSettings) -> list[FeedItem]:
    """Wrapper for parallel source fetching."""
    try:
        return source.fetch_postings(settings)
    except Exception as exc:
        log.error("[%s] FAILED: %s", source.name, exc)
        return []


def dedupe(items: Iterable[FeedItem]) -> list[FeedItem]:
    seen: set[str] = set()
    unique: list[FeedItem] = []
    for item in items:
        if item.id in seen:
            continue
        seen.add(item.id)
        unique.append(item)
    return unique


def fetch_all(sources: list[FeedSource], settings: FeedSettings) -> list[tuple[FeedSource, list[FeedItem]]]:
    """Call every source concurrently and wait for all, bounded by ``scan_timeout``.

    A source still running at the deadline contributes nothing.
    """
    if not sources:
        return []

    pool = ThreadPoolExecutor(max_workers=len(sources), thread_name_prefix="feed-source")
    futures = [(src, pool.submit(_fetch_source, src, settings)) for src in sources]
    deadline = time.monotonic() + settings.scan_timeout

    results: list[tuple[FeedSource, list[FeedItem]]] = []
    try:
        for src, future in futures:
            remaining = max(0.0, deadline - time.monotonic())
            try:
                batch = future.result(timeout=remaining)
            except FutureTimeout:
                log.warning("[%s] no answer within %.0fs, counted as empty", src.name, settings.scan_timeout)
                batch = []
            results.append((src, batch))
    finally:
        # Stragglers finish on their own request timeout; the scan does not wait for them.
        pool.shutdown(wait=False, cancel_futures=True)
    return results


def run_scan(
    sources: list[FeedSource],
    feed_store: FeedStore,
    settings: FeedSettings,
    now: datetime | None = None,
) -> ScanResult:
    """One full scan. Store failures propagate; source failures never do."""
    log.info("Starting job feed scan across %d source(s)...", len(sources))
    fetched = fetch_all(sources, settings)

    counts: dict[str, int] = {src.name: len(batch) for src, batch in fetched}
    log.info("Found %s", ", ".join(f"{n} {name}" for name, n in counts.items()) or "no sources")

    unique = dedupe(item for _, batch in fetched for item in batch)
    snapshot = FeedSnapshot(
        items=unique,
        last_scan=iso_timestamp(now or utc_now()),
        counts_per_source=counts,
    )
    feed_store.write_snapshot(snapshot)

    log.info("Feed scan complete. Total unique items: %d", len(unique))
    return ScanResult(total_items=len(unique), counts_per_source=counts)
