#!/usr/bin/env python3
"""Entry point to run one job feed scan (cron or by hand)."""
from __future__ import annotations

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from jobfeed.log import get_logger

log = get_logger(__name__)


def main() -> int:
    from jobfeed.aggregator import run_scan
    from jobfeed.config import get_env, load_feed_settings
    from jobfeed.feed_store import FeedStore
    from jobfeed.sources import get_sources
    from jobfeed.store import get_store

    try:
        result = run_scan(get_sources(get_env), FeedStore(get_store()), load_feed_settings())
    except Exception as exc:
        log.error("Scan failed: %s", exc)
        return 1

    log.info("Scan complete.")
    log.info("  Unique items: %d", result.total_items)
    for name, count in result.counts_per_source.items():
        log.info("  %s: %d", name, count)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
