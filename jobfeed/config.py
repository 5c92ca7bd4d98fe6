"""Load env credentials and feed scan settings."""
from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from jobfeed.log import get_logger

log = get_logger(__name__)

load_dotenv()

ROOT_DIR: Path = Path(__file__).resolve().parent.parent
CONFIG_DIR: Path = ROOT_DIR / "config"
FEED_CONFIG_PATH: Path = CONFIG_DIR / "feed.yaml"

# Key-value store layout
FEED_KEY = "tracker_feed"
DISMISSED_KEY = "tracker_feed_dismissed"
JOBS_KEY = "tracker_jobs"
RECRUITERS_KEY = "tracker_recruiters"


@dataclass
class FeedSettings:
    search_keywords: str = "Business Architect"
    results_per_source: int = 50
    request_timeout: float = 15.0
    scan_timeout: float = 30.0
    currency_symbol: str = "£"
    adzuna_country: str = "gb"


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def load_feed_settings(path: Path | None = None) -> FeedSettings:
    """Read config/feed.yaml; missing file or keys fall back to defaults."""
    path = path or FEED_CONFIG_PATH
    if not path.exists():
        return FeedSettings()

    with open(path, "r", encoding="utf-8") as f:
        data: dict[str, Any] = yaml.safe_load(f) or {}

    known = {f.name for f in fields(FeedSettings)}
    unknown = set(data) - known
    if unknown:
        log.warning("Ignoring unknown feed settings: %s", ", ".join(sorted(unknown)))

    return FeedSettings(**{k: v for k, v in data.items() if k in known})
