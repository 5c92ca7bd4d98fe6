from __future__ import annotations

import pytest

from jobfeed.config import FeedSettings
from jobfeed.feed_store import FeedStore
from jobfeed.store import MemoryStore

ENV_VARS = (
    "REED_API_KEY",
    "ADZUNA_APP_ID",
    "ADZUNA_APP_KEY",
    "AUTH_SECRET",
    "SITE_PASSWORD",
    "CRON_SECRET",
    "KV_REST_API_URL",
    "KV_REST_API_TOKEN",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch) -> None:
    for key in ENV_VARS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def settings() -> FeedSettings:
    return FeedSettings(scan_timeout=5.0, request_timeout=1.0)


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def feed_store(store: MemoryStore) -> FeedStore:
    return FeedStore(store)
