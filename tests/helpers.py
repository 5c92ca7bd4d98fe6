from __future__ import annotations

import json
from typing import Any

from jobfeed.config import FeedSettings
from jobfeed.errors import StoreUnavailable
from jobfeed.models import FeedItem
from jobfeed.sources.base import FeedSource
from jobfeed.store import KeyValueStore


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: str | None = None) -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text if text is not None else json.dumps(payload)

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("no JSON body")
        return self._payload


class StaticSource(FeedSource):
    """Source returning canned items without touching the network."""

    def __init__(self, name: str, items: list[FeedItem]) -> None:
        super().__init__(lambda key: "")
        self.name = name
        self.label = name
        self.items = items
        self.calls = 0

    def credentials(self) -> dict[str, str]:
        return {}

    def _request(self, creds, settings):
        raise AssertionError("StaticSource never makes requests")

    def _to_item(self, hit, settings):
        raise AssertionError("StaticSource never maps hits")

    def fetch_postings(self, settings: FeedSettings) -> list[FeedItem]:
        self.calls += 1
        return list(self.items)


class BrokenStore(KeyValueStore):
    def get(self, key: str) -> Any:
        raise StoreUnavailable("store unreachable")

    def set(self, key: str, value: Any) -> None:
        raise StoreUnavailable("store unreachable")


def make_item(item_id: str, **fields: str) -> FeedItem:
    source = item_id.split("-", 1)[0]
    defaults = {
        "title": f"Title {item_id}",
        "company": f"Company {item_id}",
        "location": "London",
        "job_type": "contract",
        "job_link": f"https://example.com/{item_id}",
        "source": source,
    }
    defaults.update(fields)
    return FeedItem(id=item_id, **defaults)
