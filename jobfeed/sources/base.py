from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable

import requests

from jobfeed.config import FeedSettings
from jobfeed.errors import MissingCredentials, ProviderUnavailable
from jobfeed.log import get_logger
from jobfeed.models import FeedItem

log = get_logger(__name__)

EnvGetter = Callable[[str], str]


class FeedSource(ABC):
    """One job board. ``fetch_postings`` never raises; failures yield []."""

    name: str = ""
    label: str = ""

    def __init__(self, env_getter: EnvGetter) -> None:
        self.env_getter = env_getter

    def _credential(self, key: str) -> str:
        return (self.env_getter(key) or "").strip()

    @abstractmethod
    def credentials(self) -> dict[str, str]:
        """Return provider credentials or raise MissingCredentials."""

    @abstractmethod
    def _request(self, creds: dict[str, str], settings: FeedSettings) -> requests.Response:
        pass

    @abstractmethod
    def _to_item(self, hit: dict[str, Any], settings: FeedSettings) -> FeedItem:
        pass

    def _results(self, data: Any) -> list:
        if isinstance(data, dict):
            return data.get("results") or []
        return []

    def _fetch(self, settings: FeedSettings) -> list[FeedItem]:
        creds = self.credentials()
        r = self._request(creds, settings)
        if not r.ok:
            raise ProviderUnavailable(f"HTTP {r.status_code}: {r.text[:300]}")
        return self._map_hits(self._results(r.json()), settings)

    def _map_hits(self, hits: list, settings: FeedSettings) -> list[FeedItem]:
        items = []
        for hit in hits:
            if not isinstance(hit, dict):
                continue
            try:
                items.append(self._to_item(hit, settings))
            except Exception as exc:
                log.warning("%s: skipping malformed posting: %s", self.label, exc)
        return items

    def fetch_postings(self, settings: FeedSettings) -> list[FeedItem]:
        try:
            items = self._fetch(settings)
        except MissingCredentials as exc:
            log.info("%s: %s, skipping", self.label, exc)
            return []
        except ProviderUnavailable as exc:
            log.warning("%s API error: %s", self.label, exc)
            return []
        except Exception as exc:
            log.warning("%s request failed: %s", self.label, exc)
            return []
        log.debug("%s returned %d postings", self.label, len(items))
        return items
