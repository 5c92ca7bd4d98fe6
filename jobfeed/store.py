"""Key-value persistence for the feed and tracker lists.

Production talks to an Upstash Redis database over its REST endpoint.
Values are stored as JSON strings.
"""
from __future__ import annotations

import copy
import json
import threading
from abc import ABC, abstractmethod
from functools import lru_cache
from typing import Any, Callable

import requests

from jobfeed.config import get_env
from jobfeed.errors import StoreUnavailable
from jobfeed.log import get_logger

log = get_logger(__name__)


class KeyValueStore(ABC):
    @abstractmethod
    def get(self, key: str) -> Any:
        """Decoded value for ``key`` or None when unset."""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        pass

    def update(self, key: str, fn: Callable[[Any], Any]) -> Any:
        """Read-modify-write ``key`` through ``fn`` and return the stored value.

        The base version is a plain get-then-set: a concurrent writer between
        the two calls is lost (last write wins). Stores that can do better
        override this.
        """
        value = fn(self.get(key))
        self.set(key, value)
        return value


class UpstashStore(KeyValueStore):
    def __init__(self, url: str, token: str, timeout: float = 10.0) -> None:
        self.url = url.rstrip("/")
        self.token = token
        self.timeout = timeout

    def _command(self, *args: str) -> Any:
        if not self.url or not self.token:
            raise StoreUnavailable("KV_REST_API_URL / KV_REST_API_TOKEN not configured")
        try:
            r = requests.post(
                self.url,
                json=list(args),
                headers={"Authorization": f"Bearer {self.token}"},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise StoreUnavailable(f"store unreachable: {exc}") from exc

        try:
            body = r.json()
        except ValueError as exc:
            raise StoreUnavailable(f"store answered HTTP {r.status_code} without JSON") from exc
        if not isinstance(body, dict):
            raise StoreUnavailable(f"unexpected store response: {body!r:.200}")
        if not r.ok or "error" in body:
            raise StoreUnavailable(f"store error (HTTP {r.status_code}): {body.get('error', '')}")
        return body.get("result")

    def get(self, key: str) -> Any:
        raw = self._command("GET", key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            return raw

    def set(self, key: str, value: Any) -> None:
        self._command("SET", key, json.dumps(value))
        log.debug("SET %s", key)


class MemoryStore(KeyValueStore):
    """Process-local store; ``update`` is atomic under a lock."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(initial or {})
        self._lock = threading.RLock()

    def get(self, key: str) -> Any:
        with self._lock:
            return copy.deepcopy(self._data.get(key))

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = copy.deepcopy(value)

    def update(self, key: str, fn: Callable[[Any], Any]) -> Any:
        with self._lock:
            return super().update(key, fn)


@lru_cache
def get_store() -> KeyValueStore:
    return UpstashStore(get_env("KV_REST_API_URL"), get_env("KV_REST_API_TOKEN"))
