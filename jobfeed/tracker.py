"""Tracker job and recruiter lists, stored whole and passed through untouched."""
from __future__ import annotations

from typing import Any

from jobfeed.config import JOBS_KEY, RECRUITERS_KEY
from jobfeed.errors import StoreUnavailable, ValidationError
from jobfeed.log import get_logger
from jobfeed.store import KeyValueStore

log = get_logger(__name__)


def _unwrap(value: Any, wrapper: str) -> Any:
    # Lists saved by older clients are wrapped as {"<wrapper>": [...]}
    if isinstance(value, dict) and isinstance(value.get(wrapper), list):
        return value[wrapper]
    return value


def _as_list(value: Any, key: str) -> list:
    if value is None:
        return []
    if not isinstance(value, list):
        log.warning("Expected a list under %r, found %s; treating as empty", key, type(value).__name__)
        return []
    return value


def recruiters_from_payload(body: Any) -> list:
    """Accept a bare array or ``{"recruiters": [...]}``."""
    body = _unwrap(body, "recruiters")
    if isinstance(body, list):
        return body
    raise ValidationError("recruiters must be an array")


class TrackerStore:
    def __init__(self, store: KeyValueStore) -> None:
        self.store = store

    def get_jobs(self) -> list[dict[str, Any]]:
        return _as_list(_unwrap(self.store.get(JOBS_KEY), "jobs"), JOBS_KEY)

    def save_jobs(self, jobs: Any) -> None:
        if not isinstance(jobs, list):
            raise ValidationError("Expected an array of jobs")
        self.store.set(JOBS_KEY, jobs)
        log.debug("Saved %d tracker jobs", len(jobs))

    def append_job(self, job: dict[str, Any]) -> None:
        """Append to the stored list; an unreadable list is never overwritten."""

        def add(current: Any) -> list:
            jobs = _unwrap(current, "jobs")
            if jobs is None:
                return [job]
            if not isinstance(jobs, list):
                raise StoreUnavailable(
                    f"refusing to overwrite {JOBS_KEY!r} holding {type(jobs).__name__}"
                )
            return jobs + [job]

        self.store.update(JOBS_KEY, add)
        log.debug("Tracked: %s @ %s", job.get("title"), job.get("company"))

    def get_recruiters(self) -> list:
        return _as_list(_unwrap(self.store.get(RECRUITERS_KEY), "recruiters"), RECRUITERS_KEY)

    def save_recruiters(self, body: Any) -> None:
        self.store.set(RECRUITERS_KEY, recruiters_from_payload(body))
