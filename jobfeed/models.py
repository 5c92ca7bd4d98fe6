"""Data models for feed items, snapshots and tracker jobs.

Attributes are snake_case; ``to_dict``/``from_dict`` speak the camelCase
shape the stored JSON and the browser client use.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

SNAPSHOT_VERSION = 1


def _str(data: dict, key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value)


@dataclass
class FeedItem:
    id: str
    title: str = ""
    company: str = ""
    location: str = ""
    job_type: str = ""
    salary_text: str = ""
    date_posted: str = ""
    description: str = ""
    job_link: str = ""
    source: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "id": self.id,
            "title": self.title,
            "company": self.company,
            "location": self.location,
            "salaryText": self.salary_text,
            "jobType": self.job_type,
            "datePosted": self.date_posted,
            "description": self.description,
            "jobLink": self.job_link,
            "source": self.source,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FeedItem:
        return cls(
            id=_str(data, "id"),
            title=_str(data, "title"),
            company=_str(data, "company"),
            location=_str(data, "location"),
            job_type=_str(data, "jobType"),
            salary_text=_str(data, "salaryText"),
            date_posted=_str(data, "datePosted"),
            description=_str(data, "description"),
            job_link=_str(data, "jobLink"),
            source=_str(data, "source"),
        )


@dataclass
class FeedSnapshot:
    items: list[FeedItem]
    last_scan: str = ""
    counts_per_source: dict[str, int] = field(default_factory=dict)

    @property
    def meta(self) -> dict[str, Any]:
        return {"lastScan": self.last_scan, "countsPerSource": dict(self.counts_per_source)}

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": SNAPSHOT_VERSION,
            "items": [item.to_dict() for item in self.items],
            "meta": self.meta,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FeedSnapshot:
        """Raises ValueError when the record does not have the snapshot shape."""
        items = data.get("items")
        meta = data.get("meta")
        counts = meta.get("countsPerSource") if isinstance(meta, dict) else None
        if not isinstance(items, list) or not isinstance(counts, dict):
            raise ValueError("snapshot needs an items list and meta.countsPerSource")
        try:
            counts_per_source = {str(k): int(v) for k, v in counts.items()}
        except (TypeError, ValueError) as exc:
            raise ValueError(f"bad source count: {exc}") from exc
        return cls(
            items=[FeedItem.from_dict(i) for i in items if isinstance(i, dict)],
            last_scan=_str(meta, "lastScan"),
            counts_per_source=counts_per_source,
        )


@dataclass
class TrackerJob:
    id: str
    title: str
    company: str
    location: str
    rate: str
    job_type: str
    job_link: str
    notes: str
    created_at: str
    updated_at: str
    recruiter: str = ""
    ir35: str = ""
    duration: str = ""
    starred: bool = False
    status: str = "want"
    date_applied: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "company": self.company,
            "recruiter": self.recruiter,
            "location": self.location,
            "ir35": self.ir35,
            "rate": self.rate,
            "duration": self.duration,
            "jobType": self.job_type,
            "starred": self.starred,
            "status": self.status,
            "dateApplied": self.date_applied,
            "jobLink": self.job_link,
            "notes": self.notes,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass
class ScanResult:
    total_items: int
    counts_per_source: dict[str, int]

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"success": True, "totalItems": self.total_items}
        out.update(self.counts_per_source)
        return out


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def iso_timestamp(when: datetime) -> str:
    """Millisecond ISO-8601 with a ``Z`` suffix, e.g. 2024-05-01T09:30:00.000Z."""
    return when.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.") + f"{when.microsecond // 1000:03d}Z"
