"""Reed.co.uk job search — UK contract roles.

API key from https://www.reed.co.uk/developers. The key is sent as the
Basic-auth username with an empty password.
"""
from __future__ import annotations

from typing import Any

import requests

from jobfeed.config import FeedSettings
from jobfeed.errors import MissingCredentials
from jobfeed.models import FeedItem
from jobfeed.normalize import format_salary, text_or_empty, truncate_description
from jobfeed.sources.base import FeedSource


API_URL = "https://www.reed.co.uk/api/1.0/search"
JOB_URL = "https://www.reed.co.uk/jobs/"


class ReedSource(FeedSource):
    name = "reed"
    label = "Reed"

    def credentials(self) -> dict[str, str]:
        api_key = self._credential("REED_API_KEY")
        if not api_key:
            raise MissingCredentials("REED_API_KEY not set")
        return {"api_key": api_key}

    def _request(self, creds: dict[str, str], settings: FeedSettings) -> requests.Response:
        params = {
            "keywords": settings.search_keywords,
            "resultsToTake": str(settings.results_per_source),
            "contract": "true",
        }
        return requests.get(
            API_URL,
            params=params,
            auth=(creds["api_key"], ""),
            timeout=settings.request_timeout,
        )

    def _results(self, data: Any) -> list:
        # Older API versions answered with a bare array
        if isinstance(data, list):
            return data
        return super()._results(data)

    def _to_item(self, hit: dict[str, Any], settings: FeedSettings) -> FeedItem:
        job_id = text_or_empty(hit.get("jobId"))
        return FeedItem(
            id=f"{self.name}-{job_id}",
            title=text_or_empty(hit.get("jobTitle")),
            company=text_or_empty(hit.get("employerName")),
            location=text_or_empty(hit.get("locationName")),
            salary_text=format_salary(
                hit.get("minimumSalary"), hit.get("maximumSalary"), settings.currency_symbol
            ),
            job_type="contract",
            date_posted=text_or_empty(hit.get("date")),
            description=truncate_description(hit.get("jobDescription")),
            job_link=JOB_URL + job_id,
            source=self.name,
        )
