"""Adzuna job search — aggregator with UK coverage.

Free tier: 250 requests/day.  Sign up at https://developer.adzuna.com/
"""
from __future__ import annotations

from typing import Any

import requests

from jobfeed.config import FeedSettings
from jobfeed.errors import MissingCredentials
from jobfeed.models import FeedItem
from jobfeed.normalize import format_salary, nested_text, text_or_empty, truncate_description
from jobfeed.sources.base import FeedSource


BASE_URL = "https://api.adzuna.com/v1/api/jobs/{country}/search/1"


class AdzunaSource(FeedSource):
    name = "adzuna"
    label = "Adzuna"

    def credentials(self) -> dict[str, str]:
        app_id = self._credential("ADZUNA_APP_ID")
        app_key = self._credential("ADZUNA_APP_KEY")
        if not app_id or not app_key:
            raise MissingCredentials("Adzuna credentials not set")
        return {"app_id": app_id, "app_key": app_key}

    def _request(self, creds: dict[str, str], settings: FeedSettings) -> requests.Response:
        params: dict = {
            "app_id": creds["app_id"],
            "app_key": creds["app_key"],
            "what": settings.search_keywords,
            "results_per_page": str(settings.results_per_source),
            "content-type": "application/json",
        }
        return requests.get(
            BASE_URL.format(country=settings.adzuna_country),
            params=params,
            timeout=settings.request_timeout,
        )

    def _to_item(self, hit: dict[str, Any], settings: FeedSettings) -> FeedItem:
        return FeedItem(
            id=f"{self.name}-{text_or_empty(hit.get('id'))}",
            title=text_or_empty(hit.get("title")),
            company=nested_text(hit, "company"),
            location=nested_text(hit, "location"),
            salary_text=format_salary(
                hit.get("salary_min"), hit.get("salary_max"), settings.currency_symbol
            ),
            job_type="permanent" if hit.get("contract_type") == "permanent" else "contract",
            date_posted=text_or_empty(hit.get("created")),
            description=truncate_description(hit.get("description")),
            job_link=text_or_empty(hit.get("redirect_url")),
            source=self.name,
        )
