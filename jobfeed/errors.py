"""Exceptions shared across the feed pipeline and the API layer."""
from __future__ import annotations


class JobFeedError(Exception):
    pass


class ProviderUnavailable(JobFeedError):
    """A job board call failed or answered with a non-success status."""


class MissingCredentials(ProviderUnavailable):
    """Adapter credentials are absent or blank."""


class StoreUnavailable(JobFeedError):
    """The key-value store is unconfigured, unreachable or returned an error."""


class FeedItemNotFound(JobFeedError):
    def __init__(self, feed_item_id: str) -> None:
        super().__init__(f"Feed item not found: {feed_item_id}")
        self.feed_item_id = feed_item_id


class ValidationError(JobFeedError):
    """Malformed request payload."""
