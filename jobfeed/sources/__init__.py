from .base import FeedSource
from .reed import ReedSource
from .adzuna import AdzunaSource

from jobfeed.log import get_logger

log = get_logger(__name__)

__all__ = ["FeedSource", "ReedSource", "AdzunaSource", "get_sources"]

# Registration order is the merge order of a scan.
SOURCE_CLASSES: list[type[FeedSource]] = [ReedSource, AdzunaSource]


def get_sources(env_getter) -> list[FeedSource]:
    """Every known board; adapters without credentials skip themselves at scan time."""
    sources = [cls(env_getter) for cls in SOURCE_CLASSES]
    log.debug("Registered sources: %s", ", ".join(s.name for s in sources))
    return sources
