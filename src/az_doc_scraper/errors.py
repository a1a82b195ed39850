"""Exceptions raised while scraping the az reference documentation.

Every failure is fatal for the whole run; nothing in the crawler recovers
locally.
"""

from typing import Optional


class ScraperError(Exception):
    """Base class for all scraper failures."""


class FetchFailure(ScraperError):
    """A page could not be fetched (non-success status or transport error)."""

    def __init__(self, url: str, status: Optional[int] = None, reason: str = ""):
        self.url = url
        self.status = status
        self.reason = reason
        detail = f"status {status}" if status is not None else reason or "transport error"
        super().__init__(f"Failed to fetch {url} ({detail})")


class VersionResolutionFailure(ScraperError):
    """The release page title does not contain a dotted version."""


class PreconditionFailure(ScraperError):
    """The output root does not exist."""


class PageStructureError(ScraperError):
    """A page is missing an element the crawler cannot do without."""
