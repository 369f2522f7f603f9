"""
Exceptions raised by the crawl engine.

Only the message of a CrawlFailure ever leaves the engine; it is stored on
the URL record when a crawl ends in the error state.
"""

from typing import Optional


class PageInsightError(Exception):
    """Base class for all crawl engine errors."""


class FetchError(PageInsightError):
    """The primary page fetch failed (network, timeout, redirects or HTTP >= 400)."""

    def __init__(self, reason: str, status_code: Optional[int] = None):
        super().__init__(reason)
        self.reason = reason
        self.status_code = status_code


class CrawlFailure(PageInsightError):
    """A crawl invocation ended in the error state."""


class PersistenceError(PageInsightError):
    """The result store rejected a status update or crawl outcome."""


class CrawlConflictError(PageInsightError):
    """Start requested while running, or stop requested while not running."""
