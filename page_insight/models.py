"""
Data Model Module

Value types produced and consumed by a single crawl invocation. Nothing
here is shared between crawls; persistence of these values is the job of
the result store.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Set, Tuple

HEADING_LEVELS = ("h1", "h2", "h3", "h4", "h5", "h6")

# Persisted link URLs are capped at this length
MAX_STORED_URL_LENGTH = 500


class CrawlStatus(str, Enum):
    """Lifecycle of a URL record."""

    QUEUED = "queued"
    RUNNING = "running"
    COMPLETED = "completed"
    ERROR = "error"


class LinkType(str, Enum):
    """Classification of a resolved anchor link."""

    INTERNAL = "internal"
    EXTERNAL = "external"


@dataclass
class FetchResult:
    """Raw response of the primary page fetch."""

    status_code: int
    body: bytes
    url: str = ""
    content_type: str = ""


def _empty_heading_counts() -> Dict[str, int]:
    return {level: 0 for level in HEADING_LEVELS}


@dataclass
class AnalysisData:
    """Accumulator filled in during one walk of the markup tree."""

    title: str = ""
    html_version: str = ""
    has_login_form: bool = False
    heading_counts: Dict[str, int] = field(default_factory=_empty_heading_counts)
    internal_links: List[str] = field(default_factory=list)
    external_links: List[str] = field(default_factory=list)


@dataclass
class LinkCheckOutcome:
    """Result of probing the sampled links of one page."""

    broken: Set[str] = field(default_factory=set)
    status_codes: Dict[str, Optional[int]] = field(default_factory=dict)
    checked: List[str] = field(default_factory=list)

    def is_broken(self, url: str) -> bool:
        return url in self.broken


@dataclass(frozen=True)
class LinkRecord:
    """A single discovered link as handed to persistence."""

    url: str
    link_type: LinkType
    is_broken: bool = False
    status_code: Optional[int] = None

    def to_dict(self) -> Dict:
        url = self.url
        if len(url) > MAX_STORED_URL_LENGTH:
            url = url[: MAX_STORED_URL_LENGTH - 3] + "..."
        return {
            "url": url,
            "type": self.link_type.value,
            "is_broken": self.is_broken,
            "status_code": self.status_code,
        }


@dataclass(frozen=True)
class CrawlOutcome:
    """Final aggregate of one crawl invocation."""

    title: str
    html_version: str
    has_login_form: bool
    heading_counts: Mapping[str, int]
    internal_link_count: int
    external_link_count: int
    broken_link_count: int
    links: Tuple[LinkRecord, ...] = ()

    def __post_init__(self):
        # Read-only copy so the outcome cannot change after it is built
        object.__setattr__(
            self, "heading_counts", MappingProxyType(dict(self.heading_counts))
        )

    @property
    def total_headings(self) -> int:
        return sum(self.heading_counts.get(level, 0) for level in HEADING_LEVELS)

    @property
    def total_links(self) -> int:
        return self.internal_link_count + self.external_link_count

    def to_dict(self) -> Dict:
        """Flatten into the shape stored by the persistence layer."""
        data = {
            "title": self.title,
            "html_version": self.html_version,
            "has_login_form": self.has_login_form,
        }
        for level in HEADING_LEVELS:
            data[f"{level}_count"] = self.heading_counts.get(level, 0)
        data.update(
            {
                "internal_links": self.internal_link_count,
                "external_links": self.external_link_count,
                "broken_links": self.broken_link_count,
                "links": [link.to_dict() for link in self.links],
            }
        )
        return data


@dataclass
class UrlRecord:
    """A URL submitted for analysis, with its externally visible status."""

    id: int
    url: str
    status: CrawlStatus = CrawlStatus.QUEUED
    error_message: str = ""
