"""
Output Formatter Module

Formats crawl outcomes into structured output.
Currently supports JSON output with the page analysis and per-link data.
"""

from datetime import datetime, timezone
from typing import Dict, List, Optional

from .models import CrawlOutcome, HEADING_LEVELS, LinkType, UrlRecord


class OutputFormatter:
    """Formats analysis results into structured output."""

    def _format_page_data(self, outcome: CrawlOutcome) -> Dict:
        """
        Format the page-level analysis for output.

        Args:
            outcome: Completed crawl outcome

        Returns:
            Formatted page data
        """
        return {
            "title": outcome.title,
            "html_version": outcome.html_version,
            "has_login_form": outcome.has_login_form,
            "headings": {
                "counts": {
                    level: outcome.heading_counts.get(level, 0)
                    for level in HEADING_LEVELS
                },
                "total": outcome.total_headings,
            },
            "links_found": {
                "internal_count": outcome.internal_link_count,
                "external_count": outcome.external_link_count,
                "broken_count": outcome.broken_link_count,
                "total": outcome.total_links,
            },
        }

    def _format_links(self, outcome: CrawlOutcome) -> List[Dict]:
        return [link.to_dict() for link in outcome.links]

    def _generate_crawl_summary(
        self,
        record: UrlRecord,
        outcome: Optional[CrawlOutcome],
        crawl_time: float,
    ) -> Dict:
        """
        Generate summary information about the crawl.

        Args:
            record: URL record that was crawled
            outcome: Crawl outcome, or None if the crawl failed
            crawl_time: Time taken for crawl in seconds

        Returns:
            Summary dictionary
        """
        links = outcome.links if outcome else ()
        checked_links = sum(1 for link in links if link.status_code is not None)

        return {
            "url": record.url,
            "status": record.status.value,
            "error_message": record.error_message or None,
            "crawl_timestamp": datetime.now(timezone.utc).isoformat(),
            "crawl_duration_seconds": round(crawl_time, 2),
            "links_with_status": checked_links,
            "internal_links_broken": sum(
                1
                for link in links
                if link.link_type is LinkType.INTERNAL and link.is_broken
            ),
            "external_links_broken": sum(
                1
                for link in links
                if link.link_type is LinkType.EXTERNAL and link.is_broken
            ),
        }

    def format_outcome(
        self,
        record: UrlRecord,
        outcome: Optional[CrawlOutcome],
        crawl_time: float = 0.0,
    ) -> Dict:
        """
        Format the complete result of one crawl.

        Args:
            record: URL record after the crawl finished
            outcome: Crawl outcome, or None if the crawl failed
            crawl_time: Time taken for crawl in seconds

        Returns:
            Complete formatted output dictionary
        """
        output = {
            "crawl_summary": self._generate_crawl_summary(record, outcome, crawl_time),
            "page": None,
            "links": [],
        }

        if outcome is not None:
            output["page"] = self._format_page_data(outcome)
            output["links"] = self._format_links(outcome)

        return output
