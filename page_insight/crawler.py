"""
Crawl Orchestrator Module

Runs one crawl invocation end to end (fetch, analyze, check links,
aggregate) and reports the result to the result store. The dispatcher
owns the queued/running/completed/error state machine and launches
crawls on a worker pool without blocking the caller.
"""

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Dict, Iterable, List, Optional
from urllib.parse import urlparse

from .analyzer import MarkupAnalyzer
from .exceptions import CrawlConflictError, CrawlFailure, FetchError, PersistenceError
from .fetcher import DocumentFetcher
from .link_checker import LinkChecker
from .models import (
    AnalysisData,
    CrawlOutcome,
    CrawlStatus,
    LinkCheckOutcome,
    LinkRecord,
    LinkType,
    UrlRecord,
)
from .store import ResultStore

STOPPED_MESSAGE = "Crawling stopped by user"


def is_valid_url(url: str) -> bool:
    """Check that a URL has both a scheme and a host."""
    try:
        parsed = urlparse(url)
    except ValueError:
        return False
    return bool(parsed.scheme) and bool(parsed.netloc)


def build_outcome(data: AnalysisData, link_check: LinkCheckOutcome) -> CrawlOutcome:
    """
    Aggregate analysis data and link check results into a CrawlOutcome.

    Every discovered link gets a record, internal links first. Links
    that were never checked are reported as not broken.
    """
    links = []
    for link_type, urls in (
        (LinkType.INTERNAL, data.internal_links),
        (LinkType.EXTERNAL, data.external_links),
    ):
        for url in urls:
            links.append(
                LinkRecord(
                    url=url,
                    link_type=link_type,
                    is_broken=link_check.is_broken(url),
                    status_code=link_check.status_codes.get(url),
                )
            )

    return CrawlOutcome(
        title=data.title,
        html_version=data.html_version,
        has_login_form=data.has_login_form,
        heading_counts=dict(data.heading_counts),
        internal_link_count=len(data.internal_links),
        external_link_count=len(data.external_links),
        broken_link_count=len(link_check.broken),
        links=tuple(links),
    )


class CrawlOrchestrator:
    """Sequences the crawl stages for a single URL."""

    def __init__(
        self,
        store: ResultStore,
        fetcher: Optional[DocumentFetcher] = None,
        analyzer: Optional[MarkupAnalyzer] = None,
        link_checker: Optional[LinkChecker] = None,
        check_links: bool = True,
        verbose: bool = False,
    ):
        """
        Initialize the orchestrator.

        Args:
            store: Persistence collaborator for status and outcomes
            fetcher: Document fetcher (default: DocumentFetcher with defaults)
            analyzer: Markup analyzer (default: MarkupAnalyzer)
            link_checker: Link checker (default: LinkChecker)
            check_links: Check links for brokenness
            verbose: Enable verbose logging
        """
        self.store = store
        self.verbose = verbose
        self.check_links = check_links
        self.fetcher = fetcher or DocumentFetcher(verbose=verbose)
        self.analyzer = analyzer or MarkupAnalyzer(verbose=verbose)
        self.link_checker = link_checker or LinkChecker(verbose=verbose)

    def _fail(self, record: UrlRecord, message: str) -> CrawlFailure:
        if self.verbose:
            print(f"    ❌ Crawl failed for {record.url}: {message}")
        try:
            self.store.update_status(record.id, CrawlStatus.ERROR, message)
        except PersistenceError as e:
            print(f"❌ Failed to record error status for URL {record.id}: {e}")
        return CrawlFailure(message)

    def run_crawl(self, record: UrlRecord) -> CrawlOutcome:
        """
        Crawl a single URL and persist the outcome.

        Args:
            record: URL record to crawl

        Returns:
            The persisted CrawlOutcome

        Raises:
            CrawlFailure: If the fetch, the save of the outcome or a status
                update fails; the record is left in the error state with
                the message whenever the store still accepts it
        """
        if not is_valid_url(record.url):
            raise self._fail(record, f"Invalid URL: {record.url}")

        try:
            self.store.update_status(record.id, CrawlStatus.RUNNING)
        except PersistenceError as e:
            raise self._fail(record, f"Failed to update status: {e}")

        if self.verbose:
            print(f"🚀 Starting crawl of: {record.url}")

        try:
            page = self.fetcher.fetch(record.url)
        except FetchError as e:
            raise self._fail(record, str(e))

        data = self.analyzer.analyze(page.body, record.url)

        if self.check_links:
            link_check = self.link_checker.check_broken(
                data.internal_links, data.external_links
            )
        else:
            link_check = LinkCheckOutcome()

        outcome = build_outcome(data, link_check)

        try:
            self.store.save_outcome(record.id, outcome)
        except PersistenceError as e:
            raise self._fail(record, f"Failed to save results: {e}")

        try:
            self.store.update_status(record.id, CrawlStatus.COMPLETED, "")
        except PersistenceError as e:
            raise self._fail(record, f"Failed to update status: {e}")

        if self.verbose:
            print(
                f"✅ Crawl completed: {outcome.total_links} links, "
                f"{outcome.broken_link_count} broken"
            )

        return outcome


class CrawlDispatcher:
    """Starts and stops crawls without blocking the caller."""

    def __init__(
        self,
        orchestrator: CrawlOrchestrator,
        max_workers: int = 4,
        verbose: bool = False,
    ):
        self.orchestrator = orchestrator
        self.store = orchestrator.store
        self.verbose = verbose
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="crawl"
        )
        # Makes the status check and the status change one step
        self._lock = threading.Lock()

    def _run(self, record_id: int) -> CrawlOutcome:
        record = self.store.get(record_id)
        try:
            return self.orchestrator.run_crawl(record)
        except CrawlFailure as e:
            print(f"❌ Crawl error for URL {record_id}: {e}")
            raise

    def start(self, record_id: int) -> "Future[CrawlOutcome]":
        """
        Mark a record running and launch its crawl in the background.

        Args:
            record_id: ID of the URL record

        Returns:
            Future for the crawl; callers are not required to wait on it

        Raises:
            CrawlConflictError: If the record is already running
        """
        with self._lock:
            record = self.store.get(record_id)
            if record.status == CrawlStatus.RUNNING:
                raise CrawlConflictError("URL crawling is already in progress")
            self.store.update_status(record_id, CrawlStatus.RUNNING, "")

        if self.verbose:
            print(f"🕷️  Queued crawl for: {record.url}")

        return self._executor.submit(self._run, record_id)

    def stop(self, record_id: int) -> UrlRecord:
        """
        Mark a running record as queued again.

        Only the visible status changes; a fetch or link check already in flight
        keeps running to completion.

        Raises:
            CrawlConflictError: If the record is not running
        """
        with self._lock:
            record = self.store.get(record_id)
            if record.status != CrawlStatus.RUNNING:
                raise CrawlConflictError("URL is not currently being crawled")
            return self.store.update_status(
                record_id, CrawlStatus.QUEUED, STOPPED_MESSAGE
            )

    def bulk_start(self, record_ids: Iterable[int]) -> List[UrlRecord]:
        """Start every listed record that exists and is not running."""
        started = []
        for record_id in record_ids:
            try:
                self.start(record_id)
            except (CrawlConflictError, KeyError):
                continue
            started.append(self.store.get(record_id))
        return started

    def bulk_stop(self, record_ids: Iterable[int]) -> List[UrlRecord]:
        """Stop every listed record that exists and is running."""
        stopped = []
        for record_id in record_ids:
            try:
                stopped.append(self.stop(record_id))
            except (CrawlConflictError, KeyError):
                continue
        return stopped

    def status_summary(self) -> Dict[str, int]:
        """Count records per status."""
        summary = {status.value: 0 for status in CrawlStatus}
        for record in self.store.all():
            summary[record.status.value] += 1
        return summary

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
