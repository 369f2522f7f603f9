"""
Result Store Module

The persistence collaborator the crawl engine reports to. The engine only
depends on the ResultStore interface; InMemoryResultStore backs the CLI
and the tests.
"""

import threading
from typing import Dict, List, Optional, Protocol

from .exceptions import PersistenceError
from .models import CrawlOutcome, CrawlStatus, UrlRecord


class ResultStore(Protocol):
    """Storage for URL records and their crawl outcomes."""

    def add(self, url: str) -> UrlRecord:
        ...

    def get(self, record_id: int) -> UrlRecord:
        ...

    def all(self) -> List[UrlRecord]:
        ...

    def update_status(
        self, record_id: int, status: CrawlStatus, error_message: str = ""
    ) -> UrlRecord:
        ...

    def save_outcome(self, record_id: int, outcome: CrawlOutcome) -> None:
        ...

    def get_outcome(self, record_id: int) -> Optional[CrawlOutcome]:
        ...


class InMemoryResultStore:
    """Thread-safe in-process ResultStore."""

    def __init__(self):
        self._lock = threading.Lock()
        self._records: Dict[int, UrlRecord] = {}
        self._outcomes: Dict[int, List[CrawlOutcome]] = {}
        self._next_id = 1

    def add(self, url: str) -> UrlRecord:
        with self._lock:
            record = UrlRecord(id=self._next_id, url=url)
            self._records[record.id] = record
            self._next_id += 1
            return record

    def get(self, record_id: int) -> UrlRecord:
        with self._lock:
            return self._records[record_id]

    def all(self) -> List[UrlRecord]:
        with self._lock:
            return list(self._records.values())

    def update_status(
        self, record_id: int, status: CrawlStatus, error_message: str = ""
    ) -> UrlRecord:
        with self._lock:
            record = self._records.get(record_id)
            if record is None:
                raise PersistenceError(f"URL record {record_id} not found")
            record.status = status
            record.error_message = error_message
            return record

    def save_outcome(self, record_id: int, outcome: CrawlOutcome) -> None:
        with self._lock:
            if record_id not in self._records:
                raise PersistenceError(f"URL record {record_id} not found")
            self._outcomes.setdefault(record_id, []).append(outcome)

    def get_outcome(self, record_id: int) -> Optional[CrawlOutcome]:
        """Most recent outcome for a record, if any crawl has completed."""
        with self._lock:
            outcomes = self._outcomes.get(record_id)
            return outcomes[-1] if outcomes else None
