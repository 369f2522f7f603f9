"""
Link Accessibility Checker Module

Checks a bounded sample of a page's links and reports which ones are
broken. Checking is strictly sequential with a fixed pause between requests
to stay polite toward the servers hosting the links.
"""

import time
from typing import List, Optional

import requests
from requests.models import DEFAULT_REDIRECT_LIMIT

from .fetcher import build_session
from .models import LinkCheckOutcome

DEFAULT_MAX_LINKS = 50
DEFAULT_CHECK_TIMEOUT = 10
DEFAULT_CHECK_DELAY = 0.1
DEFAULT_CHECK_MAX_REDIRECTS = DEFAULT_REDIRECT_LIMIT


class LinkChecker:
    """Checks links for 4xx/5xx responses or unreachability."""

    def __init__(
        self,
        max_links: int = DEFAULT_MAX_LINKS,
        timeout: float = DEFAULT_CHECK_TIMEOUT,
        delay: float = DEFAULT_CHECK_DELAY,
        max_redirects: int = DEFAULT_CHECK_MAX_REDIRECTS,
        verbose: bool = False,
    ):
        """
        Initialize the link checker.

        Args:
            max_links: Maximum number of links checked per page
            timeout: Timeout for each link request in seconds
            delay: Pause between successive link requests in seconds
            max_redirects: Longest redirect chain followed when checking a link
            verbose: Enable verbose logging
        """
        self.max_links = max_links
        self.timeout = timeout
        self.delay = delay
        self.max_redirects = max_redirects
        self.verbose = verbose

    def _check_url(self, session: requests.Session, url: str) -> Optional[int]:
        """
        Request a single URL.

        Tries HEAD first and falls back to GET when the HEAD request itself
        fails. Redirects are followed.

        Returns:
            Final status code, or None if both attempts failed
        """
        try:
            response = session.head(
                url, timeout=self.timeout, allow_redirects=True
            )
            return response.status_code
        except requests.RequestException as e:
            if self.verbose:
                print(f"    ↩️  HEAD failed for {url} ({e}), retrying with GET")

        try:
            response = session.get(
                url, timeout=self.timeout, allow_redirects=True, stream=True
            )
        except requests.RequestException as e:
            if self.verbose:
                print(f"    ❌ Unreachable: {url} ({e})")
            return None

        try:
            return response.status_code
        finally:
            response.close()

    def sample(self, internal_links: List[str], external_links: List[str]) -> List[str]:
        """First max_links entries of internal then external links, duplicates kept."""
        return (list(internal_links) + list(external_links))[: self.max_links]

    def check_broken(
        self, internal_links: List[str], external_links: List[str]
    ) -> LinkCheckOutcome:
        """
        Check the sampled links and collect the broken ones.

        Links beyond the sample are never checked and never reported broken.
        A URL that appears more than once inside the sample is checked once.
        Each call uses its own session, so no cookies or connections carry
        over from one page's check to the next.

        Args:
            internal_links: Internal links in discovery order
            external_links: External links in discovery order

        Returns:
            LinkCheckOutcome with broken URLs and observed status codes
        """
        outcome = LinkCheckOutcome()

        with build_session(self.max_redirects) as session:
            for url in self.sample(internal_links, external_links):
                if url in outcome.status_codes:
                    continue

                if outcome.checked and self.delay:
                    time.sleep(self.delay)

                status_code = self._check_url(session, url)
                outcome.checked.append(url)
                outcome.status_codes[url] = status_code

                if status_code is None or status_code >= 400:
                    outcome.broken.add(url)
                    if self.verbose:
                        print(
                            f"    💔 Broken link ({status_code or 'unreachable'}): {url}"
                        )

        if self.verbose:
            print(
                f"    ✅ Checked {len(outcome.checked)} links, "
                f"{len(outcome.broken)} broken"
            )

        return outcome
