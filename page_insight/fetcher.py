"""
Document Fetcher Module

Issues the single HTTP GET for the page under analysis. Enforces the
request timeout and the redirect limit, and turns every failure into a
FetchError instead of returning partial data.
"""

from http.cookiejar import DefaultCookiePolicy

import requests

from .exceptions import FetchError
from .models import FetchResult

DEFAULT_TIMEOUT = 30
DEFAULT_MAX_REDIRECTS = 10

USER_AGENT = "PageInsight/1.0 (+https://github.com/assessment/page-insight)"


def build_session(max_redirects: int = DEFAULT_MAX_REDIRECTS) -> requests.Session:
    """
    Create a requests session with the default crawler headers.

    The session's cookie jar refuses every cookie, so nothing a server
    sets is ever sent back on a later request.

    Args:
        max_redirects: Longest redirect chain the session will follow

    Returns:
        Configured requests session
    """
    session = requests.Session()
    session.max_redirects = max_redirects
    session.cookies.set_policy(DefaultCookiePolicy(allowed_domains=[]))
    session.headers.update(
        {
            "User-Agent": USER_AGENT,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en-US,en;q=0.5",
            "Accept-Encoding": "gzip, deflate",
            "Connection": "keep-alive",
        }
    )
    return session


class DocumentFetcher:
    """Fetches the raw bytes of a page with one request and no retries."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        max_redirects: int = DEFAULT_MAX_REDIRECTS,
        verbose: bool = False,
    ):
        """
        Initialize the document fetcher.

        Each fetch runs on its own session, so the fetcher holds no
        connection or cookie state between calls.

        Args:
            timeout: Request timeout in seconds
            max_redirects: Maximum redirect chain length
            verbose: Enable verbose logging
        """
        self.timeout = timeout
        self.max_redirects = max_redirects
        self.verbose = verbose

    def fetch(self, url: str) -> FetchResult:
        """
        Fetch a page and return its final status and complete body.

        Args:
            url: Absolute URL to fetch

        Returns:
            FetchResult for the final response after redirects

        Raises:
            FetchError: On network failure, timeout, too many redirects,
                or a final status code of 400 or above
        """
        if self.verbose:
            print(f"  📄 Fetching: {url}")

        with build_session(self.max_redirects) as session:
            try:
                response = session.get(url, timeout=self.timeout)
            except requests.TooManyRedirects:
                raise FetchError("too many redirects")
            except requests.Timeout:
                raise FetchError(f"request timed out after {self.timeout}s")
            except requests.RequestException as e:
                raise FetchError(f"failed to fetch URL: {e}")

        if response.status_code >= 400:
            reason = response.reason or ""
            if self.verbose:
                print(f"    ⚠️  HTTP {response.status_code}: {url}")
            raise FetchError(
                f"HTTP error: {response.status_code} {reason}".strip(),
                status_code=response.status_code,
            )

        return FetchResult(
            status_code=response.status_code,
            body=response.content,
            url=response.url or url,
            content_type=response.headers.get("content-type", "").lower(),
        )
