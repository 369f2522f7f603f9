"""
Tests for the Document Fetcher module.
"""

from unittest.mock import Mock, patch

import pytest
import requests

from page_insight.exceptions import FetchError
from page_insight.fetcher import DocumentFetcher, build_session


class TestBuildSession:
    """Test cases for the session factory."""

    def test_defaults(self):
        session = build_session()
        assert session.max_redirects == 10
        assert "PageInsight" in session.headers["User-Agent"]

    def test_custom_redirect_limit(self):
        assert build_session(3).max_redirects == 3

    def test_cookie_jar_refuses_cookies(self):
        """Test the jar policy accepts no domain at all."""
        policy = build_session().cookies.get_policy()
        assert policy.allowed_domains() == ()
        assert policy.is_blocked("example.com") is False
        assert policy.is_not_allowed("example.com") is True

    def test_sessions_are_independent(self):
        first = build_session()
        second = build_session()
        first.cookies.set("sid", "abc", domain="example.com")
        assert first is not second
        assert len(second.cookies) == 0


def _response(status_code=200, content=b"<html></html>", url="https://example.com/"):
    response = Mock()
    response.status_code = status_code
    response.content = content
    response.url = url
    response.reason = "OK" if status_code < 400 else "Not Found"
    response.headers = {"content-type": "text/html; charset=utf-8"}
    return response


class TestDocumentFetcher:
    """Test cases for DocumentFetcher class."""

    def setup_method(self):
        """Set up test fixtures."""
        self.fetcher = DocumentFetcher()

    def test_init_defaults(self):
        """Test the default timeout and redirect limit."""
        assert self.fetcher.timeout == 30
        assert self.fetcher.max_redirects == 10

    def test_init_custom(self):
        fetcher = DocumentFetcher(timeout=5, max_redirects=3, verbose=True)
        assert fetcher.timeout == 5
        assert fetcher.max_redirects == 3
        assert fetcher.verbose is True

    @patch("page_insight.fetcher.requests.Session.get")
    def test_fetch_success(self, mock_get):
        """Test a successful fetch returns the full body and final status."""
        mock_get.return_value = _response(
            content=b"<title>Test Page</title>", url="https://example.com/final"
        )

        result = self.fetcher.fetch("https://example.com/start")

        assert result.status_code == 200
        assert result.body == b"<title>Test Page</title>"
        assert result.url == "https://example.com/final"
        assert "text/html" in result.content_type
        mock_get.assert_called_once_with("https://example.com/start", timeout=30)

    @patch("page_insight.fetcher.requests.Session.get")
    def test_fetch_redirect_status_is_success(self, mock_get):
        """Test a final 3xx status below 400 is not a failure."""
        mock_get.return_value = _response(status_code=304, content=b"")

        result = self.fetcher.fetch("https://example.com/")

        assert result.status_code == 304

    @patch("page_insight.fetcher.requests.Session.get")
    def test_fetch_http_error(self, mock_get):
        """Test a 404 response becomes a FetchError carrying the status."""
        mock_get.return_value = _response(status_code=404)

        with pytest.raises(FetchError) as exc_info:
            self.fetcher.fetch("https://example.com/missing")

        assert exc_info.value.status_code == 404
        assert str(exc_info.value) == "HTTP error: 404 Not Found"

    @patch("page_insight.fetcher.requests.Session.get")
    def test_fetch_server_error(self, mock_get):
        mock_get.return_value = _response(status_code=503)

        with pytest.raises(FetchError) as exc_info:
            self.fetcher.fetch("https://example.com/")

        assert exc_info.value.status_code == 503

    @patch("page_insight.fetcher.requests.Session.get")
    def test_fetch_too_many_redirects(self, mock_get):
        mock_get.side_effect = requests.TooManyRedirects("Exceeded 10 redirects.")

        with pytest.raises(FetchError) as exc_info:
            self.fetcher.fetch("https://example.com/loop")

        assert exc_info.value.reason == "too many redirects"
        assert exc_info.value.status_code is None

    @patch("page_insight.fetcher.requests.Session.get")
    def test_fetch_timeout(self, mock_get):
        mock_get.side_effect = requests.ReadTimeout("read timed out")

        with pytest.raises(FetchError) as exc_info:
            self.fetcher.fetch("https://example.com/slow")

        assert "timed out" in exc_info.value.reason

    @patch("page_insight.fetcher.requests.Session.get")
    def test_fetch_network_error(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("Name or service not known")

        with pytest.raises(FetchError) as exc_info:
            self.fetcher.fetch("https://nowhere.invalid/")

        assert exc_info.value.reason.startswith("failed to fetch URL:")
        assert "Name or service not known" in exc_info.value.reason

    @patch("page_insight.fetcher.requests.Session.get", autospec=True)
    def test_each_fetch_uses_new_session(self, mock_get):
        """Test no session carries over from one fetch to the next."""
        mock_get.return_value = _response()

        self.fetcher.fetch("https://example.com/one")
        self.fetcher.fetch("https://example.com/two")

        first_session = mock_get.call_args_list[0][0][0]
        second_session = mock_get.call_args_list[1][0][0]
        assert first_session is not second_session
        assert first_session.max_redirects == 10
