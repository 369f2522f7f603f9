"""
Markup Analyzer Module

Parses a fetched page and walks its tree once, collecting the title,
heading counts, classified anchor links and login-form presence. Also
holds the login-form heuristic and the doctype-based HTML version check.
"""

import re
from typing import Union

from bs4 import BeautifulSoup, Tag

from .link_classifier import classify_link
from .models import AnalysisData, HEADING_LEVELS, LinkType

IDENTIFIER_NAME_HINTS = ("user", "email", "login")

_DOCTYPE_HTML_RE = re.compile(r"<!doctype\s+html")


def _decode(body: Union[bytes, str]) -> str:
    if isinstance(body, bytes):
        return body.decode("utf-8", errors="replace")
    return body


def _attr(tag: Tag, name: str) -> str:
    """Return an attribute as a lower-cased string ("" when missing)."""
    value = tag.get(name)
    if value is None:
        return ""
    if isinstance(value, list):
        value = " ".join(value)
    return value.lower()


def is_login_form(form: Tag) -> bool:
    """
    Decide whether a form looks like a login form.

    A form qualifies only when it has a password input AND an
    identifier-like input (name containing user/email/login, or
    type=email). A lone password field, as in a change-password form,
    does not count.

    Args:
        form: The <form> element

    Returns:
        True if both signals are present among the form's descendant inputs
    """
    has_password = False
    has_identifier = False

    for field in form.find_all("input"):
        input_type = _attr(field, "type")
        input_name = _attr(field, "name")

        if input_type == "password":
            has_password = True

        if input_type == "email" or any(
            hint in input_name for hint in IDENTIFIER_NAME_HINTS
        ):
            has_identifier = True

    return has_password and has_identifier


def detect_html_version(raw_body: Union[bytes, str]) -> str:
    """
    Detect the HTML version from doctype markers in the raw document text.

    This is a plain text scan, so a doctype-like string anywhere in the
    document counts.

    Args:
        raw_body: Undecoded or decoded page content

    Returns:
        Version label: HTML5, HTML 4.01, XHTML 1.0, XHTML 1.1, HTML or Unknown
    """
    content = _decode(raw_body).lower()

    if "<!doctype html>" in content:
        return "HTML5"
    if "html 4.01" in content:
        return "HTML 4.01"
    if "xhtml 1.0" in content:
        return "XHTML 1.0"
    if "xhtml 1.1" in content:
        return "XHTML 1.1"
    if _DOCTYPE_HTML_RE.search(content):
        return "HTML"
    return "Unknown"


class MarkupAnalyzer:
    """Extracts structural metadata from a page in a single tree walk."""

    def __init__(self, parser: str = "html.parser", verbose: bool = False):
        """
        Initialize the markup analyzer.

        Args:
            parser: BeautifulSoup tree builder to use
            verbose: Enable verbose logging
        """
        self.parser = parser
        self.verbose = verbose

    def analyze(self, body: Union[bytes, str], base_url: str) -> AnalysisData:
        """
        Analyze page content.

        Never fails: missing elements leave the defaults in place.

        Args:
            body: Raw page content
            base_url: URL the page was requested from, for link resolution

        Returns:
            Filled AnalysisData for this page
        """
        content = _decode(body)
        data = AnalysisData()

        soup = BeautifulSoup(content, self.parser)
        title_seen = False

        for node in soup.descendants:
            if not isinstance(node, Tag):
                continue

            name = node.name.lower()

            if name == "title":
                if not title_seen:
                    data.title = node.get_text().strip()
                    title_seen = True
            elif name in HEADING_LEVELS:
                data.heading_counts[name] += 1
            elif name == "a":
                self._add_link(node, data, base_url)
            elif name == "form":
                if is_login_form(node):
                    data.has_login_form = True

        data.html_version = detect_html_version(content)

        if self.verbose:
            print(
                f"    🔗 Found {len(data.internal_links)} internal + "
                f"{len(data.external_links)} external links"
            )

        return data

    def _add_link(self, anchor: Tag, data: AnalysisData, base_url: str) -> None:
        href = anchor.get("href")
        if href is None:
            return

        classified = classify_link(href, base_url)
        if classified is None:
            return

        link_type, url = classified
        if link_type is LinkType.INTERNAL:
            data.internal_links.append(url)
        else:
            data.external_links.append(url)
