"""
Link Resolver/Classifier Module

Resolves anchor hrefs against the page URL and sorts them into internal
and external links.
"""

from typing import Optional, Tuple
from urllib.parse import urljoin, urlparse

from .models import LinkType


def _host(netloc: str) -> str:
    """Strip any userinfo from a network location, keeping host and port."""
    return netloc.rpartition("@")[2].lower()


def is_ignored_href(href: str) -> bool:
    """
    Check if an href should be skipped entirely.

    Empty hrefs, fragment-only hrefs and javascript: pseudo-links are
    neither internal nor external and are never counted.
    """
    if not href:
        return True
    if href.startswith("#"):
        return True
    return href.lower().startswith("javascript:")


def classify_link(href: str, base_url: str) -> Optional[Tuple[LinkType, str]]:
    """
    Resolve an href and classify it as internal or external.

    Args:
        href: Raw href attribute value
        base_url: Absolute URL of the page the href was found on

    Returns:
        (link type, absolute URL), or None if the href is ignored or
        cannot be parsed
    """
    if href is None:
        return None
    href = href.strip()
    if is_ignored_href(href):
        return None

    try:
        resolved = urljoin(base_url, href)
        resolved_host = _host(urlparse(resolved).netloc)
        base_host = _host(urlparse(base_url).netloc)
    except ValueError:
        # Malformed hrefs are dropped rather than counted as broken
        return None

    if resolved_host == base_host or resolved_host == "":
        return LinkType.INTERNAL, resolved
    return LinkType.EXTERNAL, resolved
