#!/usr/bin/env python3
"""
Page Insight - Main Entry Point

A tool for analyzing a single web page: HTML version, title, headings,
internal/external and broken links, and login-form presence.
"""

from page_insight.cli import main


if __name__ == "__main__":
    main()
