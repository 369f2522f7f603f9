"""
Page Insight Package

Fetches a single web page and reports its structure: HTML version, title,
heading counts, internal/external links, broken links and login forms.
"""

__version__ = "1.0.0"
__author__ = "Assessment Project"
__description__ = "Single-page structure and link health analyzer"
