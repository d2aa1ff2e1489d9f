"""
Browser module for the search service.

Provides Playwright-based browser automation with:
- Browser lifecycle management
- A single-page session with idle auto-close
- Page actions for link classification and element selection
"""

from search_service.browser.manager import BrowserManager
from search_service.browser.session import PageSession, PageProvider
from search_service.browser.actions import (
    PageLink,
    classify_links,
    extract_page_links,
    select_text,
)

__all__ = [
    "BrowserManager",
    "PageSession",
    "PageProvider",
    "PageLink",
    "classify_links",
    "extract_page_links",
    "select_text",
]
