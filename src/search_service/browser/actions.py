"""
Page-level browser actions used by the browsing tool.

Evaluation against the live page is kept thin; the link classification
itself is a pure function so it can be tested without a browser.
"""

from dataclasses import dataclass
from urllib.parse import urlparse

from playwright.async_api import Page

# Bucket names, in output order
SEARCH = "search"
NAVIGATION = "navigation"
EXTERNAL = "external"
OTHER = "other"

LINK_BUCKETS = (SEARCH, NAVIGATION, EXTERNAL, OTHER)

_COLLECT_LINKS_JS = """
    () => Array.from(document.querySelectorAll('a')).map(a => ({
        url: a.href || '',
        text: (a.textContent || '').trim(),
        inNavigation: !!(a.closest('nav') || a.matches('header a, footer a'))
    }))
"""


@dataclass
class PageLink:
    """A hyperlink found on a page."""

    url: str  # Absolute, as resolved by the browser
    text: str
    in_navigation: bool = False  # Inside nav, header or footer

    def describe(self) -> str:
        return f"{self.text}: {self.url}"


async def extract_page_links(page: Page) -> list[PageLink]:
    """
    Collect every anchor on the page in document order.

    Args:
        page: Playwright Page instance

    Returns:
        One PageLink per ``<a>`` element, including ones without href
    """
    links_data = await page.evaluate(_COLLECT_LINKS_JS)

    return [
        PageLink(
            url=link["url"],
            text=link["text"],
            in_navigation=bool(link["inNavigation"]),
        )
        for link in links_data or []
    ]


def is_search_link(url: str) -> bool:
    """Whether a URL looks like a search: path mentions search or query has q=."""
    parsed = urlparse(url)
    return "search" in parsed.path or "q=" in parsed.query


def classify_links(links: list[PageLink], page_url: str) -> dict[str, list[str]]:
    """
    Sort links into search, navigation, external and other buckets.

    Same-host links go to ``search`` when they look like a search,
    else to ``navigation`` when they sit in a navigation landmark,
    else to ``other``. Links to any other host are ``external``.
    Links without a URL are skipped.

    Args:
        links: Links in document order
        page_url: URL of the page the links were found on

    Returns:
        Mapping of bucket name to ``"text: url"`` strings, in document order
    """
    buckets: dict[str, list[str]] = {name: [] for name in LINK_BUCKETS}
    current_host = urlparse(page_url).hostname

    for link in links:
        if not link.url:
            continue

        if urlparse(link.url).hostname != current_host:
            buckets[EXTERNAL].append(link.describe())
        elif is_search_link(link.url):
            buckets[SEARCH].append(link.describe())
        elif link.in_navigation:
            buckets[NAVIGATION].append(link.describe())
        else:
            buckets[OTHER].append(link.describe())

    return buckets


async def select_text(page: Page, selector: str) -> str:
    """
    Text content of the first element matching a CSS selector.

    Args:
        page: Playwright Page instance
        selector: CSS selector

    Returns:
        The element's text, ``"Element not found"`` when nothing matches,
        or ``"No content found"`` when the element has no text
    """
    element = await page.query_selector(selector)
    if element is None:
        return "Element not found"

    content = await element.text_content()
    return content or "No content found"
