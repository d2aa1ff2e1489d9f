"""
Text-command browsing tool.

Accepts one line of text per call, such as ``open https://example.com``
or ``text pricing``, runs it against a single page session and always
answers with text. Failures are reported as strings, never raised.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum

from search_service.browser.actions import (
    classify_links,
    extract_page_links,
    select_text,
)
from search_service.browser.session import PageProvider, PageSession
from search_service.config.settings import BrowserSettings
from search_service.core.exceptions import (
    NoPageOpenError,
    SearchServiceError,
    UnknownActionError,
)
from search_service.extraction.structurer import structure_html
from search_service.understanding.semantic_filter import SemanticFilter
from search_service.understanding.summarizer import Summarizer
from search_service.utils.logging import get_logger
from search_service.utils.metrics import Metrics


class BrowserAction(str, Enum):
    """Verbs understood by the browsing tool."""

    OPEN = "open"
    SUMMARIZE = "summarize"
    TEXT = "text"
    SELECT = "select"
    PREVIOUS = "previous"
    GET_HTML = "get-html"
    GET_STRUCTURED_URLS = "get-structured-urls"


AVAILABLE_ACTIONS = ", ".join(action.value for action in BrowserAction)

NO_PAGE_MESSAGE = "No page is open, please use the open action first"

TOOL_NAME = "web_browser"

TOOL_DESCRIPTION = """A tool to browse web pages using Playwright.
    IMPORTANT: This tool can only be used ONCE per conversation turn.
    Input should be in the format: 'action params'.
    You must use the 'open' action first before any other action.
    Available actions:
    - open [url]: Open a web page (required first action)
    - summarize [search_text?]: Simple summarize the current page, optionally with a search text.
    - text [search_text?]: Get the content of the current page, optionally with a search text
    - select [selector]: Select content from a specific div
    - previous: Go to the previous page
    - get-html: Get the HTML content of the current page
    - get-structured-urls: Get structured URLs from the current page
    Example usage:
    'open https://example.com'
    Do not chain multiple actions in a single call. Use only one action per tool use.
    After using this tool, you must process the result before considering using it again in the next turn."""


@dataclass(frozen=True)
class ParsedCommand:
    """An action verb and its raw parameter string."""

    action: BrowserAction
    params: str = ""


def parse_command(line: str) -> ParsedCommand:
    """
    Parse one line of tool input.

    The text before the first space is the verb (case-insensitive) and
    the rest, trimmed, is the parameter string. Input without a space
    is either a bare verb or, failing that, a URL to open.

    Args:
        line: Raw tool input

    Returns:
        Parsed command

    Raises:
        UnknownActionError: If a verb followed by parameters is not known
    """
    verb, space, params = line.partition(" ")

    if not space:
        bare = line.strip()
        try:
            return ParsedCommand(BrowserAction(bare.lower()))
        except ValueError:
            return ParsedCommand(BrowserAction.OPEN, bare)

    verb = verb.strip().lower()
    try:
        action = BrowserAction(verb)
    except ValueError:
        raise UnknownActionError(verb) from None
    return ParsedCommand(action, params.strip())


class BrowserActionTool:
    """
    Browsing tool driven by one-line text commands.

    Each instance owns one page session; callers are expected to send
    one command at a time.

    Example:
        >>> async with BrowserActionTool(session, semantic_filter, summarizer) as tool:
        ...     await tool.run("open https://example.com")
        ...     print(await tool.run("text"))
    """

    name = TOOL_NAME
    description = TOOL_DESCRIPTION

    def __init__(
        self,
        session: PageSession,
        semantic_filter: SemanticFilter,
        summarizer: Summarizer,
        metrics: Metrics | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """
        Initialize the tool.

        Args:
            session: Page session owned by this tool
            semantic_filter: Filter applied when a search text is given
            summarizer: Summarizer for the ``summarize`` action
            metrics: Metrics collector for action counts and latency
            logger: Logger to use (defaults to the module logger)
        """
        self.session = session
        self.semantic_filter = semantic_filter
        self.summarizer = summarizer
        self.metrics = metrics or Metrics()
        self.logger = logger or get_logger(__name__)
        self._disposed = False

    @classmethod
    def from_settings(
        cls,
        provider: PageProvider | None,
        settings: BrowserSettings,
        semantic_filter: SemanticFilter,
        summarizer: Summarizer,
        metrics: Metrics | None = None,
        logger: logging.Logger | None = None,
    ) -> "BrowserActionTool":
        """Create a tool with a fresh page session from browser settings."""
        session = PageSession.from_settings(provider, settings, logger=logger)
        return cls(session, semantic_filter, summarizer, metrics=metrics, logger=logger)

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    async def start(self) -> None:
        """Start the idle sweep."""
        if not self._disposed:
            self.session.start_idle_sweep()

    async def dispose(self) -> None:
        """Stop the idle sweep and close the page. Only the first call acts."""
        if self._disposed:
            return
        self._disposed = True

        await self.session.stop_idle_sweep()
        await self.session.close()
        self.logger.debug("Browser tool disposed")

    async def __aenter__(self) -> "BrowserActionTool":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.dispose()

    async def run(self, line: str) -> str:
        """
        Execute one command line.

        Args:
            line: Tool input, e.g. ``"open https://example.com"``

        Returns:
            The action result or a human-readable error; never raises
        """
        self.session.touch()
        self.metrics.increment("browser_actions")

        if self._disposed:
            return "Error: browser tool has been disposed"
        if not self.session.sweep_running:
            self.session.start_idle_sweep()

        try:
            command = parse_command(line)
            self.logger.debug(f"Running {command.action.value} {command.params!r}")
            with self.metrics.timer(f"browser_action_{command.action.value}_ms"):
                return await self._dispatch(command)

        except NoPageOpenError:
            return NO_PAGE_MESSAGE
        except UnknownActionError as e:
            self.metrics.increment("browser_action_errors")
            return f"Unknown action: {e.action}. Available actions: {AVAILABLE_ACTIONS}"
        except Exception as e:
            self.metrics.increment("browser_action_errors")
            self.logger.error(f"Browser action failed: {e}")
            message = e.message if isinstance(e, SearchServiceError) else str(e)
            return f"Error: {message}"

    async def _dispatch(self, command: ParsedCommand) -> str:
        action, params = command.action, command.params

        if action is BrowserAction.OPEN:
            return await self._open(params)
        elif action is BrowserAction.SUMMARIZE:
            return await self._summarize(params)
        elif action is BrowserAction.TEXT:
            return await self._page_text(params)
        elif action is BrowserAction.SELECT:
            return await select_text(self.session.require_page(), params)
        elif action is BrowserAction.PREVIOUS:
            return await self._previous()
        elif action is BrowserAction.GET_HTML:
            return await self.session.require_page().content()
        elif action is BrowserAction.GET_STRUCTURED_URLS:
            return await self._structured_urls()

        raise UnknownActionError(action.value)

    async def _open(self, url: str) -> str:
        await self.session.navigate(url)
        return "Page opened successfully"

    async def _previous(self) -> str:
        await self.session.go_back()
        return "Navigated to previous page"

    async def _page_text(self, search_text: str = "") -> str:
        page = self.session.require_page()
        html = await page.content()
        text = structure_html(html, base_url=page.url)

        if search_text:
            return await self.semantic_filter.filter(text, search_text)
        return text

    async def _summarize(self, search_text: str = "") -> str:
        text = await self._page_text(search_text)
        return await self.summarizer.summarize(text, search_text or None)

    async def _structured_urls(self) -> str:
        page = self.session.require_page()
        links = await extract_page_links(page)
        buckets = classify_links(links, page.url)
        return json.dumps(buckets, indent=2, ensure_ascii=False)

    def __repr__(self) -> str:
        state = "disposed" if self._disposed else ("open" if self.session.is_open else "idle")
        return f"BrowserActionTool({state})"
