"""
Tests for the text-command browsing tool.

The tool is driven through ``run`` against a mocked Playwright page.
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from search_service.core.exceptions import UnknownActionError
from search_service.tools import (
    AVAILABLE_ACTIONS,
    NO_PAGE_MESSAGE,
    BrowserAction,
    BrowserActionTool,
    ParsedCommand,
    parse_command,
)


class TestParseCommand:
    """Tests for command line parsing."""

    def test_verb_and_params(self):
        assert parse_command("open https://example.com") == ParsedCommand(
            BrowserAction.OPEN, "https://example.com")

    def test_verb_is_case_insensitive(self):
        assert parse_command("TEXT pricing").action is BrowserAction.TEXT

    def test_params_are_trimmed(self):
        assert parse_command("select   #main  ").params == "#main"

    def test_params_keep_inner_spaces(self):
        assert parse_command("summarize solar panel cost").params == "solar panel cost"

    @pytest.mark.parametrize("verb", [action.value for action in BrowserAction])
    def test_bare_verb(self, verb: str):
        assert parse_command(verb) == ParsedCommand(BrowserAction(verb), "")

    def test_bare_url_defaults_to_open(self):
        assert parse_command("https://example.com") == ParsedCommand(
            BrowserAction.OPEN, "https://example.com")

    def test_unknown_verb_with_params(self):
        with pytest.raises(UnknownActionError) as exc_info:
            parse_command("Bogus foo")

        assert exc_info.value.action == "bogus"

    def test_available_actions_lists_every_verb(self):
        assert AVAILABLE_ACTIONS == (
            "open, summarize, text, select, previous, get-html, get-structured-urls")


class TestOpen:
    """Tests for the open action."""

    @pytest.mark.asyncio
    async def test_open_navigates(self, browser_tool: BrowserActionTool, mock_page):
        result = await browser_tool.run("open https://example.com")

        assert result == "Page opened successfully"
        mock_page.goto.assert_awaited_once_with(
            "https://example.com", wait_until="networkidle", timeout=5000)

    @pytest.mark.asyncio
    async def test_bare_url_is_open(self, browser_tool: BrowserActionTool, mock_page):
        result = await browser_tool.run("https://example.com")

        assert result == "Page opened successfully"
        assert mock_page.goto.await_args.args[0] == "https://example.com"

    @pytest.mark.asyncio
    async def test_open_timeout_is_error_text(self, browser_tool: BrowserActionTool, mock_page):
        mock_page.goto.side_effect = PlaywrightTimeoutError("Timeout 5000ms exceeded")

        result = await browser_tool.run("open https://slow.example.com")

        assert result == "Error: Navigation to https://slow.example.com timed out after 5000ms"

    @pytest.mark.asyncio
    async def test_open_without_browser(self, browser_tool: BrowserActionTool):
        browser_tool.session.provider = None

        result = await browser_tool.run("open https://example.com")

        assert result == "Error: Browser service is not available"


class TestPageRequired:
    """Every verb except open needs a page."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "line",
        ["summarize", "text", "text pricing", "select #main", "previous",
         "get-html", "get-structured-urls"],
    )
    async def test_advisory_before_open(self, browser_tool: BrowserActionTool, line: str):
        assert await browser_tool.run(line) == NO_PAGE_MESSAGE

    @pytest.mark.asyncio
    async def test_summarize_before_open_skips_model(self, browser_tool, completion_model):
        await browser_tool.run("summarize")
        assert completion_model.prompts == []


class TestUnknownAction:
    """Tests for unknown verbs."""

    @pytest.mark.asyncio
    async def test_lists_all_verbs(self, browser_tool: BrowserActionTool):
        result = await browser_tool.run("bogus foo")

        assert result.startswith("Unknown action: bogus.")
        for action in BrowserAction:
            assert action.value in result

    @pytest.mark.asyncio
    async def test_does_not_open_page(self, browser_tool: BrowserActionTool, page_provider):
        await browser_tool.run("bogus foo")

        assert page_provider.pages_created == 0
        assert not browser_tool.session.is_open

    @pytest.mark.asyncio
    async def test_touches_idle_timestamp(self, browser_tool: BrowserActionTool, clock):
        clock.advance(42)

        await browser_tool.run("bogus foo")

        assert browser_tool.session.last_action_time == clock.now


class TestPageActions:
    """Tests for actions on an open page."""

    @pytest_asyncio.fixture
    async def opened(self, browser_tool: BrowserActionTool) -> BrowserActionTool:
        assert await browser_tool.run("open https://example.com/start") == "Page opened successfully"
        return browser_tool

    @pytest.mark.asyncio
    async def test_text(self, opened: BrowserActionTool):
        result = await opened.run("text")

        assert "#  Welcome" in result
        assert "[docs](https://example.com/docs)" in result

    @pytest.mark.asyncio
    async def test_text_with_search_filters(self, opened: BrowserActionTool, mock_page, embedder):
        paragraphs = [f"<p>{word} " * 30 + "</p>" for word in ("apple", "banana", "cherry", "grape")]
        mock_page.content.return_value = f"<body>{''.join(paragraphs)}</body>"

        result = await opened.run("text banana")

        assert "banana" in result
        assert "cherry" not in result or result.index("banana") < result.index("cherry")
        # Chunks plus the query went through the embedder
        assert embedder.calls[-1][-1] == "banana"

    @pytest.mark.asyncio
    async def test_summarize_uses_model(self, opened: BrowserActionTool, completion_model):
        result = await opened.run("summarize")

        assert result == "A short summary."
        assert "Welcome" in completion_model.prompts[0]
        assert "with a focus on" not in completion_model.prompts[0]

    @pytest.mark.asyncio
    async def test_summarize_with_focus(self, opened: BrowserActionTool, completion_model):
        await opened.run("summarize products")

        assert 'with a focus on "products"' in completion_model.prompts[0]

    @pytest.mark.asyncio
    async def test_summarize_failure_is_error_text(self, opened: BrowserActionTool, completion_model):
        completion_model.error = RuntimeError("model offline")

        result = await opened.run("summarize")

        assert result == "Error: failed to summarize text: model offline"

    @pytest.mark.asyncio
    async def test_select_found(self, opened: BrowserActionTool, mock_page):
        element = MagicMock()
        element.text_content = AsyncMock(return_value="Main content")
        mock_page.query_selector.return_value = element

        assert await opened.run("select #main") == "Main content"
        mock_page.query_selector.assert_awaited_once_with("#main")

    @pytest.mark.asyncio
    async def test_select_missing(self, opened: BrowserActionTool):
        assert await opened.run("select #missing") == "Element not found"

    @pytest.mark.asyncio
    async def test_select_empty(self, opened: BrowserActionTool, mock_page):
        element = MagicMock()
        element.text_content = AsyncMock(return_value="")
        mock_page.query_selector.return_value = element

        assert await opened.run("select #empty") == "No content found"

    @pytest.mark.asyncio
    async def test_previous(self, opened: BrowserActionTool, mock_page):
        assert await opened.run("previous") == "Navigated to previous page"
        mock_page.go_back.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_get_html(self, opened: BrowserActionTool, sample_html: str):
        assert await opened.run("get-html") == sample_html

    @pytest.mark.asyncio
    async def test_get_html_failure(self, opened: BrowserActionTool, mock_page):
        mock_page.content.side_effect = RuntimeError("Target closed")

        assert await opened.run("get-html") == "Error: Target closed"

    @pytest.mark.asyncio
    async def test_get_structured_urls(self, opened: BrowserActionTool, mock_page):
        mock_page.evaluate.return_value = [
            {"url": "https://example.com/find?q=term", "text": "Find", "inNavigation": False},
            {"url": "https://example.com/about", "text": "About", "inNavigation": True},
            {"url": "https://other.org/", "text": "Other", "inNavigation": False},
            {"url": "https://example.com/post", "text": "Post", "inNavigation": False},
        ]

        result = json.loads(await opened.run("get-structured-urls"))

        assert list(result) == ["search", "navigation", "external", "other"]
        assert result["search"] == ["Find: https://example.com/find?q=term"]
        assert result["navigation"] == ["About: https://example.com/about"]
        assert result["external"] == ["Other: https://other.org/"]
        assert result["other"] == ["Post: https://example.com/post"]


class TestLifecycle:
    """Tests for start, dispose and the idle sweep."""

    @pytest.mark.asyncio
    async def test_run_starts_idle_sweep(self, browser_tool: BrowserActionTool):
        await browser_tool.run("text")
        assert browser_tool.session.sweep_running

    @pytest.mark.asyncio
    async def test_dispose_closes_page_once(self, browser_tool: BrowserActionTool, mock_page):
        await browser_tool.run("open https://example.com")

        await browser_tool.dispose()
        await browser_tool.dispose()

        mock_page.close.assert_awaited_once()
        assert not browser_tool.session.sweep_running
        assert browser_tool.is_disposed

    @pytest.mark.asyncio
    async def test_run_after_dispose(self, browser_tool: BrowserActionTool):
        await browser_tool.dispose()

        assert await browser_tool.run("open https://example.com") == (
            "Error: browser tool has been disposed")

    @pytest.mark.asyncio
    async def test_idle_page_requires_reopen(self, browser_tool: BrowserActionTool, clock):
        await browser_tool.run("open https://example.com")
        clock.advance(61)

        assert await browser_tool.session.sweep_idle() is True
        assert await browser_tool.run("text") == NO_PAGE_MESSAGE

    @pytest.mark.asyncio
    async def test_metrics_are_recorded(self, browser_tool: BrowserActionTool):
        await browser_tool.run("open https://example.com")
        await browser_tool.run("bogus foo")

        assert browser_tool.metrics.get_counter("browser_actions") == 2
        assert browser_tool.metrics.get_counter("browser_action_errors") == 1
        assert browser_tool.metrics.get_timing("browser_action_open_ms").count == 1

    def test_tool_identity(self):
        assert BrowserActionTool.name == "web_browser"
        assert "get-structured-urls" in BrowserActionTool.description
