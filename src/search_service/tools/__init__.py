"""
Tools module for the search service.

Provides the text-command browsing tool.
"""

from search_service.tools.browser_tool import (
    BrowserAction,
    BrowserActionTool,
    ParsedCommand,
    parse_command,
    AVAILABLE_ACTIONS,
    NO_PAGE_MESSAGE,
)

__all__ = [
    "BrowserAction",
    "BrowserActionTool",
    "ParsedCommand",
    "parse_command",
    "AVAILABLE_ACTIONS",
    "NO_PAGE_MESSAGE",
]
