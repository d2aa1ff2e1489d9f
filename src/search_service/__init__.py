"""
Search service - a text-command web browsing tool.

Opens pages in a headless browser, renders them as Markdown-like text,
filters that text by relevance to a query and summarizes it with a
language model.
"""

__version__ = "0.1.0"

from search_service.config import Settings, load_config
from search_service.utils.logging import setup_logging, get_logger
from search_service.core.exceptions import SearchServiceError
from search_service.tools import BrowserAction, BrowserActionTool, parse_command
from search_service.plugin import SearchServicePlugin

__all__ = [
    "Settings",
    "load_config",
    "setup_logging",
    "get_logger",
    "SearchServiceError",
    "BrowserAction",
    "BrowserActionTool",
    "parse_command",
    "SearchServicePlugin",
]
