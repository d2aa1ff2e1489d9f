"""
Service entry point wiring browser, models and per-conversation tools.

One SearchServicePlugin shares a browser, an embedding model and a
completion model between any number of conversations. Every
conversation gets its own BrowserActionTool, and so its own page.
"""

import logging

from search_service.browser.manager import BrowserManager
from search_service.browser.session import PageProvider
from search_service.config import Settings
from search_service.core.exceptions import SearchServiceError
from search_service.embeddings.embedder import Embedder, EmbeddingModel
from search_service.llm.base import CompletionModel, create_completion_model
from search_service.tools.browser_tool import BrowserActionTool
from search_service.understanding.semantic_filter import SemanticFilter
from search_service.understanding.summarizer import Summarizer
from search_service.utils.lock import AsyncTicketLock
from search_service.utils.logging import get_logger
from search_service.utils.metrics import Metrics


class SearchServicePlugin:
    """
    Owns the shared collaborators and the per-conversation tools.

    Collaborators not passed in are built from settings; only those are
    shut down by ``dispose()``.

    Example:
        >>> plugin = SearchServicePlugin(load_config())
        >>> tool = await plugin.tool_for("conversation-1")
        >>> print(await tool.run("open https://example.com"))
        >>> await plugin.dispose()
    """

    def __init__(
        self,
        settings: Settings,
        embedder: EmbeddingModel | None = None,
        model: CompletionModel | None = None,
        browser: PageProvider | None = None,
        metrics: Metrics | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """
        Initialize the plugin.

        Args:
            settings: Application settings
            embedder: Embedding model (built from settings when None)
            model: Completion model (built from settings when None)
            browser: Page provider (a BrowserManager when None)
            metrics: Metrics shared by every tool
            logger: Logger to use (defaults to the module logger)
        """
        self.settings = settings
        self.logger = logger or get_logger(__name__)
        self.metrics = metrics or Metrics()

        self._owns_browser = browser is None
        self.browser = browser or BrowserManager(settings.browser, logger=logger)

        self.embedder = embedder or Embedder.from_settings(settings.embedding, logger=logger)

        self._owns_model = model is None
        self.model = model or create_completion_model(settings, metrics=self.metrics, logger=logger)

        self.semantic_filter = SemanticFilter.from_settings(
            self.embedder, settings.filter, logger=logger)
        self.summarizer = Summarizer(self.model, logger=logger)

        self._lock = AsyncTicketLock.from_settings(settings.lock, logger=logger)
        self._tools: dict[str, BrowserActionTool] = {}
        self._disposed = False

    @property
    def conversations(self) -> list[str]:
        """Ids of conversations that currently have a tool."""
        return list(self._tools)

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def create_browser_tool(self) -> BrowserActionTool:
        """Build a new tool with its own page session."""
        return BrowserActionTool.from_settings(
            self.browser,
            self.settings.browser,
            semantic_filter=self.semantic_filter,
            summarizer=self.summarizer,
            metrics=self.metrics,
            logger=self.logger,
        )

    async def tool_for(self, conversation_id: str) -> BrowserActionTool:
        """
        Return the conversation's tool, creating it on first use.

        Raises:
            SearchServiceError: If the plugin has been disposed
        """
        async with self._lock.hold():
            if self._disposed:
                raise SearchServiceError("Search service has been disposed")

            tool = self._tools.get(conversation_id)
            if tool is None:
                tool = self.create_browser_tool()
                await tool.start()
                self._tools[conversation_id] = tool
                self.logger.debug(f"Created browser tool for {conversation_id}")
            return tool

    async def release(self, conversation_id: str) -> bool:
        """
        Dispose and forget one conversation's tool.

        Returns:
            True if the conversation had a tool
        """
        async with self._lock.hold():
            tool = self._tools.pop(conversation_id, None)

        if tool is None:
            return False
        await tool.dispose()
        return True

    async def dispose(self) -> None:
        """Dispose every tool, then shut down owned collaborators. Only the first call acts."""
        async with self._lock.hold():
            if self._disposed:
                return
            self._disposed = True
            tools, self._tools = list(self._tools.values()), {}

        for tool in tools:
            await tool.dispose()

        if self._owns_browser:
            await self.browser.stop()
        if self._owns_model and hasattr(self.model, "aclose"):
            await self.model.aclose()

        self.logger.info(f"Search service disposed ({len(tools)} tools)")

    async def __aenter__(self) -> "SearchServicePlugin":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.dispose()
