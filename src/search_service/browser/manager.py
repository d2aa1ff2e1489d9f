"""
Browser lifecycle management using Playwright.

Handles browser instance creation, configuration, and cleanup.
Supports chromium, firefox, and webkit engines.
"""

import logging

from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Page,
    Playwright,
)

from search_service.config.settings import BrowserSettings
from search_service.core.exceptions import BrowserError, BrowserUnavailableError
from search_service.utils.logging import get_logger


class BrowserManager:
    """
    Manages the Playwright browser shared by every page session.

    The browser is launched lazily by the first ``new_page()`` call, so
    constructing a manager is cheap and needs no running event loop.

    Example:
        >>> async with BrowserManager(settings.browser) as manager:
        ...     page = await manager.new_page()
        ...     await page.goto("https://example.com")
    """

    def __init__(
        self,
        settings: BrowserSettings,
        logger: logging.Logger | None = None,
    ) -> None:
        """
        Initialize browser manager with configuration.

        Args:
            settings: Browser configuration from app settings
            logger: Logger to use (defaults to the module logger)
        """
        self.settings = settings
        self.logger = logger or get_logger(__name__)
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None

    async def start(self) -> None:
        """
        Start Playwright and launch browser.

        Raises:
            BrowserUnavailableError: If browser fails to launch
        """
        if self._browser is not None:
            return

        try:
            self.logger.info(
                f"Starting {self.settings.browser_type} browser "
                f"(headless={self.settings.headless})"
            )

            self._playwright = await async_playwright().start()
            browser_type = getattr(self._playwright, self.settings.browser_type)
            self._browser = await browser_type.launch(
                headless=self.settings.headless,
            )

            self.logger.info("Browser started successfully")

        except Exception as e:
            await self._cleanup()
            raise BrowserUnavailableError(
                f"Failed to launch browser: {e}",
                details={"browser_type": self.settings.browser_type},
            ) from e

    async def stop(self) -> None:
        """
        Stop browser and cleanup Playwright resources.

        Safe to call multiple times.
        """
        await self._cleanup()
        self.logger.info("Browser stopped")

    async def _cleanup(self) -> None:
        """Internal cleanup of browser resources."""
        if self._context is not None:
            try:
                await self._context.close()
            except Exception as e:
                self.logger.warning(f"Error closing browser context: {e}")
            self._context = None

        if self._browser is not None:
            try:
                await self._browser.close()
            except Exception as e:
                self.logger.warning(f"Error closing browser: {e}")
            self._browser = None

        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except Exception as e:
                self.logger.warning(f"Error stopping Playwright: {e}")
            self._playwright = None

    async def _ensure_context(self) -> BrowserContext:
        """Launch the browser and create the shared context if needed."""
        await self.start()

        if self._context is not None:
            return self._context

        try:
            context_options: dict = {
                "viewport": {
                    "width": self.settings.viewport_width,
                    "height": self.settings.viewport_height,
                },
                "ignore_https_errors": self.settings.ignore_https_errors,
            }

            if self.settings.user_agent:
                context_options["user_agent"] = self.settings.user_agent

            self._context = await self._browser.new_context(**context_options)
            self._context.set_default_navigation_timeout(
                self.settings.action_timeout_ms)

            self.logger.debug("Created browser context")
            return self._context

        except Exception as e:
            raise BrowserError(f"Failed to create browser context: {e}") from e

    async def new_page(self) -> Page:
        """
        Open a new page (tab) in the shared context.

        Returns:
            A fresh Playwright Page

        Raises:
            BrowserUnavailableError: If the browser cannot be launched
            BrowserError: If the page cannot be created
        """
        context = await self._ensure_context()
        try:
            return await context.new_page()
        except Exception as e:
            raise BrowserError(f"Failed to open page: {e}") from e

    @property
    def is_running(self) -> bool:
        """Check if browser is currently running."""
        return self._browser is not None and self._browser.is_connected()

    async def __aenter__(self) -> "BrowserManager":
        """Async context manager entry."""
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit with cleanup."""
        await self.stop()
