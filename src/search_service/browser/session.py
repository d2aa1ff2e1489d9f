"""
Single-page browser session with idle auto-close.

A PageSession owns at most one Playwright page. The page is created
lazily on first navigation and closed again by a background sweep once
no action has touched the session for the configured idle window.
"""

import asyncio
import logging
import time
from contextlib import suppress
from typing import Callable, Protocol

from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from search_service.config.settings import BrowserSettings
from search_service.core.exceptions import (
    BrowserError,
    BrowserUnavailableError,
    NavigationError,
    NavigationTimeoutError,
    NoPageOpenError,
)
from search_service.utils.logging import get_logger

# Playwright's equivalent of "network settled"
SETTLE_STATE = "networkidle"


class PageProvider(Protocol):
    """Anything that can hand out a fresh browser page."""

    async def new_page(self) -> Page: ...


class PageSession:
    """
    Owns one browser page and its navigation and idle lifecycle.

    Example:
        >>> session = PageSession.from_settings(browser_manager, settings.browser)
        >>> session.start_idle_sweep()
        >>> await session.navigate("https://example.com")
        >>> html = await session.require_page().content()
        >>> await session.stop_idle_sweep()
        >>> await session.close()
    """

    def __init__(
        self,
        provider: PageProvider | None,
        action_timeout_ms: int = 60000,
        idle_timeout_ms: int = 300000,
        idle_check_interval_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
        logger: logging.Logger | None = None,
    ) -> None:
        """
        Initialize the session.

        Args:
            provider: Source of browser pages; None means no browser
            action_timeout_ms: Default timeout for navigation
            idle_timeout_ms: Inactivity window before auto-close
            idle_check_interval_seconds: Period of the idle sweep
            clock: Monotonic clock in seconds
            logger: Logger to use (defaults to the module logger)
        """
        self.provider = provider
        self.action_timeout_ms = action_timeout_ms
        self.idle_timeout_ms = idle_timeout_ms
        self.idle_check_interval_seconds = idle_check_interval_seconds
        self.clock = clock
        self.logger = logger or get_logger(__name__)

        self._page: Page | None = None
        self._last_action_time = clock()
        self._sweep_task: asyncio.Task | None = None

    @classmethod
    def from_settings(
        cls,
        provider: PageProvider | None,
        settings: BrowserSettings,
        logger: logging.Logger | None = None,
    ) -> "PageSession":
        """Create a session from browser settings."""
        return cls(
            provider,
            action_timeout_ms=settings.action_timeout_ms,
            idle_timeout_ms=settings.idle_timeout_ms,
            idle_check_interval_seconds=settings.idle_check_interval_seconds,
            logger=logger,
        )

    @property
    def page(self) -> Page | None:
        """The owned page, or None when closed."""
        return self._page

    @property
    def is_open(self) -> bool:
        return self._page is not None

    @property
    def current_url(self) -> str | None:
        return self._page.url if self._page is not None else None

    @property
    def last_action_time(self) -> float:
        return self._last_action_time

    def touch(self) -> None:
        """Record activity, postponing the idle close."""
        self._last_action_time = self.clock()

    def require_page(self) -> Page:
        """
        Return the open page.

        Raises:
            NoPageOpenError: If no page has been opened yet
        """
        if self._page is None:
            raise NoPageOpenError()
        return self._page

    async def ensure_open(self) -> Page:
        """
        Return the owned page, creating it if necessary.

        Raises:
            BrowserUnavailableError: If no provider is configured or the
                browser cannot be started
        """
        if self._page is not None:
            return self._page

        if self.provider is None:
            raise BrowserUnavailableError("Browser service is not available")

        try:
            self._page = await self.provider.new_page()
        except BrowserError:
            raise
        except Exception as e:
            raise BrowserUnavailableError(f"Browser service is not available: {e}") from e

        self.logger.debug("Opened browser page")
        return self._page

    async def navigate(self, url: str, timeout_ms: int | None = None) -> None:
        """
        Navigate the owned page to ``url`` and wait for the network to settle.

        Opens the page first if needed. ``timeout_ms`` of None uses the
        session default; 0 waits without a limit.

        Raises:
            NavigationTimeoutError: If the page does not settle in time
            NavigationError: If navigation fails for another reason
        """
        if timeout_ms is None:
            timeout_ms = self.action_timeout_ms
        page = await self.ensure_open()
        self.touch()

        self.logger.debug(f"Navigating to: {url}")
        try:
            await page.goto(url, wait_until=SETTLE_STATE, timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise NavigationTimeoutError(
                f"Navigation to {url} timed out after {timeout_ms}ms",
                url=url,
                timeout_ms=timeout_ms,
            ) from e
        except Exception as e:
            raise NavigationError(f"Navigation failed: {e}", url=url) from e
        finally:
            self.touch()

    async def go_back(self, timeout_ms: int | None = None) -> None:
        """
        Navigate to the previous history entry.

        Raises:
            NoPageOpenError: If no page is open
            NavigationTimeoutError: If the page does not settle in time
            NavigationError: If navigation fails for another reason
        """
        if timeout_ms is None:
            timeout_ms = self.action_timeout_ms
        page = self.require_page()
        self.touch()

        try:
            await page.go_back(wait_until=SETTLE_STATE, timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise NavigationTimeoutError(
                f"Going back timed out after {timeout_ms}ms",
                url=page.url,
                timeout_ms=timeout_ms,
            ) from e
        except Exception as e:
            raise NavigationError(f"Going back failed: {e}", url=page.url) from e
        finally:
            self.touch()

    async def close(self) -> None:
        """Close the owned page. Safe to call when nothing is open."""
        page, self._page = self._page, None
        if page is None:
            return

        try:
            await page.close()
            self.logger.debug("Closed browser page")
        except Exception as e:
            self.logger.error(f"Error closing page: {e}")

    async def sweep_idle(self) -> bool:
        """
        Close the page if the session has been idle too long.

        Returns:
            True if a page was closed
        """
        if self._page is None:
            return False

        idle_seconds = self.clock() - self._last_action_time
        if idle_seconds * 1000 <= self.idle_timeout_ms:
            return False

        self.logger.info(f"Closing page after {idle_seconds:.0f}s idle")
        await self.close()
        return True

    def start_idle_sweep(self) -> None:
        """Start the periodic idle sweep on the running event loop."""
        if self._sweep_task is not None and not self._sweep_task.done():
            return
        self._sweep_task = asyncio.create_task(self._sweep_loop())

    async def stop_idle_sweep(self) -> None:
        """Cancel the idle sweep and wait for it to finish."""
        task, self._sweep_task = self._sweep_task, None
        if task is None:
            return

        task.cancel()
        with suppress(asyncio.CancelledError):
            await task

    @property
    def sweep_running(self) -> bool:
        return self._sweep_task is not None and not self._sweep_task.done()

    async def _sweep_loop(self) -> None:
        while True:
            await asyncio.sleep(self.idle_check_interval_seconds)
            try:
                await self.sweep_idle()
            except Exception as e:
                self.logger.error(f"Idle sweep failed: {e}")
