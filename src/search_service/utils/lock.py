"""
Fair mutual exclusion for asyncio tasks.

Provides a ticket lock that grants access strictly in request order.
Waiters poll with a short fixed delay instead of being woken on
release, which suits conversation-turn-scale workloads.
"""

import asyncio
import logging
from collections import deque
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, TypeVar

from search_service.config.settings import LockSettings
from search_service.core.exceptions import ImproperUnlockError
from search_service.utils.logging import get_logger

T = TypeVar("T")


class AsyncTicketLock:
    """
    First-come-first-served lock for coroutines.

    Every ``lock()`` call draws a ticket from a monotonically increasing
    counter and joins the tail of the queue. A ticket is granted once the
    lock is free and the ticket is at the head of the queue. Only the
    active ticket may release the lock.

    Example:
        >>> lock = AsyncTicketLock()
        >>> ticket = await lock.lock()
        >>> try:
        ...     await mutate_conversation()
        ... finally:
        ...     lock.unlock(ticket)

        >>> result = await lock.run_locked(mutate_conversation)
    """

    def __init__(
        self,
        poll_interval: float = 0.01,
        logger: logging.Logger | None = None,
    ) -> None:
        """
        Initialize the lock.

        Args:
            poll_interval: Seconds between checks while waiting
            logger: Logger to use (defaults to the module logger)
        """
        self.poll_interval = poll_interval
        self.logger = logger or get_logger(__name__)

        self._locked = False
        self._active: int | None = None
        self._queue: deque[int] = deque()
        self._next_ticket = 0

    @classmethod
    def from_settings(
        cls,
        settings: LockSettings,
        logger: logging.Logger | None = None,
    ) -> "AsyncTicketLock":
        """Create a lock from lock settings."""
        return cls(poll_interval=settings.poll_interval_ms / 1000, logger=logger)

    @property
    def is_locked(self) -> bool:
        """Whether some ticket currently holds the lock. Informational only."""
        return self._locked

    @property
    def active_ticket(self) -> int | None:
        """Ticket currently holding the lock, if any."""
        return self._active

    @property
    def waiting(self) -> int:
        """Number of tickets queued behind the active one."""
        return len(self._queue) - (1 if self._locked else 0)

    async def lock(self) -> int:
        """
        Wait for the lock and return the granted ticket.

        If the waiting task is cancelled its ticket leaves the queue,
        so later tickets are not blocked.

        Returns:
            The ticket id, to be passed to ``unlock``
        """
        ticket = self._next_ticket
        self._next_ticket += 1
        self._queue.append(ticket)

        try:
            while self._locked or self._queue[0] != ticket:
                await asyncio.sleep(self.poll_interval)
        except asyncio.CancelledError:
            self._queue.remove(ticket)
            self.logger.debug(f"Ticket {ticket} cancelled while waiting")
            raise

        self._locked = True
        self._active = ticket
        self.logger.debug(f"Ticket {ticket} acquired lock")
        return ticket

    def unlock(self, ticket: int) -> None:
        """
        Release the lock held by ``ticket``.

        Args:
            ticket: Ticket returned by ``lock``

        Raises:
            ImproperUnlockError: If the lock is not held, or ``ticket``
                is not the active ticket
        """
        if not self._locked:
            raise ImproperUnlockError("unlock without lock", ticket=ticket)

        if ticket != self._active:
            raise ImproperUnlockError(
                "ticket does not hold the lock",
                ticket=ticket,
                details={"active_ticket": self._active},
            )

        self._queue.remove(ticket)
        self._active = None
        self._locked = False
        self.logger.debug(f"Ticket {ticket} released lock")

    async def run_locked(self, func: Callable[[], Awaitable[T]]) -> T:
        """
        Run ``func`` while holding the lock.

        The lock is released even if ``func`` raises; the exception
        propagates to the caller.

        Args:
            func: Zero-argument coroutine function

        Returns:
            Whatever ``func`` returns
        """
        ticket = await self.lock()
        try:
            return await func()
        finally:
            self.unlock(ticket)

    @asynccontextmanager
    async def hold(self) -> AsyncIterator[int]:
        """Async context manager form of ``lock``/``unlock``."""
        ticket = await self.lock()
        try:
            yield ticket
        finally:
            self.unlock(ticket)

    def __repr__(self) -> str:
        return (
            f"AsyncTicketLock(locked={self._locked}, active={self._active}, "
            f"waiting={self.waiting})"
        )
