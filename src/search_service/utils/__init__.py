"""
Utilities module for the search service.

Provides logging setup, in-memory metrics, the ticket lock and the
server-sent events reader.
"""

from search_service.utils.logging import setup_logging, get_logger
from search_service.utils.metrics import Metrics, TimingStats
from search_service.utils.lock import AsyncTicketLock
from search_service.utils.sse import sse_iterable

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    # Metrics
    "Metrics",
    "TimingStats",
    # Concurrency
    "AsyncTicketLock",
    # Streaming
    "sse_iterable",
]
