"""
Lightweight in-memory metrics for observability.

Provides simple counters and timing metrics without
external dependencies like Prometheus or OpenTelemetry.
"""

import time
from collections import defaultdict
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator


@dataclass
class TimingStats:
    """Statistics for timing measurements."""

    count: int = 0
    total_ms: float = 0.0
    min_ms: float = float("inf")
    max_ms: float = 0.0

    @property
    def avg_ms(self) -> float:
        """Average latency in milliseconds."""
        return self.total_ms / self.count if self.count > 0 else 0.0

    def record(self, duration_ms: float) -> None:
        """Record a timing measurement."""
        self.count += 1
        self.total_ms += duration_ms
        self.min_ms = min(self.min_ms, duration_ms)
        self.max_ms = max(self.max_ms, duration_ms)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "count": self.count,
            "total_ms": round(self.total_ms, 2),
            "avg_ms": round(self.avg_ms, 2),
            "min_ms": round(self.min_ms, 2) if self.count > 0 else 0.0,
            "max_ms": round(self.max_ms, 2),
        }


@dataclass
class Metrics:
    """
    In-memory metrics collector.

    One instance is owned by each component that records metrics;
    everything runs on a single event loop so no locking is needed.

    Example:
        >>> metrics = Metrics()
        >>> metrics.increment("browser_actions")
        >>> with metrics.timer("browser_action_open_ms"):
        ...     await tool.run("open https://example.com")
        >>> print(metrics.snapshot())
    """

    _counters: dict[str, int] = field(default_factory=lambda: defaultdict(int))
    _timings: dict[str, TimingStats] = field(
        default_factory=lambda: defaultdict(TimingStats)
    )

    def increment(self, name: str, value: int = 1) -> int:
        """
        Increment a counter.

        Args:
            name: Counter name
            value: Amount to increment (default 1)

        Returns:
            New counter value
        """
        self._counters[name] += value
        return self._counters[name]

    def get_counter(self, name: str) -> int:
        """Get current counter value."""
        return self._counters.get(name, 0)

    def observe(self, name: str, duration_ms: float) -> None:
        """Record a timing observation in milliseconds."""
        self._timings[name].record(duration_ms)

    def get_timing(self, name: str) -> TimingStats:
        """Get timing stats for a metric (empty stats if never observed)."""
        return self._timings.get(name, TimingStats())

    @contextmanager
    def timer(self, name: str) -> Iterator[None]:
        """Time the enclosed block and record it under ``name``."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self.observe(name, (time.perf_counter() - start) * 1000)

    def snapshot(self) -> dict:
        """Return a serializable copy of all counters and timings."""
        return {
            "counters": dict(self._counters),
            "timings": {k: v.to_dict() for k, v in self._timings.items()},
        }

    def reset(self) -> None:
        """Clear all counters and timings."""
        self._counters.clear()
        self._timings.clear()
