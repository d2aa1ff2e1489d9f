"""
Shared pytest fixtures for search service tests.

Provides reusable fixtures for:
- Configuration and settings
- Deterministic embedding and completion models
- A mocked Playwright page and page provider
- Sample HTML
"""

import re
import tempfile
import zlib
from pathlib import Path
from typing import AsyncIterator, Generator, Sequence
from unittest.mock import AsyncMock, MagicMock

import numpy as np
import pytest
import pytest_asyncio

from search_service.browser.session import PageSession
from search_service.config import Settings
from search_service.tools.browser_tool import BrowserActionTool
from search_service.understanding import SemanticFilter, Summarizer, TextChunker
from search_service.utils.logging import reset_logging


class HashingEmbedder:
    """Bag-of-words embedder: every word bumps one of ``dimensions`` buckets."""

    def __init__(self, dimensions: int = 64) -> None:
        self.dimensions = dimensions
        self.calls: list[list[str]] = []

    def embed_batch(self, texts: Sequence[str]) -> np.ndarray:
        self.calls.append(list(texts))
        vectors = np.zeros((len(texts), self.dimensions), dtype=np.float32)
        for row, text in enumerate(texts):
            for word in re.findall(r"\w+", text.lower()):
                vectors[row, zlib.crc32(word.encode()) % self.dimensions] += 1.0
        return vectors


class FakeCompletionModel:
    """Completion model returning a canned reply, or raising ``error``."""

    def __init__(self, reply: str = "A short summary.", error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.prompts: list[str] = []

    async def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.reply


class FakePageProvider:
    """Hands out the same mocked page and counts requests."""

    def __init__(self, page: MagicMock) -> None:
        self.page = page
        self.pages_created = 0

    async def new_page(self) -> MagicMock:
        self.pages_created += 1
        return self.page


class FakeClock:
    """Manually advanced monotonic clock, in seconds."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture(autouse=True)
def reset_logging_state():
    """Keep handlers added by one test out of the next."""
    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory that's cleaned up after the test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_settings() -> Settings:
    """Settings with a fast lock and small chunks."""
    return Settings(
        filter={"chunk_size": 200, "chunk_overlap": 20, "top_k": 2},
        lock={"poll_interval_ms": 1},
    )


@pytest.fixture
def sample_html() -> str:
    """Provide sample HTML for extraction and link tests."""
    return """
    <!DOCTYPE html>
    <html lang="en">
    <head>
        <title>Test Page Title</title>
        <style>body { color: red; }</style>
    </head>
    <body>
        <header>
            <a href="/home">Home</a>
        </header>
        <nav>
            <a href="/products">Products</a>
        </nav>
        <main>
            <h1>Welcome</h1>
            <p>Read the <a href="/docs">docs</a> first.</p>
            <ul>
                <li>Product A</li>
                <li>Product B</li>
            </ul>
            <script>console.log("ignored");</script>
        </main>
    </body>
    </html>
    """


@pytest.fixture
def mock_page(sample_html: str) -> MagicMock:
    """A Playwright page stand-in with async methods mocked."""
    page = MagicMock()
    page.url = "https://example.com/start"
    page.goto = AsyncMock(return_value=None)
    page.go_back = AsyncMock(return_value=None)
    page.content = AsyncMock(return_value=sample_html)
    page.evaluate = AsyncMock(return_value=[])
    page.query_selector = AsyncMock(return_value=None)
    page.close = AsyncMock(return_value=None)
    return page


@pytest.fixture
def page_provider(mock_page: MagicMock) -> FakePageProvider:
    return FakePageProvider(mock_page)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def embedder() -> HashingEmbedder:
    return HashingEmbedder()


@pytest.fixture
def completion_model() -> FakeCompletionModel:
    return FakeCompletionModel()


@pytest.fixture
def page_session(page_provider: FakePageProvider, clock: FakeClock) -> PageSession:
    return PageSession(
        page_provider,
        action_timeout_ms=5000,
        idle_timeout_ms=60000,
        idle_check_interval_seconds=3600.0,
        clock=clock,
    )


@pytest_asyncio.fixture
async def browser_tool(
    page_session: PageSession,
    embedder: HashingEmbedder,
    completion_model: FakeCompletionModel,
) -> AsyncIterator[BrowserActionTool]:
    """Browser tool wired to the mocked page and fake models."""
    tool = BrowserActionTool(
        page_session,
        SemanticFilter(embedder, TextChunker(chunk_size=200, overlap=20), top_k=2),
        Summarizer(completion_model),
    )
    yield tool
    await tool.dispose()
