"""
Query-driven filtering of page text.

Chunks the text, embeds chunks and query, and keeps the chunks most
similar to the query. Nothing is persisted between calls.
"""

import asyncio
import logging

import numpy as np

from search_service.config.settings import FilterSettings
from search_service.embeddings.embedder import EmbeddingModel
from search_service.understanding.chunker import TextChunker
from search_service.utils.logging import get_logger
from search_service.vector_store.index import VectorIndex

CHUNK_SEPARATOR = "\n\n"


class SemanticFilter:
    """
    Keep the parts of a page that are relevant to a query.

    Example:
        >>> semantic_filter = SemanticFilter(embedder, TextChunker(), top_k=20)
        >>> relevant = await semantic_filter.filter(page_text, "pricing")
    """

    def __init__(
        self,
        embedder: EmbeddingModel,
        chunker: TextChunker | None = None,
        top_k: int = 20,
        logger: logging.Logger | None = None,
    ) -> None:
        """
        Initialize the filter.

        Args:
            embedder: Embedding model for chunks and queries
            chunker: Splitter for the page text (defaults to 2000/200)
            top_k: Number of chunks to keep
            logger: Logger to use (defaults to the module logger)
        """
        self.embedder = embedder
        self.chunker = chunker or TextChunker()
        self.top_k = top_k
        self.logger = logger or get_logger(__name__)

    @classmethod
    def from_settings(
        cls,
        embedder: EmbeddingModel,
        settings: FilterSettings,
        logger: logging.Logger | None = None,
    ) -> "SemanticFilter":
        return cls(
            embedder=embedder,
            chunker=TextChunker.from_settings(settings, logger=logger),
            top_k=settings.top_k,
            logger=logger,
        )

    async def filter(self, text: str, query: str) -> str:
        """
        Return the chunks of ``text`` most similar to ``query``.

        Args:
            text: Structured page text
            query: Search text

        Returns:
            Up to ``top_k`` chunks joined by blank lines, most similar
            first; an empty string when the text has no content

        Raises:
            EmbeddingError: If the embedding model fails
        """
        chunks = self.chunker.split_text(text)
        if not chunks:
            return ""

        # Embedding is CPU bound; keep it off the event loop
        vectors = await asyncio.to_thread(self.embedder.embed_batch, [*chunks, query])
        vectors = np.asarray(vectors, dtype=np.float32)

        index = VectorIndex(dimensions=vectors.shape[1])
        index.add(ids=list(range(len(chunks))), vectors=vectors[:-1])
        hits = index.search(vectors[-1], top_k=self.top_k)

        self.logger.debug(
            f"Kept {len(hits)} of {len(chunks)} chunks for query {query!r}")
        return CHUNK_SEPARATOR.join(chunks[chunk_id] for chunk_id, _ in hits)
