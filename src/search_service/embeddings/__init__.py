"""
Embeddings module for the search service.

Provides text embedding generation using sentence-transformers.
"""

from search_service.embeddings.embedder import Embedder, EmbeddingModel

__all__ = [
    "Embedder",
    "EmbeddingModel",
]
