"""
Vector store module for the search service.

Provides an ephemeral in-memory index for cosine similarity search.
"""

from search_service.vector_store.index import VectorIndex

__all__ = [
    "VectorIndex",
]
