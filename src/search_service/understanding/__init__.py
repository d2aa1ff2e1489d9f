"""
Page understanding module for the search service.

Provides query-driven filtering and summarization of page text:
- Recursive text chunking
- Embedding similarity filtering
- LLM summarization
"""

from search_service.understanding.chunker import TextChunker, Chunk
from search_service.understanding.semantic_filter import SemanticFilter
from search_service.understanding.summarizer import Summarizer

__all__ = [
    "TextChunker",
    "Chunk",
    "SemanticFilter",
    "Summarizer",
]
