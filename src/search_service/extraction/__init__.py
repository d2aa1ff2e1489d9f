"""
Extraction module for the search service.

Converts page DOM into structured, Markdown-like text:
- A minimal DOM tree that can be built from BeautifulSoup
- Tag-by-tag rendering rules for headings, lists, tables and code
"""

from search_service.extraction.structurer import (
    DomNode,
    NodeKind,
    structure_html,
    structure_node,
)

__all__ = [
    "DomNode",
    "NodeKind",
    "structure_html",
    "structure_node",
]
