"""
CLI module for the search service.

Provides command-line interface using Typer:
- browse: Run browsing actions against one page session
- config: Show the effective configuration
"""

from search_service.cli.main import app

__all__ = ["app"]
