"""
Test suite for the search service.

Provides tests for all modules:
- Unit tests for individual components
- Tool-level tests driving the browser tool with a mocked page
- Fixtures for common test data
"""
