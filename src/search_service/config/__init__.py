"""
Configuration module for the search service.

Provides Pydantic-based settings management with YAML file support
and environment variable overrides.
"""

from search_service.config.settings import (
    Settings,
    BrowserSettings,
    FilterSettings,
    EmbeddingSettings,
    LLMSettings,
    LocalLLMSettings,
    APILLMSettings,
    LockSettings,
    LoggingSettings,
)
from search_service.config.loader import load_config, get_default_config_path

__all__ = [
    "Settings",
    "BrowserSettings",
    "FilterSettings",
    "EmbeddingSettings",
    "LLMSettings",
    "LocalLLMSettings",
    "APILLMSettings",
    "LockSettings",
    "LoggingSettings",
    "load_config",
    "get_default_config_path",
]
