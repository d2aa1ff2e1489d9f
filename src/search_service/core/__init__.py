"""
Core module for the search service.

Contains the exception hierarchy used throughout the application.
"""

from search_service.core.exceptions import (
    SearchServiceError,
    ConfigurationError,
    BrowserError,
    BrowserUnavailableError,
    NavigationError,
    NavigationTimeoutError,
    NoPageOpenError,
    ActionError,
    UnknownActionError,
    LockError,
    ImproperUnlockError,
    EmbeddingError,
    LLMError,
    ModelLoadError,
    InferenceError,
    NetworkError,
)

__all__ = [
    # Base
    "SearchServiceError",
    "ConfigurationError",
    # Browser
    "BrowserError",
    "BrowserUnavailableError",
    "NavigationError",
    "NavigationTimeoutError",
    "NoPageOpenError",
    # Actions
    "ActionError",
    "UnknownActionError",
    # Lock
    "LockError",
    "ImproperUnlockError",
    # Embedding
    "EmbeddingError",
    # LLM
    "LLMError",
    "ModelLoadError",
    "InferenceError",
    # Network
    "NetworkError",
]
