"""
Custom exceptions for the search service.

Provides a hierarchy of exceptions for precise error handling across
all subsystems. All exceptions inherit from SearchServiceError.

Exception Hierarchy:
    SearchServiceError (base)
    ├── ConfigurationError
    ├── BrowserError
    │   ├── BrowserUnavailableError
    │   ├── NavigationError
    │   │   └── NavigationTimeoutError
    │   └── NoPageOpenError
    ├── ActionError
    │   └── UnknownActionError
    ├── LockError
    │   └── ImproperUnlockError
    ├── EmbeddingError
    ├── LLMError
    │   ├── ModelLoadError
    │   └── InferenceError
    └── NetworkError
"""

from typing import Any


class SearchServiceError(Exception):
    """
    Base exception for all search service errors.

    All custom exceptions inherit from this class, allowing for
    catch-all handling when needed.

    Attributes:
        message: Human-readable error description
        details: Optional dictionary with additional context
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(
                f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(SearchServiceError):
    """
    Error in configuration loading or validation.

    Raised when:
    - Configuration file is missing or malformed
    - Setting values fail validation
    """

    pass


# =============================================================================
# Browser Errors
# =============================================================================


class BrowserError(SearchServiceError):
    """
    Base error for browser/Playwright operations.

    Raised for general browser-related failures not covered by
    more specific subclasses.
    """

    pass


class BrowserUnavailableError(BrowserError):
    """
    The browser automation capability cannot be obtained.

    Raised when no page provider is configured or the browser
    fails to launch.
    """

    pass


class NavigationError(BrowserError):
    """
    Error during page navigation.

    Raised when:
    - URL is unreachable
    - The page crashes or is closed mid-navigation
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if url:
            details["url"] = url
        super().__init__(message, details)
        self.url = url


class NavigationTimeoutError(NavigationError):
    """
    Navigation did not settle before the configured timeout.

    The page is left in whatever state the browser reached.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        timeout_ms: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if timeout_ms is not None:
            details["timeout_ms"] = timeout_ms
        super().__init__(message, url=url, details=details)
        self.timeout_ms = timeout_ms


class NoPageOpenError(BrowserError):
    """An action requires an open page but none exists yet."""

    def __init__(self, message: str = "No page is open") -> None:
        super().__init__(message)


# =============================================================================
# Action Errors
# =============================================================================


class ActionError(SearchServiceError):
    """Base error for tool action dispatch."""

    pass


class UnknownActionError(ActionError):
    """
    The action verb is not recognized.

    Attributes:
        action: The verb as given by the caller (lowercased)
    """

    def __init__(self, action: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(f"Unknown action: {action}", details)
        self.action = action


# =============================================================================
# Lock Errors
# =============================================================================


class LockError(SearchServiceError):
    """Base error for lock usage."""

    pass


class ImproperUnlockError(LockError):
    """
    Unlock called without a matching lock.

    Signals a programming error in the caller and should never be
    masked.
    """

    def __init__(
        self,
        message: str = "unlock without lock",
        ticket: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if ticket is not None:
            details["ticket"] = ticket
        super().__init__(message, details)
        self.ticket = ticket


# =============================================================================
# Embedding Errors
# =============================================================================


class EmbeddingError(SearchServiceError):
    """
    Error in embedding generation.

    Raised when:
    - Embedding model fails to load
    - Text encoding fails
    """

    pass


# =============================================================================
# LLM Errors
# =============================================================================


class LLMError(SearchServiceError):
    """
    Base error for LLM operations (both local and API).
    """

    pass


class ModelLoadError(LLMError):
    """
    Error loading local LLM model.

    Raised when:
    - Model files not found
    - Insufficient memory to load model
    - Tokenizer loading fails
    """

    def __init__(
        self,
        message: str,
        model_name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if model_name:
            details["model_name"] = model_name
        super().__init__(message, details)
        self.model_name = model_name


class InferenceError(LLMError):
    """
    Error while generating a completion.

    Raised when generation fails locally or the API returns an
    unusable response.
    """

    pass


# =============================================================================
# Network Errors
# =============================================================================


class NetworkError(SearchServiceError):
    """
    Error talking to a remote HTTP service.

    Attributes:
        status_code: HTTP status of the failed response, if any
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, details)
        self.status_code = status_code
