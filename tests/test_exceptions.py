"""
Tests for exception hierarchy.

Tests custom exceptions and the context they carry.
"""

import pytest

from search_service.core.exceptions import (
    ActionError,
    BrowserError,
    BrowserUnavailableError,
    ConfigurationError,
    EmbeddingError,
    ImproperUnlockError,
    InferenceError,
    LLMError,
    LockError,
    ModelLoadError,
    NavigationError,
    NavigationTimeoutError,
    NetworkError,
    NoPageOpenError,
    SearchServiceError,
    UnknownActionError,
)


class TestExceptionHierarchy:
    """Tests for exception inheritance."""

    def test_base_exception(self):
        exc = SearchServiceError("Test error")

        assert isinstance(exc, Exception)
        assert str(exc) == "Test error"

    @pytest.mark.parametrize(
        "child, parent",
        [
            (ConfigurationError, SearchServiceError),
            (BrowserError, SearchServiceError),
            (BrowserUnavailableError, BrowserError),
            (NavigationError, BrowserError),
            (NavigationTimeoutError, NavigationError),
            (NoPageOpenError, BrowserError),
            (ActionError, SearchServiceError),
            (UnknownActionError, ActionError),
            (LockError, SearchServiceError),
            (ImproperUnlockError, LockError),
            (EmbeddingError, SearchServiceError),
            (LLMError, SearchServiceError),
            (ModelLoadError, LLMError),
            (InferenceError, LLMError),
            (NetworkError, SearchServiceError),
        ],
    )
    def test_inheritance(self, child, parent):
        assert issubclass(child, parent)

    def test_catch_all(self):
        with pytest.raises(SearchServiceError):
            raise NavigationTimeoutError("slow", url="https://example.com")


class TestExceptionDetails:
    """Tests for the context attached to exceptions."""

    def test_details_in_str(self):
        exc = SearchServiceError("Failed", details={"attempt": 2})

        assert exc.message == "Failed"
        assert str(exc) == "Failed (attempt=2)"

    def test_repr(self):
        exc = ConfigurationError("Bad value", details={"key": "top_k"})

        assert repr(exc) == "ConfigurationError('Bad value', details={'key': 'top_k'})"

    def test_navigation_error_url(self):
        exc = NavigationError("Unreachable", url="https://example.com")

        assert exc.url == "https://example.com"
        assert exc.details["url"] == "https://example.com"

    def test_navigation_timeout(self):
        exc = NavigationTimeoutError("Timed out", url="https://example.com", timeout_ms=5000)

        assert exc.timeout_ms == 5000
        assert exc.details == {"url": "https://example.com", "timeout_ms": 5000}

    def test_no_page_default_message(self):
        assert NoPageOpenError().message == "No page is open"

    def test_unknown_action(self):
        exc = UnknownActionError("jump")

        assert exc.action == "jump"
        assert exc.message == "Unknown action: jump"

    def test_improper_unlock(self):
        exc = ImproperUnlockError(ticket=3)

        assert exc.message == "unlock without lock"
        assert exc.details["ticket"] == 3

    def test_model_load_error(self):
        exc = ModelLoadError("Failed to load", model_name="Qwen/Qwen2.5-1.5B-Instruct")

        assert exc.model_name == "Qwen/Qwen2.5-1.5B-Instruct"
        assert exc.details["model_name"] == "Qwen/Qwen2.5-1.5B-Instruct"

    def test_network_error_status(self):
        exc = NetworkError("Forbidden", status_code=403)

        assert exc.status_code == 403
        assert str(exc) == "Forbidden (status_code=403)"

    def test_details_not_shared(self):
        first = NavigationError("a", url="https://a.example")
        second = NavigationError("b")

        assert "url" in first.details
        assert second.details == {}
