"""
Tests for configuration module.

Tests settings loading, validation, and environment variable overrides.
"""

from pathlib import Path

import pytest
import yaml

from search_service.config import (
    BrowserSettings,
    FilterSettings,
    LocalLLMSettings,
    get_default_config_path,
    Settings,
    load_config,
)
from search_service.core.exceptions import ConfigurationError


class TestSettings:
    """Tests for Settings model."""

    def test_default_settings_valid(self):
        """Default settings should be valid."""
        settings = Settings()

        assert settings.browser.headless is True
        assert settings.browser.action_timeout_ms == 60000
        assert settings.browser.idle_timeout_ms == 300000
        assert settings.filter.chunk_size == 2000
        assert settings.filter.chunk_overlap == 200
        assert settings.filter.top_k == 20
        assert settings.llm.provider == "local"

    def test_browser_settings_validation(self):
        """Browser settings should validate constraints."""
        browser = BrowserSettings(action_timeout_ms=30000, viewport_width=1920)
        assert browser.action_timeout_ms == 30000

        with pytest.raises(ValueError):
            BrowserSettings(action_timeout_ms=10)

    def test_overlap_must_be_smaller_than_chunk(self):
        with pytest.raises(ValueError, match="chunk_overlap"):
            FilterSettings(chunk_size=500, chunk_overlap=500)

    def test_settings_nested_override(self):
        """Nested settings can be overridden."""
        settings = Settings(
            browser={"headless": False},
            filter={"top_k": 5},
        )

        assert settings.browser.headless is False
        assert settings.filter.top_k == 5
        # Non-overridden should keep defaults
        assert settings.filter.chunk_size == 2000

    def test_unknown_section_rejected(self):
        with pytest.raises(ValueError):
            Settings(crawler={"max_pages": 10})


class TestConfigLoader:
    """Tests for configuration loading."""

    def test_load_config_defaults(self):
        """Loading without file should use defaults."""
        settings = load_config(config_path=None)

        assert isinstance(settings, Settings)
        assert settings.browser.headless is True

    def test_load_config_from_yaml(self, temp_dir: Path):
        """Configuration should load from YAML file."""
        config_path = temp_dir / "config.yaml"
        config_data = {
            "browser": {"headless": False},
            "llm": {"provider": "api", "api": {"model_name": "gpt-4o"}},
        }

        with open(config_path, "w") as f:
            yaml.dump(config_data, f)

        settings = load_config(config_path)

        assert settings.browser.headless is False
        assert settings.llm.provider == "api"
        assert settings.llm.api.model_name == "gpt-4o"

    def test_empty_yaml_uses_defaults(self, temp_dir: Path):
        config_path = temp_dir / "empty.yaml"
        config_path.write_text("")

        assert load_config(config_path).filter.top_k == 20

    def test_load_config_env_override(self, monkeypatch, temp_dir: Path):
        """Environment variables should override file settings."""
        config_path = temp_dir / "config.yaml"
        config_path.write_text("filter:\n  top_k: 5\n")
        monkeypatch.setenv("SEARCH_SERVICE__FILTER__TOP_K", "7")
        monkeypatch.setenv("SEARCH_SERVICE__BROWSER__HEADLESS", "false")

        settings = load_config(config_path)

        assert settings.filter.top_k == 7
        assert settings.browser.headless is False

    def test_nested_env_override(self, monkeypatch):
        monkeypatch.setenv("SEARCH_SERVICE__LLM__API__MODEL_NAME", "gpt-4o")

        assert load_config().llm.api.model_name == "gpt-4o"

    def test_missing_file(self, temp_dir: Path):
        with pytest.raises(FileNotFoundError):
            load_config(temp_dir / "missing.yaml")

    def test_non_mapping_yaml(self, temp_dir: Path):
        config_path = temp_dir / "list.yaml"
        config_path.write_text("- one\n- two\n")

        with pytest.raises(ConfigurationError, match="mapping"):
            load_config(config_path)

    def test_invalid_values(self, monkeypatch):
        monkeypatch.setenv("SEARCH_SERVICE__FILTER__TOP_K", "0")

        with pytest.raises(ConfigurationError) as exc_info:
            load_config()

        assert ("filter", "top_k") in exc_info.value.details["errors"]

    def test_load_config_invalid_yaml(self, temp_dir: Path):
        """Invalid YAML should raise appropriate error."""
        config_path = temp_dir / "invalid.yaml"
        config_path.write_text("{ invalid yaml content")

        with pytest.raises(yaml.YAMLError):
            load_config(config_path)


class TestLocalLLMSettings:
    """Tests for local LLM configuration."""

    def test_default_model_name(self):
        """Default model should be Qwen."""
        assert "Qwen" in LocalLLMSettings().model_name

    def test_temperature_validation(self):
        with pytest.raises(ValueError):
            LocalLLMSettings(temperature=3.0)

    def test_max_tokens_validation(self):
        with pytest.raises(ValueError):
            LocalLLMSettings(max_new_tokens=50)  # Below minimum


class TestDefaultConfigPath:
    """Tests for config file discovery."""

    def test_finds_file_in_working_directory(self, monkeypatch, temp_dir: Path):
        (temp_dir / "config.yaml").write_text("filter:\n  top_k: 3\n")
        monkeypatch.chdir(temp_dir)

        assert get_default_config_path().resolve() == (temp_dir / "config.yaml").resolve()

    def test_config_subdirectory(self, monkeypatch, temp_dir: Path):
        (temp_dir / "config").mkdir()
        (temp_dir / "config" / "config.yaml").write_text("")
        monkeypatch.chdir(temp_dir)

        expected = temp_dir / "config" / "config.yaml"
        assert get_default_config_path().resolve() == expected.resolve()
