"""
Pydantic settings models for the search service.

All configuration is defined here with defaults suited to a single
chat-bot process driving one headless browser.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator


class BrowserSettings(BaseModel):
    """Playwright browser and page session configuration."""

    headless: bool = Field(
        default=True,
        description="Run browser in headless mode",
    )
    browser_type: Literal["chromium", "firefox", "webkit"] = Field(
        default="chromium",
        description="Browser engine to use",
    )
    action_timeout_ms: int = Field(
        default=60000,
        ge=1000,
        le=300000,
        description="Timeout for navigation actions in milliseconds",
    )
    idle_timeout_ms: int = Field(
        default=300000,
        ge=1000,
        description="Close the page after this long without any action",
    )
    idle_check_interval_seconds: float = Field(
        default=60.0,
        gt=0.0,
        le=3600.0,
        description="How often the idle sweep checks the page",
    )
    user_agent: str | None = Field(
        default=None,
        description="Custom user agent string. None uses browser default.",
    )
    viewport_width: int = Field(
        default=1280,
        ge=320,
        le=3840,
        description="Browser viewport width in pixels",
    )
    viewport_height: int = Field(
        default=720,
        ge=240,
        le=2160,
        description="Browser viewport height in pixels",
    )
    ignore_https_errors: bool = Field(
        default=False,
        description="Whether to ignore HTTPS certificate errors",
    )


class FilterSettings(BaseModel):
    """Chunking and similarity filtering of extracted page text."""

    chunk_size: int = Field(
        default=2000,
        ge=100,
        le=20000,
        description="Target chunk size in characters",
    )
    chunk_overlap: int = Field(
        default=200,
        ge=0,
        le=5000,
        description="Overlap between neighbouring chunks in characters",
    )
    top_k: int = Field(
        default=20,
        ge=1,
        le=100,
        description="Number of chunks kept after similarity search",
    )

    @model_validator(mode="after")
    def check_overlap(self) -> "FilterSettings":
        """Overlap has to leave room for new content in every chunk."""
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError("chunk_overlap must be smaller than chunk_size")
        return self


class EmbeddingSettings(BaseModel):
    """Sentence embeddings configuration."""

    model_name: str = Field(
        default="sentence-transformers/all-MiniLM-L6-v2",
        description="HuggingFace sentence-transformer model identifier",
    )
    device: Literal["cpu", "cuda", "mps"] = Field(
        default="cpu",
        description="Device to run embedding model on",
    )
    batch_size: int = Field(
        default=32,
        ge=1,
        le=256,
        description="Batch size for embedding generation",
    )
    normalize_embeddings: bool = Field(
        default=True,
        description="Whether to L2-normalize embeddings",
    )
    cache_dir: Path | None = Field(
        default=None,
        description="Directory to cache downloaded models",
    )

    @field_validator("cache_dir", mode="before")
    @classmethod
    def convert_cache_dir(cls, v: str | Path | None) -> Path | None:
        """Convert string paths to Path objects."""
        if v is None:
            return None
        return Path(v) if isinstance(v, str) else v


class LocalLLMSettings(BaseModel):
    """Local LLM (HuggingFace Transformers) configuration."""

    model_name: str = Field(
        default="Qwen/Qwen2.5-1.5B-Instruct",
        description="HuggingFace model identifier",
    )
    device: Literal["cpu", "cuda", "mps"] = Field(
        default="cpu",
        description="Device to run inference on",
    )
    torch_dtype: Literal["float32", "float16", "bfloat16"] = Field(
        default="float32",
        description="PyTorch dtype for model weights",
    )
    max_new_tokens: int = Field(
        default=1024,
        ge=64,
        le=4096,
        description="Maximum tokens to generate per summary",
    )
    temperature: float = Field(
        default=0.3,
        ge=0.0,
        le=2.0,
        description="Sampling temperature",
    )
    top_p: float = Field(
        default=0.9,
        ge=0.0,
        le=1.0,
        description="Nucleus sampling probability",
    )
    do_sample: bool = Field(
        default=False,
        description="Whether to use sampling (False = greedy decoding)",
    )
    cache_dir: Path | None = Field(
        default=None,
        description="Directory to cache downloaded models",
    )

    @field_validator("cache_dir", mode="before")
    @classmethod
    def convert_cache_dir(cls, v: str | Path | None) -> Path | None:
        """Convert string paths to Path objects."""
        if v is None:
            return None
        return Path(v) if isinstance(v, str) else v


class APILLMSettings(BaseModel):
    """OpenAI-compatible chat completions API configuration."""

    base_url: str = Field(
        default="https://api.openai.com/v1",
        description="Base URL of the chat completions API",
    )
    model_name: str = Field(
        default="gpt-4o-mini",
        description="Model identifier for API calls",
    )
    api_key_env_var: str = Field(
        default="OPENAI_API_KEY",
        description="Environment variable name containing API key",
    )
    max_tokens: int = Field(
        default=1024,
        ge=64,
        le=16384,
        description="Maximum tokens in API response",
    )
    temperature: float = Field(
        default=0.3,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for API calls",
    )
    timeout_seconds: float = Field(
        default=120.0,
        ge=1.0,
        le=600.0,
        description="Timeout for API requests in seconds",
    )


class LLMSettings(BaseModel):
    """Which completion backend summarizes pages."""

    provider: Literal["local", "api"] = Field(
        default="local",
        description="Completion backend: local transformers model or HTTP API",
    )
    local: LocalLLMSettings = Field(default_factory=LocalLLMSettings)
    api: APILLMSettings = Field(default_factory=APILLMSettings)


class LockSettings(BaseModel):
    """Ticket lock configuration."""

    poll_interval_ms: int = Field(
        default=10,
        ge=1,
        le=1000,
        description="Delay between checks while waiting for the lock",
    )


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Minimum logging level",
    )
    format: str = Field(
        default="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        description="Log message format string",
    )
    date_format: str = Field(
        default="%Y-%m-%d %H:%M:%S",
        description="Date format for log timestamps",
    )
    file_path: Path | None = Field(
        default=None,
        description="Path to log file. None means console only.",
    )
    max_file_size_mb: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum log file size before rotation",
    )
    backup_count: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Number of backup log files to keep",
    )
    log_to_console: bool = Field(
        default=True,
        description="Whether to output logs to console",
    )

    @field_validator("file_path", mode="before")
    @classmethod
    def convert_file_path(cls, v: str | Path | None) -> Path | None:
        """Convert string paths to Path objects."""
        if v is None:
            return None
        return Path(v) if isinstance(v, str) else v


class Settings(BaseModel):
    """
    Root configuration model containing all subsystem settings.

    Settings are loaded from YAML with environment variable overrides.
    """

    browser: BrowserSettings = Field(
        default_factory=BrowserSettings,
        description="Browser/Playwright settings",
    )
    filter: FilterSettings = Field(
        default_factory=FilterSettings,
        description="Semantic filter settings",
    )
    embedding: EmbeddingSettings = Field(
        default_factory=EmbeddingSettings,
        description="Embedding model settings",
    )
    llm: LLMSettings = Field(
        default_factory=LLMSettings,
        description="Summarization model settings",
    )
    lock: LockSettings = Field(
        default_factory=LockSettings,
        description="Ticket lock settings",
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration",
    )

    model_config = {
        "extra": "forbid",
        "validate_default": True,
    }
