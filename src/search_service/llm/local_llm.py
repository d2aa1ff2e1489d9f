"""
Local LLM interface using Hugging Face Transformers.

Runs the summarization model in-process. Generation is blocking, so the
async ``complete`` entry point hands it to a worker thread.
"""

import asyncio
import gc
import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Literal

import torch
from transformers import (
    AutoModelForCausalLM,
    AutoTokenizer,
    PreTrainedModel,
    PreTrainedTokenizerBase,
)

from search_service.config.settings import LocalLLMSettings
from search_service.core.exceptions import ModelLoadError, InferenceError
from search_service.utils.logging import get_logger
from search_service.utils.metrics import Metrics


class Role(str, Enum):
    """Message roles in a conversation."""

    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass
class ConversationMessage:
    """A message in a conversation."""

    role: Role
    content: str

    def to_dict(self) -> dict:
        """Convert to dictionary format for chat templates."""
        return {"role": self.role.value, "content": self.content}


@dataclass
class GenerationConfig:
    """Configuration for text generation."""

    max_new_tokens: int = 1024
    temperature: float = 0.3
    top_p: float = 0.9
    do_sample: bool = False
    repetition_penalty: float = 1.1

    def to_generate_kwargs(self) -> dict:
        """Convert to kwargs for model.generate()."""
        kwargs = {
            "max_new_tokens": self.max_new_tokens,
            "do_sample": self.do_sample,
            "repetition_penalty": self.repetition_penalty,
        }

        # Sampling knobs only apply when sampling
        if self.do_sample:
            kwargs["temperature"] = max(self.temperature, 0.01)
            kwargs["top_p"] = self.top_p

        return kwargs


@dataclass
class GenerationResult:
    """Result of a generation request."""

    text: str
    prompt_tokens: int
    completion_tokens: int
    finish_reason: Literal["stop", "length"] = "stop"
    model_name: str = ""

    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.completion_tokens


class LocalLLM:
    """
    Local LLM interface using Hugging Face Transformers.

    The model is loaded lazily on first use and can be unloaded to free
    memory.

    Example:
        >>> llm = LocalLLM.from_settings(settings.llm.local)
        >>> summary = await llm.complete("Summarize this text: ...")
    """

    def __init__(
        self,
        model_name: str = "Qwen/Qwen2.5-1.5B-Instruct",
        device: str = "cpu",
        torch_dtype: str = "float32",
        cache_dir: Path | None = None,
        default_config: GenerationConfig | None = None,
        metrics: Metrics | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """
        Initialize local LLM.

        Args:
            model_name: HuggingFace model identifier
            device: Device to run on (cpu, cuda, mps)
            torch_dtype: PyTorch dtype for weights
            cache_dir: Directory to cache downloaded models
            default_config: Default generation configuration
            metrics: Metrics collector for call counts and latency
            logger: Logger to use (defaults to the module logger)
        """
        self.model_name = model_name
        self.device = device
        self.torch_dtype = self._parse_dtype(torch_dtype)
        self.cache_dir = str(cache_dir) if cache_dir else None
        self.default_config = default_config or GenerationConfig()
        self.metrics = metrics or Metrics()
        self.logger = logger or get_logger(__name__)

        self._model: PreTrainedModel | None = None
        self._tokenizer: PreTrainedTokenizerBase | None = None
        self._lock = threading.Lock()
        self._loaded = False

    @classmethod
    def from_settings(
        cls,
        settings: LocalLLMSettings,
        metrics: Metrics | None = None,
        logger: logging.Logger | None = None,
    ) -> "LocalLLM":
        """
        Create LocalLLM from local model settings.

        Args:
            settings: Local LLM settings

        Returns:
            Configured LocalLLM instance
        """
        default_config = GenerationConfig(
            max_new_tokens=settings.max_new_tokens,
            temperature=settings.temperature,
            top_p=settings.top_p,
            do_sample=settings.do_sample,
        )

        return cls(
            model_name=settings.model_name,
            device=settings.device,
            torch_dtype=settings.torch_dtype,
            cache_dir=settings.cache_dir,
            default_config=default_config,
            metrics=metrics,
            logger=logger,
        )

    def _parse_dtype(self, dtype_str: str) -> torch.dtype:
        dtype_map = {
            "float32": torch.float32,
            "float16": torch.float16,
            "bfloat16": torch.bfloat16,
        }
        return dtype_map.get(dtype_str, torch.float32)

    @property
    def is_loaded(self) -> bool:
        """Check if model is loaded."""
        return self._loaded

    def load(self) -> None:
        """
        Load model and tokenizer.

        Thread-safe; later calls are no-ops.

        Raises:
            ModelLoadError: If model loading fails
        """
        if self._loaded:
            return

        with self._lock:
            if self._loaded:
                return

            self.logger.info(f"Loading model: {self.model_name}")

            try:
                self._tokenizer = AutoTokenizer.from_pretrained(
                    self.model_name,
                    cache_dir=self.cache_dir,
                )
                if self._tokenizer.pad_token is None:
                    self._tokenizer.pad_token = self._tokenizer.eos_token

                self._model = AutoModelForCausalLM.from_pretrained(
                    self.model_name,
                    torch_dtype=self.torch_dtype,
                    low_cpu_mem_usage=True,
                    cache_dir=self.cache_dir,
                    device_map=self.device if self.device != "cpu" else None,
                )
                if self.device == "cpu":
                    self._model = self._model.to(self.device)

                self._model.eval()
                self._loaded = True
                self.logger.info(f"Model loaded: {self.model_name}")

            except Exception as e:
                self.logger.error(f"Failed to load model: {e}")
                raise ModelLoadError(
                    f"Failed to load model {self.model_name}",
                    model_name=self.model_name,
                    details={"error": str(e)},
                ) from e

    def unload(self) -> None:
        """Unload model to free memory."""
        with self._lock:
            if not self._loaded:
                return

            self._model = None
            self._tokenizer = None
            self._loaded = False

            gc.collect()
            if torch.cuda.is_available():
                torch.cuda.empty_cache()

            self.logger.info("Model unloaded")

    def generate(
        self,
        prompt: str,
        config: GenerationConfig | None = None,
        system_prompt: str | None = None,
    ) -> GenerationResult:
        """
        Generate text from a prompt.

        Args:
            prompt: Input prompt text
            config: Generation configuration (uses default if None)
            system_prompt: Optional system prompt to prepend

        Returns:
            GenerationResult with generated text

        Raises:
            ModelLoadError: If the model cannot be loaded
            InferenceError: If generation fails
        """
        messages = []
        if system_prompt:
            messages.append(ConversationMessage(Role.SYSTEM, system_prompt))
        messages.append(ConversationMessage(Role.USER, prompt))

        self.load()
        config = config or self.default_config
        start_time = time.perf_counter()

        try:
            prompt_text = self._tokenizer.apply_chat_template(
                [m.to_dict() for m in messages],
                tokenize=False,
                add_generation_prompt=True,
            )
            inputs = self._tokenizer(prompt_text, return_tensors="pt")
            inputs = {k: v.to(self.device) for k, v in inputs.items()}
            prompt_tokens = inputs["input_ids"].shape[1]

            with torch.no_grad():
                outputs = self._model.generate(
                    **inputs,
                    **config.to_generate_kwargs(),
                    pad_token_id=self._tokenizer.pad_token_id,
                    eos_token_id=self._tokenizer.eos_token_id,
                )

            new_tokens = outputs[0, prompt_tokens:]
            completion_tokens = len(new_tokens)
            generated_text = self._tokenizer.decode(
                new_tokens,
                skip_special_tokens=True,
            )

            finish_reason = "stop"
            if completion_tokens >= config.max_new_tokens:
                finish_reason = "length"

            return GenerationResult(
                text=generated_text.strip(),
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                finish_reason=finish_reason,
                model_name=self.model_name,
            )

        except Exception as e:
            self.logger.error(f"Generation failed: {e}")
            self.metrics.increment("llm_errors")
            raise InferenceError(
                "Generation failed",
                details={"error": str(e), "model": self.model_name},
            ) from e

        finally:
            self.metrics.increment("llm_calls")
            self.metrics.observe(
                "llm_latency_ms", (time.perf_counter() - start_time) * 1000)

    async def complete(self, prompt: str) -> str:
        """Generate a completion without blocking the event loop."""
        result = await asyncio.to_thread(self.generate, prompt)
        return result.text

    def __repr__(self) -> str:
        status = "loaded" if self._loaded else "not loaded"
        return f"LocalLLM(model={self.model_name!r}, {status})"
