"""
Chat completions over an OpenAI-compatible HTTP API.

Requests are streamed and read as server-sent events; the deltas are
concatenated into the final completion.
"""

import json
import logging
import os
import time

import httpx

from search_service.config.settings import APILLMSettings
from search_service.core.exceptions import InferenceError, NetworkError
from search_service.utils.logging import get_logger
from search_service.utils.metrics import Metrics
from search_service.utils.sse import DONE, sse_iterable


class APILLM:
    """
    Streaming client for an OpenAI-compatible ``/chat/completions`` API.

    Example:
        >>> llm = APILLM.from_settings(settings.llm.api)
        >>> summary = await llm.complete("Summarize this text: ...")
        >>> await llm.aclose()
    """

    def __init__(
        self,
        base_url: str = "https://api.openai.com/v1",
        model_name: str = "gpt-4o-mini",
        api_key: str | None = None,
        max_tokens: int = 1024,
        temperature: float = 0.3,
        timeout: float = 120.0,
        client: httpx.AsyncClient | None = None,
        metrics: Metrics | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """
        Initialize the API client.

        Args:
            base_url: Base URL of the API, without the endpoint path
            model_name: Model identifier sent with each request
            api_key: Bearer token; omitted from requests when None
            max_tokens: Maximum tokens in a completion
            temperature: Sampling temperature
            timeout: Request timeout in seconds
            client: HTTP client to use (one is created when None)
            metrics: Metrics collector for call counts and latency
            logger: Logger to use (defaults to the module logger)
        """
        self.base_url = base_url.rstrip("/")
        self.model_name = model_name
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.metrics = metrics or Metrics()
        self.logger = logger or get_logger(__name__)

        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self._headers = headers

        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_settings(
        cls,
        settings: APILLMSettings,
        client: httpx.AsyncClient | None = None,
        metrics: Metrics | None = None,
        logger: logging.Logger | None = None,
    ) -> "APILLM":
        """
        Create APILLM from API settings.

        The key is read from the environment variable named by
        ``settings.api_key_env_var``.
        """
        return cls(
            base_url=settings.base_url,
            model_name=settings.model_name,
            api_key=os.environ.get(settings.api_key_env_var),
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
            timeout=settings.timeout_seconds,
            client=client,
            metrics=metrics,
            logger=logger,
        )

    def _build_payload(self, prompt: str) -> dict:
        return {
            "model": self.model_name,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
            "stream": True,
        }

    async def complete(self, prompt: str) -> str:
        """
        Request a completion and collect the streamed deltas.

        Args:
            prompt: User prompt

        Returns:
            Completion text

        Raises:
            NetworkError: On transport failures or error status codes
            InferenceError: If the stream carries malformed events
        """
        start_time = time.perf_counter()
        parts: list[str] = []

        try:
            async with self._client.stream(
                "POST",
                f"{self.base_url}/chat/completions",
                json=self._build_payload(prompt),
                headers=self._headers,
            ) as response:
                async for payload in sse_iterable(response):
                    if payload == DONE:
                        break
                    parts.append(_delta_content(payload))

        except httpx.HTTPError as e:
            self.metrics.increment("llm_errors")
            raise NetworkError(f"API request failed: {e}") from e
        except NetworkError:
            self.metrics.increment("llm_errors")
            raise
        finally:
            self.metrics.increment("llm_calls")
            self.metrics.observe(
                "llm_latency_ms", (time.perf_counter() - start_time) * 1000)

        return "".join(parts)

    async def aclose(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    def __repr__(self) -> str:
        return f"APILLM(base_url={self.base_url!r}, model={self.model_name!r})"


def _delta_content(payload: str) -> str:
    """Pull ``choices[0].delta.content`` out of one stream event."""
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise InferenceError(
            "Malformed stream event",
            details={"payload": payload[:200]},
        ) from e

    choices = data.get("choices") or []
    if not choices:
        return ""
    return (choices[0].get("delta") or {}).get("content") or ""
