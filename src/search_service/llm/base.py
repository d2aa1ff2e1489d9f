"""
Completion capability shared by the local and API backends.
"""

import logging
from typing import Protocol

from search_service.config import Settings
from search_service.llm.api_llm import APILLM
from search_service.llm.local_llm import LocalLLM
from search_service.utils.metrics import Metrics


class CompletionModel(Protocol):
    """Anything that turns a prompt into generated text."""

    async def complete(self, prompt: str) -> str: ...


def create_completion_model(
    settings: Settings,
    metrics: Metrics | None = None,
    logger: logging.Logger | None = None,
) -> CompletionModel:
    """
    Build the completion backend selected by ``settings.llm.provider``.

    Args:
        settings: Application settings
        metrics: Metrics collector passed to the backend
        logger: Logger passed to the backend

    Returns:
        LocalLLM or APILLM instance
    """
    if settings.llm.provider == "api":
        return APILLM.from_settings(settings.llm.api, metrics=metrics, logger=logger)
    return LocalLLM.from_settings(settings.llm.local, metrics=metrics, logger=logger)
