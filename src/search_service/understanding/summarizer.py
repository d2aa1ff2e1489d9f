"""
Page summarization through a completion model.
"""

import logging

from search_service.llm.base import CompletionModel
from search_service.llm.prompt_templates import build_summary_prompt
from search_service.utils.logging import get_logger


class Summarizer:
    """
    Summarize page text with a completion model.

    Failures never propagate; they come back as an ``Error:`` string
    the caller can show as-is.
    """

    def __init__(
        self,
        model: CompletionModel,
        logger: logging.Logger | None = None,
    ) -> None:
        self.model = model
        self.logger = logger or get_logger(__name__)

    async def summarize(self, text: str, search_text: str | None = None) -> str:
        """
        Summarize ``text``, optionally focusing on ``search_text``.

        Returns:
            The completion verbatim, or an error description
        """
        prompt = build_summary_prompt(text, search_text or None)
        try:
            return await self.model.complete(prompt)
        except Exception as e:
            self.logger.error(f"Summarization failed: {e}")
            return f"Error: failed to summarize text: {e}"
