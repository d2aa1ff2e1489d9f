"""
LLM module for the search service.

Provides the completion backends used for page summaries:
- Local LLM using Hugging Face Transformers
- OpenAI-compatible streaming API client
"""

from search_service.llm.base import CompletionModel, create_completion_model
from search_service.llm.local_llm import (
    LocalLLM,
    GenerationConfig,
    GenerationResult,
    ConversationMessage,
)
from search_service.llm.api_llm import APILLM
from search_service.llm.prompt_templates import (
    PromptTemplate,
    SUMMARIZE_PAGE,
    build_summary_prompt,
)

__all__ = [
    "CompletionModel",
    "create_completion_model",
    # Local LLM
    "LocalLLM",
    "GenerationConfig",
    "GenerationResult",
    "ConversationMessage",
    # API LLM
    "APILLM",
    # Prompts
    "PromptTemplate",
    "SUMMARIZE_PAGE",
    "build_summary_prompt",
]
