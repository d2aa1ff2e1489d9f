"""
Prompt templates for LLM operations.

Holds the page summarization prompt used by the browser tool's
``summarize`` action.
"""

from dataclasses import dataclass
from typing import Any


@dataclass
class PromptTemplate:
    """
    A reusable prompt template with variable substitution.

    Example:
        >>> template = PromptTemplate(
        ...     name="echo",
        ...     user="Repeat this text:\\n\\n{text}",
        ... )
        >>> prompt = template.format_user(text="Hello")
    """

    name: str
    user: str
    system: str = ""

    def format(self, **kwargs: Any) -> dict[str, str]:
        """
        Format the template with provided variables.

        Args:
            **kwargs: Variables to substitute

        Returns:
            Dictionary with formatted system and user prompts
        """
        return {
            "system": self.system.format(**kwargs) if kwargs else self.system,
            "user": self.format_user(**kwargs),
        }

    def format_user(self, **kwargs: Any) -> str:
        """Format just the user prompt."""
        return self.user.format(**kwargs) if kwargs else self.user


SUMMARIZE_PAGE = PromptTemplate(
    name="summarize_page",
    user=(
        "Text: {text}\n"
        "\n"
        "Please provide a comprehensive and objective summary of the above "
        "text{focus}. Your summary should be well-structured and thorough, "
        "including:\n"
        "\n"
        "1. An overview of the main topic or themes (1 paragraph)\n"
        "2. A detailed breakdown of key points, arguments, or findings "
        "(3-4 paragraphs)\n"
        "3. Important supporting evidence, data, or examples (1-2 paragraphs)\n"
        "4. Any contrasting viewpoints or limitations mentioned in the text "
        "(1 paragraph, if applicable)\n"
        "5. Implications or conclusions drawn from the main points "
        "(1 paragraph)\n"
        "\n"
        "Guidelines for the summary:\n"
        " - Organize the content into clear, logically flowing paragraphs\n"
        " - Maintain an objective tone throughout, avoiding sensationalism "
        "or bias\n"
        " - Use transitional phrases to connect ideas and ensure smooth flow "
        "between paragraphs\n"
        " - Include relevant quotes or statistics from the original text to "
        "support key points\n"
        " - If applicable, incorporate up to 5 important links from the text, "
        "contextually integrated into your summary\n"
        " - Ensure all information is accurate and derived from the provided "
        "text\n"
        " - IMPORTANT: Use the exact same language as the input text for "
        "your summary. Do not translate or change the language.\n"
        "\n"
        "Please aim for a balanced, informative summary that a reader could "
        "use to gain a comprehensive understanding of the original content.\n"
        "\n"
        "CRITICAL: Your summary MUST be in the same language as the original "
        "text. Do not translate or change the language under any "
        "circumstances."
    ),
)


def build_summary_prompt(text: str, search_text: str | None = None) -> str:
    """
    Build the summarization prompt for a page.

    Args:
        text: Page text to summarize
        search_text: Optional topic the summary should focus on

    Returns:
        Prompt string
    """
    focus = f', with a focus on "{search_text}"' if search_text else ""
    # str.format does not re-scan substituted values, so braces in page
    # text are safe here
    return SUMMARIZE_PAGE.format_user(text=text, focus=focus)
