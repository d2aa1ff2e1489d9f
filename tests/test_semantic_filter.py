"""
Tests for the semantic filter and summarizer.
"""

import pytest

from search_service.config import FilterSettings
from search_service.core.exceptions import EmbeddingError
from search_service.llm.prompt_templates import SUMMARIZE_PAGE, build_summary_prompt
from search_service.understanding import SemanticFilter, Summarizer, TextChunker


def topic_text() -> str:
    topics = ["rockets launch orbit", "bread flour yeast", "guitar chords strings"]
    return "\n\n".join(" ".join([topic] * 8) for topic in topics)


class TestSemanticFilter:
    """Tests for SemanticFilter."""

    @pytest.fixture
    def semantic_filter(self, embedder) -> SemanticFilter:
        return SemanticFilter(embedder, TextChunker(chunk_size=200, overlap=20), top_k=1)

    @pytest.mark.asyncio
    async def test_keeps_most_similar_chunk(self, semantic_filter: SemanticFilter):
        result = await semantic_filter.filter(topic_text(), "bread")

        assert "bread flour yeast" in result
        assert "rockets" not in result
        assert "guitar" not in result

    @pytest.mark.asyncio
    async def test_results_joined_by_blank_lines(self, embedder):
        semantic_filter = SemanticFilter(embedder, TextChunker(chunk_size=200, overlap=20), top_k=3)

        result = await semantic_filter.filter(topic_text(), "guitar strings")

        parts = result.split("\n\n")
        assert len(parts) == 3
        assert parts[0].startswith("guitar")

    @pytest.mark.asyncio
    async def test_empty_text(self, semantic_filter: SemanticFilter, embedder):
        assert await semantic_filter.filter("   ", "anything") == ""
        assert embedder.calls == []

    @pytest.mark.asyncio
    async def test_embedding_errors_propagate(self):
        class BrokenEmbedder:
            def embed_batch(self, texts):
                raise EmbeddingError("model missing")

        semantic_filter = SemanticFilter(BrokenEmbedder())

        with pytest.raises(EmbeddingError):
            await semantic_filter.filter("some text", "query")

    def test_from_settings(self, embedder):
        semantic_filter = SemanticFilter.from_settings(embedder, FilterSettings())

        assert semantic_filter.top_k == 20
        assert semantic_filter.chunker.chunk_size == 2000
        assert semantic_filter.chunker.overlap == 200


class TestSummaryPrompt:
    """Tests for the summarization prompt."""

    def test_contains_text(self):
        assert build_summary_prompt("Body text").startswith("Text: Body text\n")

    def test_focus_clause(self):
        prompt = build_summary_prompt("Body", "prices")
        assert 'summary of the above text, with a focus on "prices".' in prompt

    def test_no_focus_clause(self):
        prompt = build_summary_prompt("Body")
        assert "summary of the above text. Your summary" in prompt

    def test_requires_same_language(self):
        assert "same language" in SUMMARIZE_PAGE.user

    def test_braces_in_text_are_safe(self):
        assert "{not a field}" in build_summary_prompt("code {not a field}")


class TestSummarizer:
    """Tests for Summarizer."""

    @pytest.mark.asyncio
    async def test_returns_completion_verbatim(self, completion_model):
        completion_model.reply = "  Overview...\n\nKey points...  "

        result = await Summarizer(completion_model).summarize("page text")

        assert result == "  Overview...\n\nKey points...  "

    @pytest.mark.asyncio
    async def test_failure_becomes_error_text(self, completion_model):
        completion_model.error = TimeoutError("took too long")

        result = await Summarizer(completion_model).summarize("page text", "topic")

        assert result == "Error: failed to summarize text: took too long"

    @pytest.mark.asyncio
    async def test_empty_search_text_means_no_focus(self, completion_model):
        await Summarizer(completion_model).summarize("page text", "")

        assert "with a focus on" not in completion_model.prompts[0]
