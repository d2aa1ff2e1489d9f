"""
Text chunking for semantic filtering.

Splits structured page text into overlapping chunks, preferring
paragraph, then line, then word boundaries over hard cuts.
"""

import logging
from dataclasses import dataclass

from search_service.config.settings import FilterSettings
from search_service.utils.logging import get_logger

DEFAULT_SEPARATORS = ("\n\n", "\n", " ", "")


@dataclass
class Chunk:
    """A chunk of text from a larger document."""

    text: str
    index: int  # Position in sequence of chunks

    @property
    def char_count(self) -> int:
        return len(self.text)

    def __repr__(self) -> str:
        preview = self.text[:50] + "..." if len(self.text) > 50 else self.text
        return f"Chunk(index={self.index}, chars={self.char_count}, text={preview!r})"


class TextChunker:
    """
    Recursive, boundary-aware text splitter.

    The text is split on the coarsest separator present; pieces that
    are still longer than ``chunk_size`` are split again on the next
    finer separator. Pieces are then merged back into chunks of up to
    ``chunk_size`` characters, and each new chunk starts with the
    trailing pieces of the previous one, up to ``overlap`` characters.

    Example:
        >>> chunker = TextChunker(chunk_size=2000, overlap=200)
        >>> for chunk in chunker.chunk(page_text):
        ...     print(chunk.index, chunk.char_count)
    """

    def __init__(
        self,
        chunk_size: int = 2000,
        overlap: int = 200,
        separators: tuple[str, ...] = DEFAULT_SEPARATORS,
        logger: logging.Logger | None = None,
    ) -> None:
        """
        Initialize chunker.

        Args:
            chunk_size: Target maximum characters per chunk
            overlap: Characters carried over between consecutive chunks
            separators: Separators from coarsest to finest; ``""``
                splits into single characters
            logger: Logger to use (defaults to the module logger)

        Raises:
            ValueError: If overlap is not smaller than chunk_size
        """
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if overlap < 0 or overlap >= chunk_size:
            raise ValueError(
                f"overlap ({overlap}) must be in [0, chunk_size={chunk_size})")

        self.chunk_size = chunk_size
        self.overlap = overlap
        self.separators = separators
        self.logger = logger or get_logger(__name__)

    @classmethod
    def from_settings(
        cls,
        settings: FilterSettings,
        logger: logging.Logger | None = None,
    ) -> "TextChunker":
        return cls(
            chunk_size=settings.chunk_size,
            overlap=settings.chunk_overlap,
            logger=logger,
        )

    def split_text(self, text: str) -> list[str]:
        """
        Split text into chunk strings.

        Args:
            text: Text to split

        Returns:
            Non-empty, stripped chunk strings in document order
        """
        if not text or not text.strip():
            return []
        return self._split(text, self.separators)

    def chunk(self, text: str) -> list[Chunk]:
        """Split text into indexed Chunk objects."""
        chunks = [
            Chunk(text=piece, index=i)
            for i, piece in enumerate(self.split_text(text))
        ]
        self.logger.debug(f"Split {len(text)} chars into {len(chunks)} chunks")
        return chunks

    def _split(self, text: str, separators: tuple[str, ...]) -> list[str]:
        # Coarsest separator that occurs in the text
        separator = separators[-1]
        finer: tuple[str, ...] = ()
        for i, candidate in enumerate(separators):
            if candidate == "" or candidate in text:
                separator = candidate
                finer = separators[i + 1:]
                break

        pieces = list(text) if separator == "" else text.split(separator)

        chunks: list[str] = []
        pending: list[str] = []
        for piece in pieces:
            if not piece:
                continue
            if len(piece) <= self.chunk_size:
                pending.append(piece)
                continue

            if pending:
                chunks.extend(self._merge(pending, separator))
                pending = []
            if finer:
                chunks.extend(self._split(piece, finer))
            else:
                chunks.append(piece)

        if pending:
            chunks.extend(self._merge(pending, separator))
        return chunks

    def _merge(self, pieces: list[str], separator: str) -> list[str]:
        """Greedily join pieces into chunks, carrying an overlap tail."""
        sep_len = len(separator)
        chunks: list[str] = []
        current: list[str] = []
        total = 0

        for piece in pieces:
            extra = len(piece) + (sep_len if current else 0)
            if current and total + extra > self.chunk_size:
                joined = separator.join(current).strip()
                if joined:
                    chunks.append(joined)

                # Drop leading pieces until the tail fits the overlap
                # and leaves room for the next piece
                while current and (
                    total > self.overlap
                    or total + len(piece) + (sep_len if current else 0) > self.chunk_size
                ):
                    total -= len(current[0]) + (sep_len if len(current) > 1 else 0)
                    current.pop(0)

            current.append(piece)
            total += len(piece) + (sep_len if len(current) > 1 else 0)

        joined = separator.join(current).strip()
        if joined:
            chunks.append(joined)
        return chunks
