"""
Text embedding generation using sentence-transformers.

Used by the semantic filter to embed page chunks and queries.
The model is loaded lazily on first use.
"""

import gc
import logging
import threading
from pathlib import Path
from typing import Protocol, Sequence

import numpy as np
import torch
from sentence_transformers import SentenceTransformer

from search_service.config.settings import EmbeddingSettings
from search_service.core.exceptions import EmbeddingError
from search_service.utils.logging import get_logger


class EmbeddingModel(Protocol):
    """Anything that turns texts into a (n_texts, dimensions) matrix."""

    def embed_batch(self, texts: Sequence[str]) -> np.ndarray: ...


class Embedder:
    """
    Text embedding generator using sentence-transformers.

    Example:
        >>> embedder = Embedder.from_settings(settings.embedding)
        >>> vectors = embedder.embed_batch(["First text", "Second text"])
        >>> print(vectors.shape)
    """

    def __init__(
        self,
        model_name: str = "sentence-transformers/all-MiniLM-L6-v2",
        device: str = "cpu",
        batch_size: int = 32,
        normalize: bool = True,
        cache_dir: Path | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """
        Initialize embedder.

        Args:
            model_name: HuggingFace model identifier
            device: Device to run on (cpu, cuda, mps)
            batch_size: Batch size for encoding
            normalize: Whether to L2-normalize embeddings
            cache_dir: Directory to cache models
            logger: Logger to use (defaults to the module logger)
        """
        self.model_name = model_name
        self.device = device
        self.batch_size = batch_size
        self.normalize = normalize
        self.cache_dir = str(cache_dir) if cache_dir else None
        self.logger = logger or get_logger(__name__)

        self._model: SentenceTransformer | None = None
        self._lock = threading.Lock()
        self._dimensions: int | None = None

    @classmethod
    def from_settings(
        cls,
        settings: EmbeddingSettings,
        logger: logging.Logger | None = None,
    ) -> "Embedder":
        """
        Create Embedder from embedding settings.

        Args:
            settings: Embedding settings

        Returns:
            Configured Embedder instance
        """
        return cls(
            model_name=settings.model_name,
            device=settings.device,
            batch_size=settings.batch_size,
            normalize=settings.normalize_embeddings,
            cache_dir=settings.cache_dir,
            logger=logger,
        )

    @property
    def is_loaded(self) -> bool:
        return self._model is not None

    @property
    def dimensions(self) -> int:
        """Get embedding dimensions (loads model if needed)."""
        self.load()
        return self._dimensions

    def load(self) -> None:
        """
        Load the embedding model.

        Thread-safe lazy loading on first use.

        Raises:
            EmbeddingError: If model loading fails
        """
        if self._model is not None:
            return

        with self._lock:
            if self._model is not None:
                return

            self.logger.info(f"Loading embedding model: {self.model_name}")

            try:
                model = SentenceTransformer(
                    self.model_name,
                    device=self.device,
                    cache_folder=self.cache_dir,
                )
            except Exception as e:
                raise EmbeddingError(
                    f"Failed to load embedding model {self.model_name}",
                    details={"error": str(e), "model": self.model_name},
                ) from e

            self._dimensions = model.get_sentence_embedding_dimension()
            self._model = model
            self.logger.info(
                f"Embedding model loaded (dimensions={self._dimensions})")

    def unload(self) -> None:
        """Unload model to free memory."""
        with self._lock:
            if self._model is None:
                return

            self._model = None
            gc.collect()
            if torch.cuda.is_available():
                torch.cuda.empty_cache()

            self.logger.info("Embedding model unloaded")

    def embed_batch(self, texts: Sequence[str]) -> np.ndarray:
        """
        Generate embeddings for multiple texts.

        Args:
            texts: Sequence of texts to embed

        Returns:
            NumPy array of shape (n_texts, dimensions)

        Raises:
            EmbeddingError: If embedding generation fails
        """
        if not texts:
            return np.zeros((0, 0), dtype=np.float32)

        self.load()

        try:
            return self._model.encode(
                list(texts),
                normalize_embeddings=self.normalize,
                batch_size=self.batch_size,
                show_progress_bar=False,
                convert_to_numpy=True,
            )
        except Exception as e:
            raise EmbeddingError(
                "Batch embedding generation failed",
                details={"error": str(e), "batch_size": len(texts)},
            ) from e

    def embed(self, text: str) -> np.ndarray:
        """Embed a single text; returns a (dimensions,) vector."""
        return self.embed_batch([text])[0]

    def __repr__(self) -> str:
        status = "loaded" if self.is_loaded else "not loaded"
        return f"Embedder(model={self.model_name!r}, {status})"
