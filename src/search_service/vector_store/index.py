"""
In-memory vector index for similarity search.

Holds the embeddings of one page's chunks for the duration of a single
filter call. Search is exact (brute force) cosine similarity.
"""

from typing import Sequence

import numpy as np


class VectorIndex:
    """
    Ephemeral cosine-similarity index.

    Example:
        >>> index = VectorIndex(dimensions=384)
        >>> index.add(ids=[0, 1, 2], vectors=embeddings)
        >>> for id_, score in index.search(query_vector, top_k=2):
        ...     print(f"ID: {id_}, Score: {score:.3f}")
    """

    def __init__(self, dimensions: int) -> None:
        """
        Initialize vector index.

        Args:
            dimensions: Vector dimensionality
        """
        self.dimensions = dimensions
        self._vectors = np.zeros((0, dimensions), dtype=np.float32)
        self._ids: list[int] = []

    @property
    def size(self) -> int:
        """Number of vectors in index."""
        return len(self._ids)

    @property
    def is_empty(self) -> bool:
        return self.size == 0

    def add(self, ids: Sequence[int], vectors: np.ndarray) -> None:
        """
        Add vectors to the index.

        Args:
            ids: Identifiers for the vectors
            vectors: Vector matrix (n_vectors, dimensions)

        Raises:
            ValueError: If dimensions or counts don't match
        """
        if len(ids) == 0:
            return

        vectors = np.asarray(vectors, dtype=np.float32)
        if vectors.ndim == 1:
            vectors = vectors.reshape(1, -1)

        if vectors.shape[1] != self.dimensions:
            raise ValueError(
                f"Vector dimensions {vectors.shape[1]} don't match "
                f"index dimensions {self.dimensions}"
            )
        if vectors.shape[0] != len(ids):
            raise ValueError(
                f"Got {vectors.shape[0]} vectors for {len(ids)} ids")

        self._vectors = np.vstack([self._vectors, _normalize(vectors)])
        self._ids.extend(int(id_) for id_ in ids)

    def search(self, query: np.ndarray, top_k: int = 10) -> list[tuple[int, float]]:
        """
        Find the vectors most similar to ``query``.

        Args:
            query: Query vector
            top_k: Number of results to return

        Returns:
            List of (id, score) tuples sorted by score descending;
            ties keep insertion order
        """
        if self.is_empty or top_k <= 0:
            return []

        query = _normalize(np.asarray(query, dtype=np.float32).reshape(1, -1))
        scores = np.dot(self._vectors, query[0])

        order = np.argsort(-scores, kind="stable")[:top_k]
        return [(self._ids[i], float(scores[i])) for i in order]

    def __len__(self) -> int:
        return self.size

    def __repr__(self) -> str:
        return f"VectorIndex(dimensions={self.dimensions}, size={self.size})"


def _normalize(vectors: np.ndarray) -> np.ndarray:
    norms = np.linalg.norm(vectors, axis=1, keepdims=True)
    return vectors / np.maximum(norms, 1e-10)
