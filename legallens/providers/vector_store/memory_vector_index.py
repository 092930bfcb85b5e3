"""In-memory cosine-similarity index over one document's chunks.

Built at query time from a persisted :class:`ChunkSet` and its embeddings.
Vectors are L2-normalised once on construction so a search is a single
matrix-vector product.  Never persisted: the chunk set is the durable half.
"""

from __future__ import annotations

import numpy as np

from legallens.models.rag import DocumentChunk, RetrievedChunk


class InMemoryVectorIndex:
    """Dense vector index for a single (user, document) pair.

    Parameters
    ----------
    chunks:
        The document's chunks, in source order.
    embeddings:
        One vector per chunk, positionally aligned with *chunks*.
    """

    def __init__(self, chunks: list[DocumentChunk], embeddings: list[list[float]]) -> None:
        if len(chunks) != len(embeddings):
            raise ValueError(
                f"Got {len(embeddings)} embeddings for {len(chunks)} chunks"
            )
        self._chunks = list(chunks)
        matrix = np.asarray(embeddings, dtype=np.float32)
        if matrix.size == 0:
            matrix = matrix.reshape(0, 0)
        self._matrix = _normalise_rows(matrix)

    def __len__(self) -> int:
        return len(self._chunks)

    @property
    def dimension(self) -> int:
        return int(self._matrix.shape[1]) if self._matrix.ndim == 2 else 0

    @property
    def chunks(self) -> list[DocumentChunk]:
        return list(self._chunks)

    def search(self, query_embedding: list[float], k: int = 4) -> list[RetrievedChunk]:
        """Return up to *k* chunks ordered by descending cosine similarity.

        Ties keep source order.  ``k`` below 1 is treated as 1.
        """
        if not self._chunks:
            return []
        query = np.asarray(query_embedding, dtype=np.float32)
        if query.shape != (self.dimension,):
            raise ValueError(
                f"Query dimension {query.shape[-1] if query.ndim else 0} "
                f"does not match index dimension {self.dimension}"
            )
        norm = np.linalg.norm(query)
        if norm > 0:
            query = query / norm

        scores = self._matrix @ query
        k = min(max(1, k), len(self._chunks))
        # Stable sort on the negated scores keeps earlier chunks first on ties.
        order = np.argsort(-scores, kind="stable")[:k]
        return [
            RetrievedChunk(
                chunk=self._chunks[i],
                similarity_score=float(np.clip(scores[i], -1.0, 1.0)),
            )
            for i in order
        ]


def _normalise_rows(matrix: np.ndarray) -> np.ndarray:
    if matrix.ndim != 2 or matrix.shape[0] == 0:
        return matrix
    norms = np.linalg.norm(matrix, axis=1, keepdims=True)
    norms[norms == 0] = 1.0
    return matrix / norms
