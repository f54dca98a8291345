"""In-memory vector index."""

import logging
import math
from typing import Optional, Sequence

from ..exceptions import DimensionMismatch, EmptyIndex
from .document import Chunk, SearchResult

logger = logging.getLogger(__name__)


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Calculate cosine similarity between two vectors."""
    if len(a) != len(b):
        raise DimensionMismatch(len(a), len(b))

    dot_product = sum(x * y for x, y in zip(a, b))
    norm_a = math.sqrt(sum(x * x for x in a))
    norm_b = math.sqrt(sum(x * x for x in b))

    if norm_a == 0 or norm_b == 0:
        return 0.0

    return dot_product / (norm_a * norm_b)


class InMemoryIndex:
    """Exact nearest-neighbour index over one document's chunks.

    Stores every vector in memory and scans all of them per query. The
    index is populated once through :meth:`build` and is read-only
    afterwards.
    """

    def __init__(
        self,
        chunks: Sequence[Chunk] = (),
        embeddings: Sequence[Sequence[float]] = (),
        dimension: Optional[int] = None,
    ) -> None:
        if len(chunks) != len(embeddings):
            raise ValueError("Number of chunks must match number of embeddings")

        if dimension is None and embeddings:
            dimension = len(embeddings[0])

        for chunk, embedding in zip(chunks, embeddings):
            if len(embedding) != dimension:
                raise DimensionMismatch(dimension, len(embedding), chunk_id=chunk.id)

        ordered = sorted(zip(chunks, embeddings), key=lambda pair: pair[0].index)
        self._chunks: tuple[Chunk, ...] = tuple(chunk for chunk, _ in ordered)
        self._embeddings: tuple[tuple[float, ...], ...] = tuple(
            tuple(float(x) for x in embedding) for _, embedding in ordered
        )
        self._by_id: dict[str, int] = {chunk.id: i for i, chunk in enumerate(self._chunks)}
        self._dimension = dimension

        if len(self._by_id) != len(self._chunks):
            raise ValueError("Chunk ids must be unique within an index")

    @classmethod
    def build(
        cls,
        chunks: Sequence[Chunk],
        embeddings: Sequence[Sequence[float]],
        dimension: Optional[int] = None,
    ) -> "InMemoryIndex":
        """Validate all pairs and return a ready index.

        Args:
            chunks: Chunks in any order
            embeddings: One vector per chunk, same order as ``chunks``
            dimension: Expected vector length (defaults to the first vector's)

        Raises:
            DimensionMismatch: If any vector has the wrong length
            ValueError: If the counts differ or chunk ids repeat
        """
        index = cls(chunks, embeddings, dimension)
        logger.debug(f"Built in-memory index with {len(index)} chunks (dim={index.dimension})")
        return index

    @property
    def dimension(self) -> Optional[int]:
        return self._dimension

    @property
    def chunks(self) -> tuple[Chunk, ...]:
        return self._chunks

    def __len__(self) -> int:
        return len(self._chunks)

    def get(self, id: str) -> Optional[Chunk]:
        """Get a chunk by its ID."""
        position = self._by_id.get(id)
        return self._chunks[position] if position is not None else None

    def embedding_for(self, id: str) -> Optional[tuple[float, ...]]:
        """Get the stored vector of a chunk."""
        position = self._by_id.get(id)
        return self._embeddings[position] if position is not None else None

    def search(self, query_embedding: Sequence[float], k: int = 2) -> list[SearchResult]:
        """Return the ``k`` most similar chunks.

        Results are sorted by descending cosine similarity; equal scores
        keep chunk sequence order.
        """
        if not self._chunks:
            raise EmptyIndex()

        if len(query_embedding) != self._dimension:
            raise DimensionMismatch(self._dimension, len(query_embedding), chunk_id="<query>")

        similarities = [
            (cosine_similarity(query_embedding, embedding), chunk)
            for chunk, embedding in zip(self._chunks, self._embeddings)
        ]

        similarities.sort(key=lambda pair: (-pair[0], pair[1].index))

        return [
            SearchResult(chunk=chunk, score=score, rank=rank)
            for rank, (score, chunk) in enumerate(similarities[:k], 1)
        ]
