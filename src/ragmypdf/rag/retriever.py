"""Retriever implementations."""

import logging
from typing import Sequence

from ..exceptions import EmptyIndex, InvalidConfiguration
from .base import BaseEmbedding, BaseRetriever
from .document import Query, RetrievalResult
from .vectorstore import InMemoryIndex

logger = logging.getLogger(__name__)


class VectorRetriever(BaseRetriever):
    """Vector similarity retriever.

    Retrieves chunks based on cosine similarity between the query
    embedding and each indexed chunk embedding.
    """

    def __init__(
        self,
        embedding: BaseEmbedding,
        index: InMemoryIndex,
    ):
        """Initialize the vector retriever.

        Args:
            embedding: Embedding model for queries
            index: Index to search
        """
        self.embedding = embedding
        self.index = index

    def search(self, query_embedding: Sequence[float], k: int = 2) -> RetrievalResult:
        """Return the top-``k`` chunks for an already embedded query."""
        if k < 1:
            raise InvalidConfiguration(f"top_k must be at least 1, got {k}")
        if len(self.index) == 0:
            raise EmptyIndex()

        hits = self.index.search(query_embedding, k)
        return RetrievalResult(hits=hits)

    async def retrieve(self, query: str, k: int = 2) -> RetrievalResult:
        """Retrieve chunks using vector similarity."""
        if k < 1:
            raise InvalidConfiguration(f"top_k must be at least 1, got {k}")
        if len(self.index) == 0:
            raise EmptyIndex()

        # Embed the query
        query_embedding = await self.embedding.embed_query(query)

        result = self.search(query_embedding, k)
        logger.debug(
            f"Retrieved {len(result)} chunks for query (scores: "
            + ", ".join(f"{score:.3f}" for score in result.scores)
            + ")"
        )

        return RetrievalResult(
            hits=result.hits,
            query=Query(text=query, embedding=list(query_embedding)),
        )
