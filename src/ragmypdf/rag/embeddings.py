"""Embedding model implementations."""

import asyncio
import hashlib
import logging
from typing import Any, Awaitable, Callable, Optional

from openai import AsyncOpenAI

from ..exceptions import DimensionMismatch
from .base import BaseEmbedding

logger = logging.getLogger(__name__)

# (operation name, request factory) -> awaited result of one API request
RequestRunner = Callable[[str, Callable[[], Awaitable[Any]]], Awaitable[Any]]


class OpenAIEmbedding(BaseEmbedding):
    """OpenAI embedding model.

    Uses OpenAI's embedding API. Batches are sent concurrently, bounded by
    ``max_concurrency``, and the call returns only once every batch is back.
    If one batch fails, the batches still in flight are cancelled.

    ``request_runner``, when set, wraps every single API request. The retry
    decorator installs one so that each batch is timed out and retried on
    its own.
    """

    # Known model dimensions
    MODEL_DIMENSIONS = {
        "text-embedding-ada-002": 1536,
        "text-embedding-3-small": 1536,
        "text-embedding-3-large": 3072,
    }

    def __init__(
        self,
        model: str = "text-embedding-ada-002",
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        batch_size: int = 100,
        max_concurrency: int = 4,
        client: Optional[AsyncOpenAI] = None,
    ):
        """Initialize the OpenAI embedding model.

        Args:
            model: Embedding model name
            api_key: OpenAI API key (optional, uses OPENAI_API_KEY if not provided)
            base_url: Optional base URL for API
            batch_size: Number of texts sent per request
            max_concurrency: Maximum number of requests in flight
            client: Pre-built client, mainly for tests
        """
        self.model = model
        self.api_key = api_key
        self.base_url = base_url
        self.batch_size = batch_size
        self.max_concurrency = max_concurrency
        self._client = client
        self._observed_dimension: Optional[int] = None
        self.request_runner: Optional[RequestRunner] = None

    @property
    def dimension(self) -> int:
        if self._observed_dimension is not None:
            return self._observed_dimension
        return self.MODEL_DIMENSIONS.get(self.model, 1536)

    def _observe(self, vector: list[float]) -> None:
        if self._observed_dimension is None:
            self._observed_dimension = len(vector)

    def _get_client(self) -> AsyncOpenAI:
        """Get or create the OpenAI client."""
        if self._client is None:
            kwargs = {}
            if self.api_key:
                kwargs["api_key"] = self.api_key
            if self.base_url:
                kwargs["base_url"] = self.base_url

            self._client = AsyncOpenAI(**kwargs)
        return self._client

    async def _request(self, operation: str, func: Callable[[], Awaitable[Any]]) -> Any:
        if self.request_runner is None:
            return await func()
        return await self.request_runner(operation, func)

    async def embed_documents(self, texts: list[str]) -> list[list[float]]:
        """Embed a list of documents using OpenAI API."""
        if not texts:
            return []

        client = self._get_client()
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def embed_batch(batch: list[str]) -> list[list[float]]:
            async with semaphore:
                response = await self._request(
                    "embed_documents",
                    lambda: client.embeddings.create(model=self.model, input=batch),
                )
            return [item.embedding for item in response.data]

        batches = [
            texts[i : i + self.batch_size]
            for i in range(0, len(texts), self.batch_size)
        ]
        logger.debug(f"Embedding {len(texts)} texts in {len(batches)} batches with {self.model}")

        tasks = [asyncio.ensure_future(embed_batch(batch)) for batch in batches]
        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        vectors = [vector for batch_vectors in results for vector in batch_vectors]
        self._observe(vectors[0])
        return vectors

    async def embed_query(self, text: str) -> list[float]:
        """Embed a single query using OpenAI API."""
        client = self._get_client()

        response = await self._request(
            "embed_query",
            lambda: client.embeddings.create(model=self.model, input=text),
        )

        vector = response.data[0].embedding
        self._observe(vector)
        return vector


class FakeEmbedding(BaseEmbedding):
    """Fake embedding that generates deterministic embeddings from text.

    Useful for offline runs and tests that need predictable vectors.
    The embedding is generated from the hash of the text.
    """

    def __init__(self, dimension: int = 64, seed: int = 42):
        self._dimension = dimension
        self.seed = seed

    @property
    def dimension(self) -> int:
        return self._dimension

    def _hash_text(self, text: str) -> list[float]:
        """Generate a deterministic embedding from text hash."""
        embedding: list[float] = []
        counter = 0

        while len(embedding) < self._dimension:
            digest = hashlib.sha256(f"{self.seed}:{counter}:{text}".encode()).digest()
            # Map each byte to [-1, 1]
            embedding.extend(byte / 127.5 - 1.0 for byte in digest)
            counter += 1

        return embedding[: self._dimension]

    async def embed_documents(self, texts: list[str]) -> list[list[float]]:
        return [self._hash_text(text) for text in texts]

    async def embed_query(self, text: str) -> list[float]:
        return self._hash_text(text)


class StaticEmbedding(BaseEmbedding):
    """Embedding backed by a fixed text-to-vector table.

    Texts missing from the table map to ``default``, or to a zero vector
    when no default is given.
    """

    def __init__(
        self,
        vectors: dict[str, list[float]],
        default: Optional[list[float]] = None,
    ):
        if not vectors and default is None:
            raise ValueError("StaticEmbedding needs at least one vector or a default")

        sample = default if default is not None else next(iter(vectors.values()))
        self._dimension = len(sample)

        for text, vector in vectors.items():
            if len(vector) != self._dimension:
                raise DimensionMismatch(self._dimension, len(vector), chunk_id=text[:30])

        self.vectors = dict(vectors)
        self.default = list(default) if default is not None else [0.0] * self._dimension
        self.calls: list[str] = []

    @property
    def dimension(self) -> int:
        return self._dimension

    async def embed_documents(self, texts: list[str]) -> list[list[float]]:
        self.calls.extend(texts)
        return [list(self.vectors.get(text, self.default)) for text in texts]

    async def embed_query(self, text: str) -> list[float]:
        self.calls.append(text)
        return list(self.vectors.get(text, self.default))
