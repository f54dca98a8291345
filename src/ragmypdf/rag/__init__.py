"""RAG (Retrieval-Augmented Generation) core for rag-my-pdf.

This module provides:
- Document, chunk and retrieval result data structures
- Word-window chunking with overlap
- Embedding providers (OpenAI, fake, static)
- An exact in-memory cosine-similarity index
- Top-K vector retrieval
- Prompt assembly under a context word budget
- Retry/timeout decorators for network collaborators
- The pipeline context object that ties them together

Example:
    ```python
    from ragmypdf.rag import RAGPipeline, Document, FakeEmbedding

    pipeline = RAGPipeline(FakeEmbedding(), provider)
    await pipeline.build(Document(id="1", content="The answer to life is 42 by the way"))
    answer = await pipeline.ask("What is the answer to life?")
    ```
"""

# Data structures
from .document import Document, Chunk, Query, SearchResult, RetrievalResult

# Base classes
from .base import BaseEmbedding, BaseRetriever, BaseChunker

# Components
from .embeddings import OpenAIEmbedding, FakeEmbedding, StaticEmbedding
from .vectorstore import InMemoryIndex, cosine_similarity
from .chunking import WordChunker, split_words
from .retriever import VectorRetriever
from .prompt import (
    DEFAULT_SYSTEM_PROMPT,
    ChatTurn,
    CompletionRequest,
    PromptAssembler,
    count_words,
)
from .retry import RetryingEmbedding, RetryingProvider, call_with_retry

# Pipeline
from .pipeline import Answer, RAGPipeline

__all__ = [
    # Data structures
    "Document",
    "Chunk",
    "Query",
    "SearchResult",
    "RetrievalResult",
    # Base classes
    "BaseEmbedding",
    "BaseRetriever",
    "BaseChunker",
    # Embeddings
    "OpenAIEmbedding",
    "FakeEmbedding",
    "StaticEmbedding",
    # Index
    "InMemoryIndex",
    "cosine_similarity",
    # Chunking
    "WordChunker",
    "split_words",
    # Retrieval
    "VectorRetriever",
    # Prompt
    "DEFAULT_SYSTEM_PROMPT",
    "ChatTurn",
    "CompletionRequest",
    "PromptAssembler",
    "count_words",
    # Retry
    "RetryingEmbedding",
    "RetryingProvider",
    "call_with_retry",
    # Pipeline
    "Answer",
    "RAGPipeline",
]
