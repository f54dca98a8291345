"""
rag-my-pdf - Ask questions about a PDF with retrieval-augmented generation.
"""

from ragmypdf.exceptions import (
    CollaboratorUnavailable,
    DimensionMismatch,
    EmptyIndex,
    InvalidConfiguration,
    NoContext,
    PDFLoadError,
    RagError,
)
from ragmypdf.pdf import load_pdf_content
from ragmypdf.providers import LLMProvider, LLMResponse, OpenAIProvider
from ragmypdf.rag import (
    Answer,
    Chunk,
    CompletionRequest,
    Document,
    FakeEmbedding,
    InMemoryIndex,
    OpenAIEmbedding,
    PromptAssembler,
    RAGPipeline,
    RetrievalResult,
    RetryingEmbedding,
    RetryingProvider,
    SearchResult,
    VectorRetriever,
    WordChunker,
)
from ragmypdf.utils import RAGConfig, RetryPolicy, load_config

__version__ = "0.1.0"
__all__ = [
    # Errors
    "RagError",
    "InvalidConfiguration",
    "DimensionMismatch",
    "EmptyIndex",
    "NoContext",
    "CollaboratorUnavailable",
    "PDFLoadError",
    # Pipeline
    "RAGPipeline",
    "Answer",
    "Document",
    "Chunk",
    "SearchResult",
    "RetrievalResult",
    "CompletionRequest",
    # Components
    "WordChunker",
    "InMemoryIndex",
    "VectorRetriever",
    "PromptAssembler",
    "OpenAIEmbedding",
    "FakeEmbedding",
    "RetryingEmbedding",
    "RetryingProvider",
    # Providers
    "LLMProvider",
    "LLMResponse",
    "OpenAIProvider",
    # Config
    "RAGConfig",
    "RetryPolicy",
    "load_config",
    "load_pdf_content",
]
