"""Document, Chunk and retrieval result data structures for RAG."""

from typing import Any, Iterator, Optional
from pydantic import BaseModel, ConfigDict, Field


class Document(BaseModel):
    """Raw text extracted from a PDF.

    Attributes:
        id: Identifier for the document (the file stem for PDFs)
        content: The full extracted text
        metadata: Additional metadata about the document
        source: Optional source path
    """

    model_config = ConfigDict(frozen=True)

    id: str
    content: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    source: Optional[str] = None

    def __repr__(self) -> str:
        content_preview = self.content[:50] + "..." if len(self.content) > 50 else self.content
        return f"Document(id={self.id!r}, content={content_preview!r})"


class Chunk(BaseModel):
    """A contiguous word range of a document.

    Attributes:
        id: Unique identifier for the chunk
        document_id: ID of the parent document
        index: Sequence number of the chunk within its document
        content: The chunk words joined by single spaces
        metadata: Additional metadata (inherited from document + chunk-specific)
        start_word: First word position (inclusive)
        end_word: Last word position (exclusive)
        start_index: Start character offset in the original document
        end_index: End character offset in the original document
    """

    model_config = ConfigDict(frozen=True)

    id: str
    document_id: str
    index: int
    content: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    start_word: int = 0
    end_word: int = 0
    start_index: int = 0
    end_index: int = 0

    @property
    def word_count(self) -> int:
        return self.end_word - self.start_word

    def __repr__(self) -> str:
        content_preview = self.content[:30] + "..." if len(self.content) > 30 else self.content
        return (
            f"Chunk(id={self.id!r}, words=[{self.start_word}, {self.end_word}), "
            f"content={content_preview!r})"
        )


class Query(BaseModel):
    """A user question and the embedding derived from it."""

    model_config = ConfigDict(frozen=True)

    text: str
    embedding: list[float]


class SearchResult(BaseModel):
    """A single retrieved chunk.

    Attributes:
        chunk: The matching chunk
        score: Cosine similarity (higher is better)
        rank: 1-based position in the retrieval result
    """

    model_config = ConfigDict(frozen=True)

    chunk: Chunk
    score: float
    rank: int = 1

    def __repr__(self) -> str:
        return f"SearchResult(chunk_id={self.chunk.id!r}, score={self.score:.4f}, rank={self.rank})"


class RetrievalResult(BaseModel):
    """Ordered retrieval hits, descending by score."""

    model_config = ConfigDict(frozen=True)

    hits: list[SearchResult] = Field(default_factory=list)
    query: Optional[Query] = None

    def __iter__(self) -> Iterator[SearchResult]:  # type: ignore[override]
        return iter(self.hits)

    def __len__(self) -> int:
        return len(self.hits)

    def __getitem__(self, item: int) -> SearchResult:
        return self.hits[item]

    @property
    def chunks(self) -> list[Chunk]:
        return [hit.chunk for hit in self.hits]

    @property
    def scores(self) -> list[float]:
        return [hit.score for hit in self.hits]
