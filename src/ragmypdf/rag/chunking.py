"""Document chunking strategies."""

import re

from ..exceptions import InvalidConfiguration
from .base import BaseChunker
from .document import Chunk, Document

_WORD_RE = re.compile(r"\S+")


def split_words(text: str) -> list[tuple[str, int, int]]:
    """Split text into whitespace-delimited words.

    Returns:
        List of (word, start_char, end_char) spans in text order
    """
    return [(m.group(), m.start(), m.end()) for m in _WORD_RE.finditer(text)]


class WordChunker(BaseChunker):
    """Chunk documents into overlapping windows of whole words.

    A window of ``chunk_size`` words slides across the document, advancing
    ``chunk_size - overlap`` words each step. The last window may be shorter
    than ``chunk_size``.
    """

    def __init__(
        self,
        chunk_size: int = 500,
        overlap: int = 50,
    ):
        """Initialize the word chunker.

        Args:
            chunk_size: Maximum words per chunk
            overlap: Number of words shared by consecutive chunks
        """
        if chunk_size <= 0:
            raise InvalidConfiguration(f"chunk_size must be positive, got {chunk_size}")
        if overlap < 0:
            raise InvalidConfiguration(f"chunk_overlap must not be negative, got {overlap}")
        if overlap >= chunk_size:
            raise InvalidConfiguration(
                f"chunk_overlap ({overlap}) must be less than chunk_size ({chunk_size})"
            )

        self.chunk_size = chunk_size
        self.overlap = overlap

    @property
    def step(self) -> int:
        return self.chunk_size - self.overlap

    def chunk(self, document: Document) -> list[Chunk]:
        """Split document into word windows."""
        words = split_words(document.content)
        chunks = []

        start = 0
        chunk_index = 0

        while start < len(words):
            end = min(start + self.chunk_size, len(words))
            window = words[start:end]

            chunks.append(Chunk(
                id=f"{document.id}_chunk_{chunk_index}",
                document_id=document.id,
                index=chunk_index,
                content=" ".join(word for word, _, _ in window),
                metadata={
                    **document.metadata,
                    "chunk_index": chunk_index,
                    "chunker": "word",
                },
                start_word=start,
                end_word=end,
                start_index=window[0][1],
                end_index=window[-1][2],
            ))

            if end >= len(words):
                break

            start += self.step
            chunk_index += 1

        return chunks
