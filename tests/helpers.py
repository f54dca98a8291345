"""
Shared test doubles and builders.
"""

from typing import Any

from ragmypdf.providers.base import LLMProvider, LLMResponse
from ragmypdf.rag import Chunk


class CannedProvider(LLMProvider):
    """Completion provider returning a fixed answer and recording requests."""

    def __init__(self, answer: str = "42"):
        self.answer = answer
        self.calls: list[dict[str, Any]] = []

    async def complete(
        self,
        messages: list[dict[str, Any]],
        *,
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 1024,
        **kwargs: Any
    ) -> LLMResponse:
        self.calls.append({"messages": messages, "model": model})
        return LLMResponse(content=self.answer)


def make_words(count: int) -> str:
    """Text of ``count`` distinct words: w0 w1 w2 ..."""
    return " ".join(f"w{i}" for i in range(count))


def make_chunk(index: int, content: str | None = None) -> Chunk:
    content = content if content is not None else f"chunk number {index}"
    return Chunk(
        id=f"doc_chunk_{index}",
        document_id="doc",
        index=index,
        content=content,
        start_word=index * 10,
        end_word=index * 10 + len(content.split()),
    )
