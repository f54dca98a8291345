"""Prompt assembly for retrieval-augmented completions."""

import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..exceptions import InvalidConfiguration, NoContext
from .document import RetrievalResult

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PROMPT = (
    "You are a helpful assistant that answers questions based on the given "
    "context from the provided PDF document."
)

DEFAULT_CONTEXT_TEMPLATE = """Use the following excerpts from the document to answer the question.

Context:
{context}

Question: {question}"""


def count_words(text: str) -> int:
    return len(text.split())


class ChatTurn(BaseModel):
    """One earlier question and the answer given to it."""

    model_config = ConfigDict(frozen=True)

    question: str
    answer: str


class CompletionRequest(BaseModel):
    """Everything sent to the completion client for one question.

    Attributes:
        system: System instruction
        context: Retrieved chunk texts, in retrieval order
        question: The user's question
        history: Earlier turns of the conversation, oldest first
        dropped: Number of retrieved chunks left out to respect the budget
    """

    model_config = ConfigDict(frozen=True)

    system: str
    context: list[str] = Field(default_factory=list)
    question: str
    history: list[ChatTurn] = Field(default_factory=list)
    dropped: int = 0
    template: str = DEFAULT_CONTEXT_TEMPLATE

    @property
    def context_words(self) -> int:
        return sum(count_words(text) for text in self.context)

    def render_user_message(self) -> str:
        """Render the final user message."""
        if not self.context:
            return self.question

        context = "\n\n".join(
            f"[Excerpt {i + 1}]\n{text}" for i, text in enumerate(self.context)
        )
        return self.template.format(context=context, question=self.question)

    def to_messages(self) -> list[dict[str, Any]]:
        """Convert to the chat message list used by the OpenAI API."""
        messages: list[dict[str, Any]] = [{"role": "system", "content": self.system}]

        for turn in self.history:
            messages.append({"role": "user", "content": turn.question})
            messages.append({"role": "assistant", "content": turn.answer})

        messages.append({"role": "user", "content": self.render_user_message()})
        return messages


class PromptAssembler:
    """Compose retrieved chunks and a question into a completion request.

    The total word count of included chunk texts never exceeds
    ``max_context_words``. Chunks are admitted in retrieval order, so the
    lowest-ranked ones are the first to be dropped.
    """

    def __init__(
        self,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
        max_context_words: int = 3000,
        template: str = DEFAULT_CONTEXT_TEMPLATE,
    ):
        if max_context_words < 1:
            raise InvalidConfiguration(
                f"max_context_words must be at least 1, got {max_context_words}"
            )
        if "{context}" not in template or "{question}" not in template:
            raise InvalidConfiguration("Prompt template must contain {context} and {question}")

        self.system_prompt = system_prompt
        self.max_context_words = max_context_words
        self.template = template

    def assemble(
        self,
        result: RetrievalResult,
        question: str,
        history: Optional[list[ChatTurn]] = None,
    ) -> CompletionRequest:
        """Build a request from retrieval hits.

        Raises:
            NoContext: If no retrieved text fits in the budget
        """
        context: list[str] = []
        used = 0

        for hit in result:
            words = count_words(hit.chunk.content)
            if used + words > self.max_context_words:
                break
            context.append(hit.chunk.content)
            used += words

        dropped = len(result) - len(context)

        if not context:
            raise NoContext(question, dropped=dropped, budget=self.max_context_words)

        if dropped:
            logger.debug(f"Dropped {dropped} lowest-ranked chunks to fit {self.max_context_words} words")

        return CompletionRequest(
            system=self.system_prompt,
            context=context,
            question=question,
            history=list(history or []),
            dropped=dropped,
            template=self.template,
        )

    def assemble_without_context(
        self,
        question: str,
        history: Optional[list[ChatTurn]] = None,
        dropped: int = 0,
    ) -> CompletionRequest:
        """Build a request that carries no retrieved context."""
        return CompletionRequest(
            system=self.system_prompt,
            question=question,
            history=list(history or []),
            dropped=dropped,
            template=self.template,
        )
