"""RAG pipeline: the per-run context tying all components together."""

import logging
from collections import deque
from typing import Optional

from pydantic import BaseModel, ConfigDict

from ..exceptions import EmptyIndex, NoContext
from ..providers.base import LLMProvider
from ..utils.config import RAGConfig
from .base import BaseChunker, BaseEmbedding
from .chunking import WordChunker
from .document import Chunk, Document, RetrievalResult
from .prompt import DEFAULT_SYSTEM_PROMPT, ChatTurn, CompletionRequest, PromptAssembler
from .retriever import VectorRetriever
from .vectorstore import InMemoryIndex

logger = logging.getLogger(__name__)


class Answer(BaseModel):
    """The outcome of one question.

    Attributes:
        text: Generated answer
        result: Chunks retrieved for the question
        request: Request sent to the completion provider
        degraded: True when the model was asked without retrieved context
    """

    model_config = ConfigDict(frozen=True)

    text: str
    result: RetrievalResult
    request: CompletionRequest
    degraded: bool = False


class RAGPipeline:
    """Retrieval-augmented question answering over a single document.

    One instance holds everything a run needs: the collaborators, the
    configuration, the index of the loaded document and the conversation
    history. Nothing is kept at module level.

    Example:
        ```python
        pipeline = RAGPipeline(
            embedding=OpenAIEmbedding(),
            provider=OpenAIProvider(),
            config=RAGConfig(chunk_size=200, chunk_overlap=20),
        )

        await pipeline.build(load_pdf_content("paper.pdf"))
        answer = await pipeline.ask("What is the main result?")
        print(answer.text)
        ```
    """

    def __init__(
        self,
        embedding: BaseEmbedding,
        provider: LLMProvider,
        config: Optional[RAGConfig] = None,
        chunker: Optional[BaseChunker] = None,
        assembler: Optional[PromptAssembler] = None,
    ):
        """Initialize the RAG pipeline.

        Args:
            embedding: Embedding model for chunks and questions
            provider: Completion provider that generates answers
            config: Run configuration (validated immediately)
            chunker: Document chunker (default: WordChunker from config)
            assembler: Prompt assembler (default: built from config)
        """
        self.config = (config or RAGConfig()).validate_pipeline()
        self.embedding = embedding
        self.provider = provider
        self.chunker = chunker or WordChunker(
            chunk_size=self.config.chunk_size,
            overlap=self.config.chunk_overlap,
        )
        self.assembler = assembler or PromptAssembler(
            system_prompt=self.config.system_prompt or DEFAULT_SYSTEM_PROMPT,
            max_context_words=self.config.max_context_words,
        )

        self._document: Optional[Document] = None
        self._index: Optional[InMemoryIndex] = None
        self._history: deque[ChatTurn] = deque(maxlen=self.config.history_turns or None)

    @property
    def ready(self) -> bool:
        """Whether a document has been indexed."""
        return self._index is not None

    @property
    def document(self) -> Optional[Document]:
        return self._document

    @property
    def index(self) -> Optional[InMemoryIndex]:
        return self._index

    @property
    def chunks(self) -> tuple[Chunk, ...]:
        return self._index.chunks if self._index is not None else ()

    @property
    def history(self) -> list[ChatTurn]:
        return list(self._history)

    async def build(self, document: Document) -> InMemoryIndex:
        """Chunk, embed and index a document.

        The new index only becomes visible once every chunk is embedded
        and validated; if anything fails the pipeline keeps its previous
        state.

        Args:
            document: Document to index

        Returns:
            The index now used for retrieval
        """
        chunks = self.chunker.chunk(document)
        logger.info(f"Created {len(chunks)} chunks from document {document.id!r}")
        if chunks:
            logger.debug(f"First chunk preview: {chunks[0].content[:100]}...")

        if chunks:
            logger.info(f"Building embeddings from {len(chunks)} chunks")
            embeddings = await self.embedding.embed_documents([chunk.content for chunk in chunks])
        else:
            logger.warning(f"Document {document.id!r} has no text to index")
            embeddings = []

        logger.debug("Creating vector index")
        index = InMemoryIndex.build(chunks, embeddings, dimension=self.embedding.dimension)

        self._document = document
        self._index = index
        self._history.clear()
        return index

    def retriever(self) -> VectorRetriever:
        """Return a retriever over the current index."""
        if self._index is None:
            raise EmptyIndex("No document has been indexed yet")
        return VectorRetriever(self.embedding, self._index)

    async def retrieve(self, question: str, k: Optional[int] = None) -> RetrievalResult:
        """Retrieve the chunks most relevant to a question."""
        return await self.retriever().retrieve(question, self.config.top_k if k is None else k)

    async def ask(self, question: str, k: Optional[int] = None) -> Answer:
        """Answer a question from the indexed document.

        Raises:
            EmptyIndex: If nothing was indexed
            NoContext: If the context budget removed every chunk and
                ``on_no_context`` is ``"fail"``
        """
        result = await self.retrieve(question, k)
        history = list(self._history)
        degraded = False

        try:
            request = self.assembler.assemble(result, question, history)
        except NoContext as exc:
            if self.config.on_no_context == "fail":
                raise
            logger.warning(f"{exc.message}; answering without document context")
            request = self.assembler.assemble_without_context(question, history, exc.dropped)
            degraded = True

        response = await self.provider.complete(
            request.to_messages(),
            model=self.config.model,
            temperature=self.config.temperature,
            max_tokens=self.config.max_tokens,
        )
        text = response.content or ""

        if self.config.history_turns:
            self._history.append(ChatTurn(question=question, answer=text))

        return Answer(text=text, result=result, request=request, degraded=degraded)

    def reset_history(self) -> None:
        """Forget earlier questions and answers."""
        self._history.clear()
