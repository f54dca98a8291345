"""
Exceptions raised by the RAG pipeline.
"""


class RagError(Exception):
    """Base exception for rag-my-pdf errors."""

    def __init__(self, message: str, code: int | None = None):
        self.message = message
        self.code = code
        super().__init__(self.message)


class InvalidConfiguration(RagError):
    """Raised when chunking or retrieval parameters are inconsistent."""

    def __init__(self, message: str = "Invalid configuration"):
        super().__init__(message, code=2)


class DimensionMismatch(RagError):
    """Raised when an embedding does not have the index dimensionality."""

    def __init__(self, expected: int, actual: int, chunk_id: str | None = None):
        self.expected = expected
        self.actual = actual
        self.chunk_id = chunk_id
        where = f" for chunk '{chunk_id}'" if chunk_id else ""
        super().__init__(
            f"Embedding dimension mismatch{where}: expected {expected}, got {actual}",
            code=3,
        )


class EmptyIndex(RagError):
    """Raised when querying an index that holds no chunks."""

    def __init__(self, message: str = "No chunks were indexed; the document may be empty"):
        super().__init__(message, code=4)


class NoContext(RagError):
    """Raised when the context budget leaves no retrieved text in the prompt."""

    def __init__(self, question: str, dropped: int, budget: int):
        self.question = question
        self.dropped = dropped
        self.budget = budget
        super().__init__(
            f"Context budget of {budget} words dropped all {dropped} retrieved chunks",
            code=5,
        )


class CollaboratorUnavailable(RagError):
    """Raised when an external service keeps failing after all retries."""

    def __init__(self, operation: str, attempts: int, message: str):
        self.operation = operation
        self.attempts = attempts
        super().__init__(f"{operation} failed after {attempts} attempts: {message}", code=6)


class PDFLoadError(RagError):
    """Raised when text cannot be extracted from a PDF."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"Failed to extract text from PDF '{path}': {message}", code=7)
