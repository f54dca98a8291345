"""Retry and timeout decorators for the embedding and completion services.

The core pipeline never sleeps or retries. Transient network failures are
handled here, at the boundary, by wrapping the collaborator interfaces.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, TypeVar

import openai
from tenacity import (
    AsyncRetrying,
    RetryError,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from ..exceptions import CollaboratorUnavailable
from ..providers.base import LLMProvider, LLMResponse
from ..utils.config import RetryPolicy
from .base import BaseEmbedding
from .embeddings import OpenAIEmbedding

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRANSIENT_ERRORS: tuple[type[BaseException], ...] = (
    openai.APIConnectionError,
    openai.RateLimitError,
    openai.InternalServerError,
    asyncio.TimeoutError,
    ConnectionError,
)


async def call_with_retry(
    operation: str,
    func: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    retry_on: tuple[type[BaseException], ...] = TRANSIENT_ERRORS,
) -> T:
    """Await ``func()`` with a timeout, retrying transient failures.

    Raises:
        CollaboratorUnavailable: When every attempt failed transiently
    """
    retrying = AsyncRetrying(
        stop=stop_after_attempt(policy.max_attempts),
        wait=(
            wait_exponential(multiplier=policy.initial_wait, max=policy.max_wait)
            + wait_random(0, policy.jitter)
        ),
        retry=retry_if_exception_type(retry_on),
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )

    try:
        async for attempt in retrying:
            with attempt:
                return await asyncio.wait_for(func(), timeout=policy.timeout)
    except RetryError as exc:
        last_error = exc.last_attempt.exception()
        raise CollaboratorUnavailable(
            operation,
            policy.max_attempts,
            str(last_error) or type(last_error).__name__,
        ) from last_error

    raise AssertionError("unreachable")  # pragma: no cover


class RetryingEmbedding(BaseEmbedding):
    """Embedding decorator adding timeouts and retries.

    An ``OpenAIEmbedding`` is retried per API request: each batch gets its
    own timeout and attempts, so one failed batch does not resend the
    others. Any other embedder is retried as a whole call.
    """

    def __init__(
        self,
        inner: BaseEmbedding,
        policy: RetryPolicy | None = None,
        retry_on: tuple[type[BaseException], ...] = TRANSIENT_ERRORS,
    ):
        self.inner = inner
        self.policy = policy or RetryPolicy()
        self.retry_on = retry_on
        self._per_request = isinstance(inner, OpenAIEmbedding)
        if self._per_request:
            inner.request_runner = self._run

    @property
    def dimension(self) -> int:
        return self.inner.dimension

    async def _run(self, operation: str, func: Callable[[], Awaitable[T]]) -> T:
        return await call_with_retry(operation, func, self.policy, self.retry_on)

    async def embed_documents(self, texts: list[str]) -> list[list[float]]:
        if self._per_request:
            return await self.inner.embed_documents(texts)
        return await self._run("embed_documents", lambda: self.inner.embed_documents(texts))

    async def embed_query(self, text: str) -> list[float]:
        if self._per_request:
            return await self.inner.embed_query(text)
        return await self._run("embed_query", lambda: self.inner.embed_query(text))


class RetryingProvider(LLMProvider):
    """Completion provider decorator adding timeouts and retries."""

    def __init__(
        self,
        inner: LLMProvider,
        policy: RetryPolicy | None = None,
        retry_on: tuple[type[BaseException], ...] = TRANSIENT_ERRORS,
    ):
        self.inner = inner
        self.policy = policy or RetryPolicy()
        self.retry_on = retry_on

    async def complete(
        self,
        messages: list[dict[str, Any]],
        *,
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 1024,
        **kwargs: Any
    ) -> LLMResponse:
        return await call_with_retry(
            "complete",
            lambda: self.inner.complete(
                messages,
                model=model,
                temperature=temperature,
                max_tokens=max_tokens,
                **kwargs,
            ),
            self.policy,
            self.retry_on,
        )
