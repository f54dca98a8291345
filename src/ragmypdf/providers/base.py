"""
Base LLM Provider interface.
"""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel


class LLMResponse(BaseModel):
    """Response from an LLM."""
    content: str | None = None
    usage: dict[str, int] = {}
    finish_reason: str = "stop"


class LLMProvider(ABC):
    """
    Abstract base class for completion providers.
    """

    @abstractmethod
    async def complete(
        self,
        messages: list[dict[str, Any]],
        *,
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 1024,
        **kwargs: Any
    ) -> LLMResponse:
        """
        Get a completion from the LLM.

        Args:
            messages: List of messages in API format
            model: Model identifier
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate
            **kwargs: Additional provider-specific options

        Returns:
            LLMResponse with the generated text
        """
        pass
