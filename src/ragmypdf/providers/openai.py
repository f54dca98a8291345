"""
OpenAI LLM Provider.
"""

from typing import Any

from openai import AsyncOpenAI

from ragmypdf.providers.base import LLMProvider, LLMResponse


class OpenAIProvider(LLMProvider):
    """
    LLM Provider for the OpenAI chat completions API.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        organization: str | None = None,
        client: AsyncOpenAI | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.organization = organization
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        """Get or create OpenAI client."""
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                organization=self.organization
            )
        return self._client

    async def complete(
        self,
        messages: list[dict[str, Any]],
        *,
        model: str = "gpt-3.5-turbo",
        temperature: float = 0.7,
        max_tokens: int = 1024,
        **kwargs: Any
    ) -> LLMResponse:
        """Get a completion from OpenAI."""
        client = self._get_client()

        params: dict[str, Any] = {
            "model": model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        params.update(kwargs)

        response = await client.chat.completions.create(**params)

        choice = response.choices[0]

        return LLMResponse(
            content=choice.message.content,
            usage={
                "prompt_tokens": response.usage.prompt_tokens if response.usage else 0,
                "completion_tokens": response.usage.completion_tokens if response.usage else 0,
                "total_tokens": response.usage.total_tokens if response.usage else 0
            },
            finish_reason=choice.finish_reason or "stop",
        )
