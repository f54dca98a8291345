"""
Completion providers.
"""

from ragmypdf.providers.base import LLMProvider, LLMResponse
from ragmypdf.providers.openai import OpenAIProvider

__all__ = ["LLMProvider", "LLMResponse", "OpenAIProvider"]
