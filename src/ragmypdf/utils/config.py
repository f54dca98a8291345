"""
Configuration utilities.
"""

import json
from pathlib import Path
from typing import Any, Literal

import yaml

from pydantic import BaseModel, Field

from ragmypdf.exceptions import InvalidConfiguration


class Config(BaseModel):
    """Base configuration class."""

    @classmethod
    def from_dict(cls, data: Any, source: str | Path = "<config>") -> "Config":
        """Build configuration from parsed file data."""
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"{source}: expected a mapping of settings, got {type(data).__name__}")
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: Path) -> "Config":
        """Load configuration from YAML file."""
        with open(path) as f:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as exc:
                raise ValueError(f"{path}: invalid YAML: {exc}") from exc
        return cls.from_dict(data, path)

    @classmethod
    def from_file(cls, path: str | Path) -> "Config":
        """Load configuration from file (YAML or JSON)."""
        path = Path(path)

        if path.suffix in (".yaml", ".yml"):
            return cls.from_yaml(path)
        elif path.suffix == ".json":
            with open(path) as f:
                try:
                    data = json.load(f)
                except json.JSONDecodeError as exc:
                    raise ValueError(f"{path}: invalid JSON: {exc}") from exc
            return cls.from_dict(data, path)
        else:
            raise ValueError(f"Unsupported config file format: {path.suffix}")


class RetryPolicy(BaseModel):
    """Bounded exponential backoff settings for network calls.

    Attributes:
        max_attempts: Total attempts, including the first call
        initial_wait: First backoff delay in seconds
        max_wait: Upper bound for a single backoff delay
        jitter: Maximum random seconds added to each delay
        timeout: Per-attempt timeout in seconds (None disables it)
    """
    max_attempts: int = Field(default=4, ge=1)
    initial_wait: float = Field(default=0.5, ge=0)
    max_wait: float = Field(default=8.0, ge=0)
    jitter: float = Field(default=1.0, ge=0)
    timeout: float | None = Field(default=60.0, gt=0)


class RAGConfig(Config):
    """Configuration for a PDF question-answering run."""
    model: str = "gpt-3.5-turbo"
    embedding_model: str = "text-embedding-ada-002"
    temperature: float = 0.7
    max_tokens: int = 1024
    system_prompt: str | None = None

    # Chunking
    chunk_size: int = 500
    chunk_overlap: int = 50

    # Retrieval and prompt assembly
    top_k: int = 2
    max_context_words: int = 3000
    on_no_context: Literal["degrade", "fail"] = "degrade"
    history_turns: int = 5

    # Provider settings
    api_key: str | None = None
    base_url: str | None = None
    embedding_batch_size: int = 100
    embedding_concurrency: int = 4
    retry: RetryPolicy = Field(default_factory=RetryPolicy)

    def validate_pipeline(self) -> "RAGConfig":
        """
        Check parameter combinations before any work starts.

        Raises:
            InvalidConfiguration: If chunking, retrieval or budget values are unusable
        """
        if self.chunk_size <= 0:
            raise InvalidConfiguration(f"chunk_size must be positive, got {self.chunk_size}")
        if self.chunk_overlap < 0:
            raise InvalidConfiguration(
                f"chunk_overlap must not be negative, got {self.chunk_overlap}"
            )
        if self.chunk_overlap >= self.chunk_size:
            raise InvalidConfiguration(
                f"chunk_overlap ({self.chunk_overlap}) must be less than "
                f"chunk_size ({self.chunk_size})"
            )
        if self.top_k < 1:
            raise InvalidConfiguration(f"top_k must be at least 1, got {self.top_k}")
        if self.max_context_words < 1:
            raise InvalidConfiguration(
                f"max_context_words must be at least 1, got {self.max_context_words}"
            )
        if self.history_turns < 0:
            raise InvalidConfiguration(
                f"history_turns must not be negative, got {self.history_turns}"
            )
        return self

    def merged(self, overrides: dict[str, Any]) -> "RAGConfig":
        """Return a copy with the non-None values of ``overrides`` applied."""
        values = {key: value for key, value in overrides.items() if value is not None}
        return self.model_validate({**self.model_dump(), **values})


def load_config(path: str | Path | None = "rag-my-pdf.yaml", required: bool = False) -> RAGConfig:
    """
    Load pipeline configuration from file.

    Args:
        path: Path to config file
        required: Fail instead of using defaults when the file is missing

    Returns:
        RAGConfig instance (defaults when an optional file does not exist)

    Raises:
        InvalidConfiguration: If a required file does not exist
        ValueError: If the file cannot be parsed or holds invalid settings
    """
    if path is None:
        return RAGConfig()

    path = Path(path)

    if not path.is_file():
        if required:
            raise InvalidConfiguration(f"Configuration file not found: {path}")
        return RAGConfig()

    return RAGConfig.from_file(path)
