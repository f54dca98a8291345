"""
Utilities: configuration and logging.
"""

from ragmypdf.utils.config import Config, RAGConfig, RetryPolicy, load_config
from ragmypdf.utils.logging import setup_logging

__all__ = [
    "Config",
    "RAGConfig",
    "RetryPolicy",
    "load_config",
    "setup_logging",
]
