"""
Test configuration and fixtures.
"""

import pytest

from ragmypdf.rag import Document

from helpers import CannedProvider


@pytest.fixture
def provider():
    """Canned-response completion provider."""
    return CannedProvider()


@pytest.fixture
def sample_document():
    """A small document about a few unrelated topics."""
    return Document(
        id="sample",
        content=(
            "The answer to life is 42 by the way.\n"
            "Python is a programming language created by Guido van Rossum.\n"
            "The cat sat on the mat and refused to move."
        ),
        source="sample.pdf",
    )
