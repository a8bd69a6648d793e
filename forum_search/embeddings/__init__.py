"""Embedding service module."""

from forum_search.embeddings.mock import mock_embedding, text_hash
from forum_search.embeddings.models import EmbeddingResult
from forum_search.embeddings.service import (
    EmbeddingService,
    FallbackEmbeddingService,
    HTTPEmbeddingService,
    MockEmbeddingService,
)

__all__ = [
    "EmbeddingResult",
    "EmbeddingService",
    "FallbackEmbeddingService",
    "HTTPEmbeddingService",
    "MockEmbeddingService",
    "mock_embedding",
    "text_hash",
]
