"""Vector store module."""

from forum_search.vectorstore.models import VectorHit, VectorRecord
from forum_search.vectorstore.service import QdrantVectorStore, VectorStore

__all__ = [
    "QdrantVectorStore",
    "VectorHit",
    "VectorRecord",
    "VectorStore",
]
