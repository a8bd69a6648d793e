"""Test doubles shared across the suite."""

import asyncio
import math
from typing import Any

from forum_search.embeddings.service import FallbackEmbeddingService, MockEmbeddingService
from forum_search.exceptions import ErrorCode, VectorStoreError
from forum_search.vectorstore.models import VectorHit, VectorRecord
from forum_search.vectorstore.service import VectorStore

DIMENSIONS = 8


class InMemoryVectorStore(VectorStore):
    """VectorStore fake ranking points by cosine similarity.

    Operations named in ``failing`` raise VectorStoreError.
    """

    def __init__(self) -> None:
        self.collections: dict[str, dict[str, tuple[list[float], dict[str, Any]]]] = {}
        self.failing: set[str] = set()
        self.calls: list[tuple[str, str]] = []

    def _check(self, operation: str, collection: str) -> None:
        self.calls.append((operation, collection))
        if operation in self.failing:
            raise VectorStoreError(f"{operation} failed", details={"collection": collection})

    def points(self, collection: str) -> dict[str, tuple[list[float], dict[str, Any]]]:
        return self.collections.get(collection, {})

    async def create_collection(self, name: str, dimensions: int) -> None:
        self._check("create_collection", name)
        if name in self.collections:
            raise VectorStoreError(
                f"Collection already exists: {name}",
                code=ErrorCode.COLLECTION_EXISTS,
            )
        self.collections[name] = {}

    async def delete_collection(self, name: str) -> None:
        self._check("delete_collection", name)
        self.collections.pop(name, None)

    async def collection_exists(self, name: str) -> bool:
        self._check("collection_exists", name)
        return name in self.collections

    async def upsert(self, collection: str, records: list[VectorRecord]) -> int:
        self._check("upsert", collection)
        points = self.collections.setdefault(collection, {})
        for record in records:
            points[record.id] = (record.vector, record.payload)
        return len(records)

    async def search(
        self,
        collection: str,
        vector: list[float],
        limit: int = 10,
    ) -> list[VectorHit]:
        self._check("search", collection)
        hits = [
            VectorHit(id=point_id, score=_cosine(vector, stored), payload=payload)
            for point_id, (stored, payload) in self.points(collection).items()
        ]
        hits.sort(key=lambda hit: hit.score, reverse=True)
        return hits[:limit]

    async def delete(self, collection: str, ids: list[str]) -> int:
        self._check("delete", collection)
        points = self.collections.get(collection, {})
        for point_id in ids:
            points.pop(point_id, None)
        return len(ids)


class SlowVectorStore(InMemoryVectorStore):
    """Fake whose searches take a full second."""

    async def search(
        self,
        collection: str,
        vector: list[float],
        limit: int = 10,
    ) -> list[VectorHit]:
        await asyncio.sleep(1)
        return await super().search(collection, vector, limit)


def _cosine(a: list[float], b: list[float]) -> float:
    dot = sum(x * y for x, y in zip(a, b))
    norm = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    return dot / norm if norm else 0.0


def configured_embeddings() -> FallbackEmbeddingService:
    """Embeddings that report a provider, backed by the hash generator."""
    return FallbackEmbeddingService(
        MockEmbeddingService(dimensions=DIMENSIONS),
        MockEmbeddingService(dimensions=DIMENSIONS),
    )


def unconfigured_embeddings() -> FallbackEmbeddingService:
    return FallbackEmbeddingService(None, MockEmbeddingService(dimensions=DIMENSIONS))
