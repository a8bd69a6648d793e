"""Vector store interface and Qdrant implementation."""

from abc import ABC, abstractmethod

from qdrant_client import AsyncQdrantClient
from qdrant_client.models import (
    Distance,
    PointIdsList,
    PointStruct,
    VectorParams,
)

from forum_search.config import QdrantSettings, get_settings
from forum_search.exceptions import ErrorCode, VectorStoreError
from forum_search.logging_config import get_logger
from forum_search.observability.metrics import track_vectorstore_operation
from forum_search.vectorstore.models import VectorHit, VectorRecord

logger = get_logger(__name__)


class VectorStore(ABC):
    """Abstract base class for vector stores.

    Defines the interface for storing and searching vectors.
    """

    @abstractmethod
    async def create_collection(
        self,
        name: str,
        dimensions: int,
    ) -> None:
        """Create a new collection.

        Args:
            name: Collection name.
            dimensions: Vector dimensions.

        Raises:
            VectorStoreError: If creation fails or the collection exists.
        """
        ...

    @abstractmethod
    async def delete_collection(self, name: str) -> None:
        """Delete a collection.

        Args:
            name: Collection name.

        Raises:
            VectorStoreError: If deletion fails.
        """
        ...

    @abstractmethod
    async def collection_exists(self, name: str) -> bool:
        """Check if a collection exists.

        Args:
            name: Collection name.

        Returns:
            True if collection exists.
        """
        ...

    async def ensure_collection(self, name: str, dimensions: int) -> bool:
        """Create a collection unless it already exists.

        Args:
            name: Collection name.
            dimensions: Vector dimensions used when creating.

        Returns:
            True if the collection was created by this call.

        Raises:
            VectorStoreError: If the check or creation fails.
        """
        if await self.collection_exists(name):
            return False
        try:
            await self.create_collection(name, dimensions)
        except VectorStoreError as e:
            # Lost a creation race with another process.
            if e.code == ErrorCode.COLLECTION_EXISTS:
                return False
            raise
        return True

    @abstractmethod
    async def upsert(
        self,
        collection: str,
        records: list[VectorRecord],
    ) -> int:
        """Insert or overwrite records by id.

        Args:
            collection: Collection name.
            records: Records to upsert.

        Returns:
            Number of records upserted.

        Raises:
            VectorStoreError: If upsert fails.
        """
        ...

    @abstractmethod
    async def search(
        self,
        collection: str,
        vector: list[float],
        limit: int = 10,
    ) -> list[VectorHit]:
        """Search for similar vectors.

        Args:
            collection: Collection name.
            vector: Query vector.
            limit: Maximum results to return.

        Returns:
            Hits ordered by descending similarity.

        Raises:
            VectorStoreError: If search fails.
        """
        ...

    @abstractmethod
    async def delete(
        self,
        collection: str,
        ids: list[str],
    ) -> int:
        """Delete records by ID.

        Args:
            collection: Collection name.
            ids: Record IDs to delete.

        Returns:
            Number of records deleted.

        Raises:
            VectorStoreError: If deletion fails.
        """
        ...

    async def ping(self) -> bool:
        """Check that the store is reachable."""
        return True

    async def close(self) -> None:
        """Release any held resources."""
        return None


class QdrantVectorStore(VectorStore):
    """Qdrant vector store implementation."""

    def __init__(
        self,
        settings: QdrantSettings | None = None,
        client: AsyncQdrantClient | None = None,
    ) -> None:
        """Initialize Qdrant vector store.

        Args:
            settings: Qdrant configuration.
            client: Existing client (for testing).
        """
        self._settings = settings or get_settings().qdrant
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> AsyncQdrantClient:
        """Get or create Qdrant client."""
        if self._client is None:
            api_key = None
            if self._settings.api_key:
                api_key = self._settings.api_key.get_secret_value()

            self._client = AsyncQdrantClient(
                url=self._settings.url,
                api_key=api_key,
                timeout=self._settings.timeout,
            )
        return self._client

    async def close(self) -> None:
        """Close the Qdrant client."""
        if self._owns_client and self._client is not None:
            await self._client.close()
            self._client = None

    async def ping(self) -> bool:
        """Check connectivity by listing collections."""
        client = await self._get_client()
        try:
            await client.get_collections()
        except Exception as e:
            logger.warning(f"Qdrant ping failed: {e}", extra={"url": self._settings.url})
            return False
        return True

    async def create_collection(
        self,
        name: str,
        dimensions: int,
    ) -> None:
        """Create a new Qdrant collection using cosine distance."""
        client = await self._get_client()

        with track_vectorstore_operation("create_collection"):
            try:
                exists = await client.collection_exists(name)
                if exists:
                    raise VectorStoreError(
                        f"Collection already exists: {name}",
                        code=ErrorCode.COLLECTION_EXISTS,
                        details={"collection": name},
                    )

                await client.create_collection(
                    collection_name=name,
                    vectors_config=VectorParams(
                        size=dimensions,
                        distance=Distance.COSINE,
                    ),
                )
                logger.info(f"Created collection: {name}", extra={"dimensions": dimensions})

            except VectorStoreError:
                raise
            except Exception as e:
                raise VectorStoreError(
                    f"Failed to create collection: {e}",
                    code=ErrorCode.VECTOR_STORE_ERROR,
                    details={"collection": name, "error": str(e)},
                ) from e

    async def delete_collection(self, name: str) -> None:
        """Delete a Qdrant collection."""
        client = await self._get_client()

        try:
            exists = await client.collection_exists(name)
            if not exists:
                raise VectorStoreError(
                    f"Collection not found: {name}",
                    code=ErrorCode.COLLECTION_NOT_FOUND,
                    details={"collection": name},
                )

            await client.delete_collection(name)
            logger.info(f"Deleted collection: {name}")

        except VectorStoreError:
            raise
        except Exception as e:
            raise VectorStoreError(
                f"Failed to delete collection: {e}",
                code=ErrorCode.VECTOR_STORE_ERROR,
                details={"collection": name, "error": str(e)},
            ) from e

    async def collection_exists(self, name: str) -> bool:
        """Check if collection exists."""
        client = await self._get_client()
        try:
            return await client.collection_exists(name)
        except Exception as e:
            raise VectorStoreError(
                f"Failed to check collection: {e}",
                code=ErrorCode.VECTOR_STORE_ERROR,
                details={"collection": name, "error": str(e)},
            ) from e

    async def upsert(
        self,
        collection: str,
        records: list[VectorRecord],
    ) -> int:
        """Upsert records into collection, waiting for the write to apply."""
        if not records:
            return 0

        client = await self._get_client()

        with track_vectorstore_operation("upsert"):
            try:
                points = [
                    PointStruct(
                        id=record.id,
                        vector=record.vector,
                        payload=record.payload,
                    )
                    for record in records
                ]

                await client.upsert(
                    collection_name=collection,
                    points=points,
                    wait=True,
                )

            except Exception as e:
                raise VectorStoreError(
                    f"Failed to upsert records: {e}",
                    code=ErrorCode.VECTOR_STORE_ERROR,
                    details={"collection": collection, "error": str(e)},
                ) from e

        logger.debug(
            f"Upserted {len(points)} records",
            extra={"collection": collection},
        )
        return len(points)

    async def search(
        self,
        collection: str,
        vector: list[float],
        limit: int = 10,
    ) -> list[VectorHit]:
        """Search for similar vectors."""
        client = await self._get_client()

        with track_vectorstore_operation("search"):
            try:
                results = await client.query_points(
                    collection_name=collection,
                    query=vector,
                    limit=limit,
                    with_payload=True,
                )
            except Exception as e:
                raise VectorStoreError(
                    f"Failed to search: {e}",
                    code=ErrorCode.VECTOR_STORE_ERROR,
                    details={"collection": collection, "error": str(e)},
                ) from e

        return [
            VectorHit(
                id=str(point.id),
                score=point.score if point.score is not None else 0.0,
                payload=dict(point.payload) if point.payload else {},
            )
            for point in results.points
        ]

    async def delete(
        self,
        collection: str,
        ids: list[str],
    ) -> int:
        """Delete records by ID."""
        if not ids:
            return 0

        client = await self._get_client()

        with track_vectorstore_operation("delete"):
            try:
                await client.delete(
                    collection_name=collection,
                    points_selector=PointIdsList(points=ids),  # type: ignore[arg-type]
                    wait=True,
                )
            except Exception as e:
                raise VectorStoreError(
                    f"Failed to delete records: {e}",
                    code=ErrorCode.VECTOR_STORE_ERROR,
                    details={"collection": collection, "error": str(e)},
                ) from e

        logger.debug(
            f"Deleted {len(ids)} records",
            extra={"collection": collection},
        )
        return len(ids)
