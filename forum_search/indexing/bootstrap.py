"""Creation of the vector collections required before indexing."""

from forum_search.embeddings.service import FallbackEmbeddingService
from forum_search.exceptions import VectorStoreError
from forum_search.indexing.collection_names import CollectionNames
from forum_search.indexing.models import Outcome
from forum_search.logging_config import get_logger
from forum_search.vectorstore.service import VectorStore

logger = get_logger(__name__)


class CollectionBootstrapper:
    """Ensures every forum collection exists with the embedding dimension."""

    def __init__(
        self,
        embedding_service: FallbackEmbeddingService,
        vector_store: VectorStore,
        collections: CollectionNames | None = None,
    ) -> None:
        self._embedding_service = embedding_service
        self._vector_store = vector_store
        self._collections = collections or CollectionNames()

    async def init_collections(self) -> Outcome:
        """Create any missing collection using cosine distance.

        Returns:
            ``skipped`` when no embedding provider is configured, ``ok`` once
            every collection exists, ``failed`` if the vector store errors.
        """
        if not self._embedding_service.is_configured:
            logger.warning("Embedding provider not configured; vector search will use mock data")
            return Outcome.skipped("init_collections")

        dimensions = self._embedding_service.dimensions
        try:
            for name in self._collections.all():
                created = await self._vector_store.ensure_collection(name, dimensions)
                if created:
                    logger.info(
                        f"Created collection: {name}",
                        extra={"collection": name, "dimensions": dimensions},
                    )
        except VectorStoreError as e:
            logger.error(
                f"Error initializing collections: {e.message}",
                extra={"error_code": e.code.value, "details": e.details},
            )
            return Outcome.failed("init_collections", e.message)

        return Outcome.ok("init_collections")
