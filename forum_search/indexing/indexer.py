"""Entity indexers: embed a projected row and upsert it as a vector point."""

from collections.abc import Callable

from forum_search.db.models import Base, Category, Comment, Post
from forum_search.embeddings.service import FallbackEmbeddingService
from forum_search.indexing.collection_names import CollectionNames, DocumentType
from forum_search.indexing.documents import (
    project,
    project_category,
    project_comment,
    project_post,
)
from forum_search.indexing.models import Outcome, ProjectedDocument
from forum_search.logging_config import get_logger
from forum_search.observability.metrics import track_index_operation
from forum_search.vectorstore.models import VectorRecord
from forum_search.vectorstore.service import VectorStore

logger = get_logger(__name__)


class EntityIndexer:
    """Mirrors posts, comments and categories into their collections.

    Indexing is skipped, not mocked, when no embedding provider is
    configured. Every failure is logged and reported as a failed
    ``Outcome``; nothing is raised to the caller.
    """

    def __init__(
        self,
        embedding_service: FallbackEmbeddingService,
        vector_store: VectorStore,
        collections: CollectionNames | None = None,
    ) -> None:
        """Initialize the indexer.

        Args:
            embedding_service: Embeddings with mock fallback.
            vector_store: Destination vector store.
            collections: Collection names per document type.
        """
        self._embedding_service = embedding_service
        self._vector_store = vector_store
        self._collections = collections or CollectionNames()

    async def index_post(self, post: Post) -> Outcome:
        """Index a post loaded with ``user`` and ``category``."""
        return await self._index(DocumentType.POST, post.id, lambda: project_post(post))

    async def index_comment(self, comment: Comment) -> Outcome:
        """Index a comment loaded with ``user`` and ``post``."""
        return await self._index(
            DocumentType.COMMENT, comment.id, lambda: project_comment(comment)
        )

    async def index_category(self, category: Category) -> Outcome:
        """Index a category."""
        return await self._index(
            DocumentType.CATEGORY, category.id, lambda: project_category(category)
        )

    async def index(self, doc_type: DocumentType, entity: Base) -> Outcome:
        """Index any supported entity by document type."""
        entity_id: str = entity.id  # type: ignore[attr-defined]
        return await self._index(doc_type, entity_id, lambda: project(doc_type, entity))

    async def _index(
        self,
        doc_type: DocumentType,
        entity_id: str,
        build: Callable[[], ProjectedDocument],
    ) -> Outcome:
        operation = f"index_{doc_type.value}"

        if not self._embedding_service.is_configured:
            logger.debug(
                f"Embedding provider not configured, skipping {doc_type.value} indexing",
                extra={"id": entity_id},
            )
            track_index_operation("index", doc_type.value, "skipped")
            return Outcome.skipped(operation, entity_id)

        try:
            document = build()
            embedding = await self._embedding_service.embed(document.text)
            await self._vector_store.upsert(
                self._collections.for_type(doc_type),
                [
                    VectorRecord(
                        id=document.id,
                        vector=embedding.embedding,
                        payload=document.payload,
                    )
                ],
            )
        except Exception as e:
            logger.error(
                f"Failed to index {doc_type.value}: {e}",
                extra={"id": entity_id, "document_type": doc_type.value},
            )
            track_index_operation("index", doc_type.value, "failed")
            return Outcome.failed(operation, str(e), entity_id)

        logger.debug(f"Indexed {doc_type.value}", extra={"id": entity_id})
        track_index_operation("index", doc_type.value, "ok")
        return Outcome.ok(operation, entity_id)
