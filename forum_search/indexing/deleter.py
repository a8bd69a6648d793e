"""Removal of documents from the vector index."""

from forum_search.embeddings.service import FallbackEmbeddingService
from forum_search.indexing.collection_names import CollectionNames, DocumentType
from forum_search.indexing.models import Outcome
from forum_search.logging_config import get_logger
from forum_search.observability.metrics import track_index_operation
from forum_search.vectorstore.service import VectorStore

logger = get_logger(__name__)


class DocumentDeleter:
    """Deletes a point from the collection matching its document type."""

    def __init__(
        self,
        embedding_service: FallbackEmbeddingService,
        vector_store: VectorStore,
        collections: CollectionNames | None = None,
    ) -> None:
        self._embedding_service = embedding_service
        self._vector_store = vector_store
        self._collections = collections or CollectionNames()

    async def delete_document(
        self,
        document_id: str,
        doc_type: DocumentType | str,
    ) -> Outcome:
        """Delete a document by id and type.

        Args:
            document_id: Source entity primary key.
            doc_type: ``post``, ``comment`` or ``category``.

        Returns:
            Outcome of the deletion.

        Raises:
            ValueError: If ``doc_type`` is not a known document type.
        """
        doc_type = DocumentType(doc_type)
        operation = f"delete_{doc_type.value}"

        if not self._embedding_service.is_configured:
            logger.debug(
                f"Embedding provider not configured, skipping {doc_type.value} deletion",
                extra={"id": document_id},
            )
            track_index_operation("delete", doc_type.value, "skipped")
            return Outcome.skipped(operation, document_id)

        try:
            await self._vector_store.delete(
                self._collections.for_type(doc_type),
                [document_id],
            )
        except Exception as e:
            logger.error(
                f"Failed to delete {doc_type.value}: {e}",
                extra={"id": document_id, "document_type": doc_type.value},
            )
            track_index_operation("delete", doc_type.value, "failed")
            return Outcome.failed(operation, str(e), document_id)

        track_index_operation("delete", doc_type.value, "ok")
        return Outcome.ok(operation, document_id)
