"""Repository decorator that keeps the vector index in step with writes.

Every create, update and delete of a Post, Comment or Category goes through
the wrapped repository first. Indexing happens strictly afterwards and can
never fail or roll back the write: the relational store is the source of
truth, and the index is eventually consistent with it. There is no retry
queue, so a crash between the write and the index call leaves the document
stale until the row's next mutation.
"""

from typing import Any

from forum_search.db.models import Base, Category, Comment, Post
from forum_search.db.repository import ForumRepository, ModelT
from forum_search.indexing.collection_names import DocumentType
from forum_search.indexing.deleter import DocumentDeleter
from forum_search.indexing.indexer import EntityIndexer
from forum_search.logging_config import get_logger

logger = get_logger(__name__)

TRACKED_MODELS: dict[type[Base], DocumentType] = {
    Post: DocumentType.POST,
    Comment: DocumentType.COMMENT,
    Category: DocumentType.CATEGORY,
}


class IndexingRepository(ForumRepository):
    """ForumRepository that re-indexes tracked rows after each mutation."""

    def __init__(
        self,
        inner: ForumRepository,
        indexer: EntityIndexer,
        deleter: DocumentDeleter,
    ) -> None:
        """Wrap a repository.

        Args:
            inner: Repository that performs the actual writes.
            indexer: Indexer called after create and update.
            deleter: Deleter called after delete.
        """
        self._inner = inner
        self._indexer = indexer
        self._deleter = deleter

    @property
    def inner(self) -> ForumRepository:
        return self._inner

    async def create(self, model: type[ModelT], values: dict[str, Any]) -> ModelT:
        entity = await self._inner.create(model, values)
        await self._reindex(model, entity.id)  # type: ignore[attr-defined]
        return entity

    async def update(
        self,
        model: type[ModelT],
        entity_id: str,
        values: dict[str, Any],
    ) -> ModelT:
        entity = await self._inner.update(model, entity_id, values)
        await self._reindex(model, entity_id)
        return entity

    async def delete(self, model: type[ModelT], entity_id: str) -> ModelT:
        # Read first: once the rows are gone there is nothing left to look up.
        cascaded = await self._inner.cascaded_ids(model, entity_id)
        entity = await self._inner.delete(model, entity_id)

        doc_type = TRACKED_MODELS.get(model)
        if doc_type is not None:
            await self._remove(doc_type, entity_id)
        for child_model, child_ids in cascaded.items():
            for child_id in child_ids:
                await self._remove(TRACKED_MODELS[child_model], child_id)
        return entity

    async def cascaded_ids(
        self,
        model: type[Base],
        entity_id: str,
    ) -> dict[type[Base], list[str]]:
        return await self._inner.cascaded_ids(model, entity_id)

    async def get(self, model: type[ModelT], entity_id: str) -> ModelT | None:
        return await self._inner.get(model, entity_id)

    async def list_all(self, model: type[ModelT]) -> list[ModelT]:
        return await self._inner.list_all(model)

    async def search_posts(self, query: str, limit: int) -> list[Post]:
        return await self._inner.search_posts(query, limit)

    async def search_comments(self, query: str, limit: int) -> list[Comment]:
        return await self._inner.search_comments(query, limit)

    async def search_categories(self, query: str, limit: int) -> list[Category]:
        return await self._inner.search_categories(query, limit)

    async def _reindex(self, model: type[Base], entity_id: str) -> None:
        """Re-fetch a written row with its joins and index it."""
        doc_type = TRACKED_MODELS.get(model)
        if doc_type is None:
            return

        try:
            row = await self._inner.get(model, entity_id)
            if row is None:
                return
            outcome = await self._indexer.index(doc_type, row)
        except Exception:
            logger.exception(
                f"Indexing raised for {doc_type.value}",
                extra={"id": entity_id},
            )
            return

        if not outcome.succeeded:
            logger.warning(
                f"Indexing failed for {doc_type.value}; index is stale",
                extra={"id": entity_id, "error": outcome.error},
            )

    async def _remove(self, doc_type: DocumentType, entity_id: str) -> None:
        """Drop one document from the index, logging instead of raising."""
        try:
            outcome = await self._deleter.delete_document(entity_id, doc_type)
        except Exception:
            logger.exception(
                f"Index removal raised for {doc_type.value}",
                extra={"id": entity_id},
            )
            return

        if not outcome.succeeded:
            logger.warning(
                f"Index removal failed for {doc_type.value}; index is stale",
                extra={"id": entity_id, "error": outcome.error},
            )
