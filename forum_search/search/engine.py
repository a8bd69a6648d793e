"""Cross-collection semantic search."""

import asyncio
import time
from collections.abc import Iterable

from forum_search.embeddings.service import FallbackEmbeddingService
from forum_search.indexing.collection_names import CollectionNames, DocumentType
from forum_search.logging_config import get_logger
from forum_search.observability.metrics import track_search_request
from forum_search.search.fallback import KeywordSearchFallback
from forum_search.search.models import SearchResult
from forum_search.vectorstore.models import VectorHit
from forum_search.vectorstore.service import VectorStore

logger = get_logger(__name__)


def merge_results(
    hits_by_type: Iterable[tuple[DocumentType, list[VectorHit]]],
    limit: int,
) -> list[SearchResult]:
    """Flatten per-collection hits, rank by score and keep the top ``limit``.

    The sort is stable, so ties keep collection order and then the order
    each collection returned them in.
    """
    merged = [
        SearchResult.from_payload(doc_type, {"id": hit.id, **hit.payload}, hit.score)
        for doc_type, hits in hits_by_type
        for hit in hits
    ]
    merged.sort(key=lambda result: result.score, reverse=True)
    return merged[:limit]


class SearchEngine:
    """Searches posts, comments and categories with one query embedding.

    Without an embedding provider every query goes to the keyword fallback.
    With one, the three collections are searched concurrently; if any of
    them fails or the whole path exceeds ``timeout``, the request is
    answered by the keyword fallback instead (no partial results).
    """

    def __init__(
        self,
        embedding_service: FallbackEmbeddingService,
        vector_store: VectorStore,
        fallback: KeywordSearchFallback,
        collections: CollectionNames | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the search engine.

        Args:
            embedding_service: Embeddings with mock fallback.
            vector_store: Store holding the forum collections.
            fallback: Keyword search used when vector search is unavailable.
            collections: Collection names per document type.
            timeout: Seconds allowed for the vector path; None disables.
        """
        self._embedding_service = embedding_service
        self._vector_store = vector_store
        self._fallback = fallback
        self._collections = collections or CollectionNames()
        self._timeout = timeout

    async def search(self, query: str, limit: int = 10) -> list[SearchResult]:
        """Search every content collection.

        Args:
            query: Free-text query.
            limit: Maximum number of results.

        Returns:
            Results ordered by descending score, at most ``limit`` long.
        """
        if not query.strip() or limit < 1:
            return []

        started = time.perf_counter()

        if not self._embedding_service.is_configured:
            logger.debug("Embedding provider not configured, using keyword search")
            results = await self._fallback.search(query, limit)
            track_search_request("keyword", time.perf_counter() - started, len(results))
            return results

        try:
            results = await asyncio.wait_for(
                self._vector_search(query, limit),
                timeout=self._timeout,
            )
        except Exception as e:
            logger.warning(
                f"Vector search failed, falling back to keyword search: {e!r}",
                extra={"query_length": len(query), "limit": limit},
            )
            results = await self._fallback.search(query, limit)
            track_search_request("fallback", time.perf_counter() - started, len(results))
            return results

        track_search_request("vector", time.perf_counter() - started, len(results))
        return results

    async def _vector_search(self, query: str, limit: int) -> list[SearchResult]:
        embedding = await self._embedding_service.embed(query)

        searchable = self._collections.searchable()
        hits = await asyncio.gather(
            *(
                self._vector_store.search(
                    collection=collection,
                    vector=embedding.embedding,
                    limit=limit,
                )
                for _, collection in searchable
            )
        )

        results = merge_results(
            ((doc_type, collection_hits) for (doc_type, _), collection_hits in zip(searchable, hits)),
            limit,
        )

        logger.debug(
            f"Vector search returned {len(results)} results",
            extra={"query_length": len(query), "limit": limit, "mocked": embedding.mocked},
        )
        return results
