"""Keyword search against the relational store.

Used when no embedding provider is configured or the vector path fails.
"""

from forum_search.db.repository import ForumRepository
from forum_search.indexing.collection_names import DocumentType
from forum_search.indexing.documents import project_category, project_comment, project_post
from forum_search.logging_config import get_logger
from forum_search.search.models import SearchResult

logger = get_logger(__name__)

# Fixed relevance prior per type; no similarity is measured on this path.
MOCK_SCORES: dict[DocumentType, float] = {
    DocumentType.POST: 0.9,
    DocumentType.COMMENT: 0.8,
    DocumentType.CATEGORY: 0.7,
}


class KeywordSearchFallback:
    """Substring search over posts, comments and categories."""

    def __init__(self, repository: ForumRepository) -> None:
        self._repository = repository

    async def search(self, query: str, limit: int = 10) -> list[SearchResult]:
        """Search by substring and score each row by its type.

        Posts come first, then comments, then categories; the concatenation
        is truncated to ``limit`` without re-sorting. Never raises: query
        failures are logged and produce an empty list.
        """
        try:
            posts = await self._repository.search_posts(query, limit)
            comments = await self._repository.search_comments(query, limit)
            categories = await self._repository.search_categories(query, limit)

            results = [
                SearchResult.from_payload(
                    DocumentType.POST,
                    project_post(post).payload,
                    MOCK_SCORES[DocumentType.POST],
                )
                for post in posts
            ]
            results.extend(
                SearchResult.from_payload(
                    DocumentType.COMMENT,
                    project_comment(comment).payload,
                    MOCK_SCORES[DocumentType.COMMENT],
                )
                for comment in comments
            )
            results.extend(
                SearchResult.from_payload(
                    DocumentType.CATEGORY,
                    project_category(category).payload,
                    MOCK_SCORES[DocumentType.CATEGORY],
                )
                for category in categories
            )
        except Exception as e:
            logger.error(
                f"Keyword search failed: {e}",
                extra={"query": query[:100], "limit": limit},
            )
            return []

        return results[:limit]
