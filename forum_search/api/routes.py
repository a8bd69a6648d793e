"""API route for cross-collection search."""

from fastapi import APIRouter, Query

from forum_search.api.dependencies import ContainerDep
from forum_search.exceptions import ForumSearchError, SearchError, ValidationError
from forum_search.logging_config import get_logger
from forum_search.search.models import SearchMeta, SearchResponse

logger = get_logger(__name__)


# Create router
router = APIRouter(prefix="/api", tags=["Search"])


@router.get("/search", response_model=SearchResponse)
async def search_endpoint(
    container: ContainerDep,
    q: str | None = Query(default=None, description="Free-text query"),
    limit: int | None = Query(default=None, ge=1, description="Maximum results"),
) -> SearchResponse:
    """Search posts, comments and categories.

    Uses vector search when an embedding provider is configured and keyword
    matching otherwise.
    """
    if q is None or not q.strip():
        raise ValidationError("Query parameter 'q' is required", details={"parameter": "q"})

    search_settings = container.settings.search
    if limit is None:
        limit = search_settings.default_limit
    if limit > search_settings.max_limit:
        raise ValidationError(
            f"Query parameter 'limit' must be at most {search_settings.max_limit}",
            details={"parameter": "limit", "value": limit},
        )

    try:
        results = await container.search_engine.search(q, limit)
    except ForumSearchError:
        raise
    except Exception as e:
        logger.exception("Search request failed")
        raise SearchError("Search failed", details={"error": str(e)}) from e

    return SearchResponse(
        results=results,
        meta=SearchMeta(query=q, count=len(results)),
    )
