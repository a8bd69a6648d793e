"""Search across the forum's vector collections."""

from forum_search.search.engine import SearchEngine, merge_results
from forum_search.search.fallback import MOCK_SCORES, KeywordSearchFallback
from forum_search.search.models import SearchMeta, SearchResponse, SearchResult

__all__ = [
    "MOCK_SCORES",
    "KeywordSearchFallback",
    "SearchEngine",
    "SearchMeta",
    "SearchResponse",
    "SearchResult",
    "merge_results",
]
