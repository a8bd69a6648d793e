"""Tests for search: merge, keyword fallback and the search engine."""

from typing import Any
from unittest.mock import AsyncMock

from forum_search.container import ServiceContainer
from forum_search.db import Post, SQLAlchemyForumRepository
from forum_search.indexing import DocumentType, project_post
from forum_search.search import KeywordSearchFallback, SearchEngine, SearchResult, merge_results
from forum_search.search.fallback import MOCK_SCORES
from forum_search.vectorstore.models import VectorHit
from tests.fakes import InMemoryVectorStore, SlowVectorStore, configured_embeddings


def _hits(prefix: str, scores: list[float]) -> list[VectorHit]:
    return [
        VectorHit(id=f"{prefix}{i}", score=score, payload={"id": f"{prefix}{i}"})
        for i, score in enumerate(scores)
    ]


class TestSearchResult:
    """Tests for SearchResult."""

    def test_from_payload_inlines_score_and_type(self) -> None:
        result = SearchResult.from_payload(
            DocumentType.POST,
            {"id": "p1", "title": "Learning Rust", "type": "post"},
            0.42,
        )

        assert result.model_dump(mode="json") == {
            "id": "p1",
            "type": "post",
            "score": 0.42,
            "title": "Learning Rust",
        }


class TestMergeResults:
    """Tests for cross-collection merging."""

    def test_length_is_min_of_total_and_limit(self) -> None:
        groups = [
            (DocumentType.POST, _hits("p", [0.9, 0.5])),
            (DocumentType.COMMENT, _hits("c", [0.8])),
            (DocumentType.CATEGORY, _hits("k", [0.7, 0.6, 0.1])),
        ]

        assert len(merge_results(groups, 10)) == 6
        assert len(merge_results(groups, 4)) == 4

    def test_scores_non_increasing(self) -> None:
        groups = [
            (DocumentType.POST, _hits("p", [0.2, 0.95])),
            (DocumentType.COMMENT, _hits("c", [0.5, 0.3])),
            (DocumentType.CATEGORY, _hits("k", [0.99])),
        ]

        scores = [r.score for r in merge_results(groups, 10)]

        assert scores == sorted(scores, reverse=True)
        assert scores[0] == 0.99

    def test_ties_keep_collection_order(self) -> None:
        groups = [
            (DocumentType.POST, _hits("p", [0.5])),
            (DocumentType.COMMENT, _hits("c", [0.5])),
            (DocumentType.CATEGORY, _hits("k", [0.5])),
        ]

        results = merge_results(groups, 2)

        assert [r.id for r in results] == ["p0", "c0"]
        assert [r.type for r in results] == [DocumentType.POST, DocumentType.COMMENT]

    def test_empty(self) -> None:
        assert merge_results([], 5) == []


class TestKeywordSearchFallback:
    """Tests for the keyword fallback."""

    async def test_fixed_scores_by_type(
        self,
        store_repository: SQLAlchemyForumRepository,
        forum: dict[str, Any],
    ) -> None:
        results = await KeywordSearchFallback(store_repository).search("rust", 10)

        assert [(r.type, r.score) for r in results] == [
            (DocumentType.POST, 0.9),
            (DocumentType.POST, 0.9),
            (DocumentType.COMMENT, 0.8),
        ]

    async def test_posts_then_comments_then_categories(
        self,
        store_repository: SQLAlchemyForumRepository,
        forum: dict[str, Any],
    ) -> None:
        """Concatenation order is preserved; category hits come last."""
        results = await KeywordSearchFallback(store_repository).search("o", 20)

        types = [r.type for r in results]
        assert types == sorted(types, key=list(MOCK_SCORES).index)
        assert DocumentType.CATEGORY in types

    async def test_truncates_to_limit(
        self,
        store_repository: SQLAlchemyForumRepository,
        forum: dict[str, Any],
    ) -> None:
        results = await KeywordSearchFallback(store_repository).search("rust", 2)
        assert len(results) == 2

    async def test_results_carry_payload_fields(
        self,
        store_repository: SQLAlchemyForumRepository,
        forum: dict[str, Any],
    ) -> None:
        results = await KeywordSearchFallback(store_repository).search("tutorial", 10)

        data = results[0].model_dump(mode="json")
        assert data["content"] == "Great Rust tutorial"
        assert data["post_title"] == "Learning Rust"
        assert data["username"] == "alice"

    async def test_no_match(
        self,
        store_repository: SQLAlchemyForumRepository,
        forum: dict[str, Any],
    ) -> None:
        assert await KeywordSearchFallback(store_repository).search("haskell", 10) == []

    async def test_query_failure_returns_empty(self) -> None:
        repository = AsyncMock()
        repository.search_posts.side_effect = RuntimeError("database is locked")

        assert await KeywordSearchFallback(repository).search("rust", 10) == []


class TestSearchEngine:
    """Tests for SearchEngine."""

    async def test_rust_example_without_provider(
        self,
        unconfigured_container: ServiceContainer,
        vector_store: InMemoryVectorStore,
        forum: dict[str, Any],
    ) -> None:
        """Keyword search returns the two Rust posts at 0.9 for limit=2."""
        results = await unconfigured_container.search_engine.search("Rust", limit=2)

        assert [r.type for r in results] == [DocumentType.POST, DocumentType.POST]
        assert [r.score for r in results] == [0.9, 0.9]
        assert {r.id for r in results} == {forum["rust_intro"].id, forum["rust_async"].id}
        assert vector_store.calls == []

    async def test_blank_query(self, container: ServiceContainer) -> None:
        assert await container.search_engine.search("   ") == []

    async def test_vector_search_ranks_exact_match_first(
        self,
        container: ServiceContainer,
        indexed_forum: dict[str, Any],
    ) -> None:
        post = await container.repository.get(Post, indexed_forum["rust_intro"].id)
        assert post is not None

        results = await container.search_engine.search(project_post(post).text, limit=3)

        assert len(results) == 3
        assert results[0].id == post.id
        assert results[0].type is DocumentType.POST
        assert abs(results[0].score - 1.0) < 1e-9
        assert [r.score for r in results] == sorted((r.score for r in results), reverse=True)

    async def test_vector_search_queries_each_collection_once(
        self,
        container: ServiceContainer,
        vector_store: InMemoryVectorStore,
        indexed_forum: dict[str, Any],
    ) -> None:
        vector_store.calls.clear()

        await container.search_engine.search("bread", limit=5)

        assert sorted(vector_store.calls) == [
            ("search", "categories"),
            ("search", "comments"),
            ("search", "posts"),
        ]

    async def test_store_failure_falls_back_for_whole_request(
        self,
        container: ServiceContainer,
        vector_store: InMemoryVectorStore,
        indexed_forum: dict[str, Any],
    ) -> None:
        vector_store.failing.add("search")

        results = await container.search_engine.search("Rust", limit=2)

        assert [r.score for r in results] == [0.9, 0.9]

    async def test_timeout_falls_back(
        self,
        store_repository: SQLAlchemyForumRepository,
        forum: dict[str, Any],
    ) -> None:
        engine = SearchEngine(
            configured_embeddings(),
            SlowVectorStore(),
            KeywordSearchFallback(store_repository),
            timeout=0.05,
        )

        results = await engine.search("tutorial", limit=5)

        assert [(r.type, r.score) for r in results] == [(DocumentType.COMMENT, 0.8)]
