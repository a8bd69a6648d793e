"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from forum_search.api.app import create_app
from forum_search.config import DatabaseSettings, SearchSettings, Settings
from forum_search.container import ServiceContainer
from forum_search.db import Category, Comment, Database, Post, User
from forum_search.db.repository import ForumRepository, SQLAlchemyForumRepository
from tests.fakes import InMemoryVectorStore, configured_embeddings, unconfigured_embeddings


@pytest.fixture
def settings() -> Settings:
    return Settings(
        database=DatabaseSettings(url="sqlite+aiosqlite:///:memory:"),
        search=SearchSettings(timeout=5.0),
    )


@pytest.fixture
async def database(settings: Settings) -> AsyncGenerator[Database, None]:
    """In-memory SQLite database with the schema created."""
    db = Database(settings.database)
    await db.create_all()
    yield db
    await db.close()


@pytest.fixture
def store_repository(database: Database) -> SQLAlchemyForumRepository:
    return SQLAlchemyForumRepository(database)


@pytest.fixture
def vector_store() -> InMemoryVectorStore:
    return InMemoryVectorStore()


@pytest.fixture
def container(
    settings: Settings,
    database: Database,
    store_repository: SQLAlchemyForumRepository,
    vector_store: InMemoryVectorStore,
) -> ServiceContainer:
    """Services with an embedding provider configured."""
    return ServiceContainer.build(
        settings=settings,
        store_repository=store_repository,
        embedding_service=configured_embeddings(),
        vector_store=vector_store,
        database=database,
    )


@pytest.fixture
def unconfigured_container(
    settings: Settings,
    database: Database,
    store_repository: SQLAlchemyForumRepository,
    vector_store: InMemoryVectorStore,
) -> ServiceContainer:
    """Services without an embedding provider."""
    return ServiceContainer.build(
        settings=settings,
        store_repository=store_repository,
        embedding_service=unconfigured_embeddings(),
        vector_store=vector_store,
        database=database,
    )


@pytest.fixture
async def client(container: ServiceContainer) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client for the FastAPI app.

    Yields:
        AsyncClient configured for testing.
    """
    transport = ASGITransport(app=create_app(container))
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def unconfigured_client(
    unconfigured_container: ServiceContainer,
) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=create_app(unconfigured_container))
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def seed_forum(repository: ForumRepository) -> dict[str, Any]:
    """Create a small forum: one user, two categories, three posts, two comments."""
    alice = await repository.create(User, {"username": "alice", "name": "Alice"})
    programming = await repository.create(
        Category,
        {"name": "Programming", "slug": "programming", "description": "Code and languages"},
    )
    cooking = await repository.create(
        Category,
        {"name": "Cooking", "slug": "cooking", "description": "Recipes and kitchen tips"},
    )
    rust_intro = await repository.create(
        Post,
        {
            "title": "Learning Rust",
            "content": "Ownership and borrowing explained",
            "user_id": alice.id,
            "category_id": programming.id,
        },
    )
    rust_async = await repository.create(
        Post,
        {
            "title": "Async Rust",
            "content": "Futures and the tokio runtime",
            "user_id": alice.id,
            "category_id": programming.id,
        },
    )
    bread = await repository.create(
        Post,
        {
            "title": "Sourdough bread",
            "content": "Feeding a starter",
            "user_id": alice.id,
            "category_id": cooking.id,
        },
    )
    rust_comment = await repository.create(
        Comment,
        {"content": "Great Rust tutorial", "user_id": alice.id, "post_id": rust_intro.id},
    )
    bread_comment = await repository.create(
        Comment,
        {"content": "Mine never rises", "user_id": alice.id, "post_id": bread.id},
    )
    return {
        "user": alice,
        "programming": programming,
        "cooking": cooking,
        "rust_intro": rust_intro,
        "rust_async": rust_async,
        "bread": bread,
        "rust_comment": rust_comment,
        "bread_comment": bread_comment,
    }


@pytest.fixture
async def forum(store_repository: SQLAlchemyForumRepository) -> dict[str, Any]:
    """Seeded rows, written directly to the store (not indexed)."""
    return await seed_forum(store_repository)


@pytest.fixture
async def indexed_forum(container: ServiceContainer) -> dict[str, Any]:
    """Seeded rows, written through the indexing repository."""
    await container.bootstrapper.init_collections()
    return await seed_forum(container.repository)
