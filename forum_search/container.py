"""Explicit construction and teardown of the service graph.

Every client is built once per process and passed by reference; nothing
lives in module-level globals.
"""

from dataclasses import dataclass

from forum_search.config import Settings, get_settings
from forum_search.db.repository import ForumRepository, SQLAlchemyForumRepository
from forum_search.db.session import Database
from forum_search.embeddings.service import FallbackEmbeddingService
from forum_search.indexing.bootstrap import CollectionBootstrapper
from forum_search.indexing.collection_names import CollectionNames
from forum_search.indexing.deleter import DocumentDeleter
from forum_search.indexing.indexer import EntityIndexer
from forum_search.indexing.sync import IndexingRepository
from forum_search.logging_config import get_logger
from forum_search.search.engine import SearchEngine
from forum_search.search.fallback import KeywordSearchFallback
from forum_search.vectorstore.service import QdrantVectorStore, VectorStore

logger = get_logger(__name__)


@dataclass
class ServiceContainer:
    """Wired services for one process.

    Attributes:
        database: Relational store (None when the repository is supplied
            directly, e.g. in tests).
        store_repository: Repository that talks to the store directly.
        repository: The same repository wrapped by the sync hook; route
            handlers write through this one.
    """

    settings: Settings
    database: Database | None
    store_repository: ForumRepository
    repository: ForumRepository
    embedding_service: FallbackEmbeddingService
    vector_store: VectorStore
    collections: CollectionNames
    bootstrapper: CollectionBootstrapper
    indexer: EntityIndexer
    deleter: DocumentDeleter
    search_engine: SearchEngine

    @classmethod
    def build(
        cls,
        settings: Settings,
        store_repository: ForumRepository,
        embedding_service: FallbackEmbeddingService,
        vector_store: VectorStore,
        database: Database | None = None,
    ) -> "ServiceContainer":
        """Wire the indexing and search services around the given clients."""
        collections = CollectionNames.with_prefix(settings.qdrant.collection_prefix)
        indexer = EntityIndexer(embedding_service, vector_store, collections)
        deleter = DocumentDeleter(embedding_service, vector_store, collections)
        search_engine = SearchEngine(
            embedding_service,
            vector_store,
            KeywordSearchFallback(store_repository),
            collections,
            timeout=settings.search.timeout,
        )
        return cls(
            settings=settings,
            database=database,
            store_repository=store_repository,
            repository=IndexingRepository(store_repository, indexer, deleter),
            embedding_service=embedding_service,
            vector_store=vector_store,
            collections=collections,
            bootstrapper=CollectionBootstrapper(embedding_service, vector_store, collections),
            indexer=indexer,
            deleter=deleter,
            search_engine=search_engine,
        )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "ServiceContainer":
        """Build real clients (SQLAlchemy, Qdrant, HTTP embeddings) from settings."""
        settings = settings or get_settings()
        database = Database(settings.database)
        embedding_service = FallbackEmbeddingService.from_settings(settings.embedding)

        if not embedding_service.is_configured:
            logger.warning(
                "No embedding API key configured; indexing is disabled and search "
                "uses keyword matching"
            )

        return cls.build(
            settings=settings,
            store_repository=SQLAlchemyForumRepository(database),
            embedding_service=embedding_service,
            vector_store=QdrantVectorStore(settings.qdrant),
            database=database,
        )

    async def close(self) -> None:
        """Close every owned client."""
        await self.embedding_service.close()
        await self.vector_store.close()
        if self.database is not None:
            await self.database.close()
