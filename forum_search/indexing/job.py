"""Full reindex of every category, post and comment."""

from pydantic import BaseModel, Field

from forum_search.db.models import Category, Comment, Post
from forum_search.db.repository import ForumRepository
from forum_search.exceptions import ErrorCode, IndexingError
from forum_search.indexing.bootstrap import CollectionBootstrapper
from forum_search.indexing.indexer import EntityIndexer
from forum_search.indexing.models import Outcome, OutcomeStatus
from forum_search.logging_config import get_logger

logger = get_logger(__name__)


class TypeReport(BaseModel):
    """Counts for one document type."""

    indexed: int = Field(default=0, description="Documents upserted")
    skipped: int = Field(default=0, description="Documents skipped (unconfigured)")
    failed: int = Field(default=0, description="Documents that failed")

    def record(self, outcome: Outcome) -> None:
        if outcome.status is OutcomeStatus.OK:
            self.indexed += 1
        elif outcome.status is OutcomeStatus.SKIPPED:
            self.skipped += 1
        else:
            self.failed += 1


class IndexingReport(BaseModel):
    """Summary of a reindex run."""

    categories: TypeReport = Field(default_factory=TypeReport)
    posts: TypeReport = Field(default_factory=TypeReport)
    comments: TypeReport = Field(default_factory=TypeReport)

    @property
    def failed(self) -> int:
        return self.categories.failed + self.posts.failed + self.comments.failed


async def run_indexing(
    repository: ForumRepository,
    bootstrapper: CollectionBootstrapper,
    indexer: EntityIndexer,
) -> IndexingReport:
    """Bootstrap collections, then index categories, posts and comments.

    Args:
        repository: Source of rows. Pass an unwrapped repository; reads do
            not trigger the sync hook either way.
        bootstrapper: Collection bootstrapper.
        indexer: Entity indexer.

    Returns:
        Per-type counts of indexed, skipped and failed documents.

    Raises:
        IndexingError: If the collections could not be initialized.
    """
    logger.info("Starting content indexing")

    init = await bootstrapper.init_collections()
    if not init.succeeded:
        raise IndexingError(
            "Failed to initialize vector collections",
            code=ErrorCode.BOOTSTRAP_ERROR,
            details={"error": init.error},
        )
    logger.info("Initialized vector collections", extra={"status": init.status.value})

    report = IndexingReport()

    logger.info("Indexing categories")
    for category in await repository.list_all(Category):
        report.categories.record(await indexer.index_category(category))
        logger.info(f"Indexed category: {category.name}")

    logger.info("Indexing posts")
    for post in await repository.list_all(Post):
        report.posts.record(await indexer.index_post(post))
        logger.info(f"Indexed post: {post.title}")

    logger.info("Indexing comments")
    for comment in await repository.list_all(Comment):
        report.comments.record(await indexer.index_comment(comment))
        logger.info(f"Indexed comment by {comment.user.username}")

    logger.info(
        "Content indexing completed",
        extra={"report": report.model_dump(), "failed": report.failed},
    )
    return report
