"""Vector indexing of forum entities."""

from forum_search.indexing.bootstrap import CollectionBootstrapper
from forum_search.indexing.collection_names import CollectionNames, DocumentType
from forum_search.indexing.deleter import DocumentDeleter
from forum_search.indexing.documents import (
    project,
    project_category,
    project_comment,
    project_post,
)
from forum_search.indexing.indexer import EntityIndexer
from forum_search.indexing.job import IndexingReport, run_indexing
from forum_search.indexing.models import Outcome, OutcomeStatus, ProjectedDocument
from forum_search.indexing.sync import TRACKED_MODELS, IndexingRepository

__all__ = [
    "TRACKED_MODELS",
    "CollectionBootstrapper",
    "CollectionNames",
    "DocumentDeleter",
    "DocumentType",
    "EntityIndexer",
    "IndexingReport",
    "IndexingRepository",
    "Outcome",
    "OutcomeStatus",
    "ProjectedDocument",
    "project",
    "project_category",
    "project_comment",
    "project_post",
    "run_indexing",
]
