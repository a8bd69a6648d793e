"""Indexing data models: payloads, projected documents and outcomes."""

from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field

from forum_search.indexing.collection_names import DocumentType


class PostPayload(BaseModel):
    """Denormalized post fields stored with its vector."""

    id: str
    title: str
    content: str
    created_at: datetime
    user_id: str
    username: str
    user_name: str | None = None
    category_id: str
    category_name: str
    type: Literal[DocumentType.POST] = DocumentType.POST


class CommentPayload(BaseModel):
    """Denormalized comment fields stored with its vector."""

    id: str
    content: str
    created_at: datetime
    user_id: str
    username: str
    user_name: str | None = None
    post_id: str
    post_title: str
    type: Literal[DocumentType.COMMENT] = DocumentType.COMMENT


class CategoryPayload(BaseModel):
    """Category fields stored with its vector."""

    id: str
    name: str
    description: str | None = None
    slug: str
    type: Literal[DocumentType.CATEGORY] = DocumentType.CATEGORY


class ProjectedDocument(BaseModel):
    """A relational row flattened into embeddable text plus payload.

    Attributes:
        id: Source entity primary key.
        type: Document type.
        text: Text blob sent to the embedding provider.
        payload: JSON-ready payload stored with the vector.
    """

    id: str = Field(description="Source entity primary key")
    type: DocumentType = Field(description="Document type")
    text: str = Field(description="Text to embed")
    payload: dict[str, Any] = Field(description="Vector payload")


class OutcomeStatus(str, Enum):
    """Result of a best-effort index operation."""

    OK = "ok"
    SKIPPED = "skipped"  # no embedding provider configured
    FAILED = "failed"


class Outcome(BaseModel):
    """Tagged result of a bootstrap, index or delete operation.

    ``skipped`` is a success: configuration absence is a deliberate
    degradation, not an error.
    """

    status: OutcomeStatus = Field(description="Outcome status")
    operation: str = Field(description="Operation name")
    document_id: str | None = Field(default=None, description="Affected document id")
    error: str | None = Field(default=None, description="Failure description")

    @property
    def succeeded(self) -> bool:
        return self.status is not OutcomeStatus.FAILED

    @classmethod
    def ok(cls, operation: str, document_id: str | None = None) -> "Outcome":
        return cls(status=OutcomeStatus.OK, operation=operation, document_id=document_id)

    @classmethod
    def skipped(cls, operation: str, document_id: str | None = None) -> "Outcome":
        return cls(status=OutcomeStatus.SKIPPED, operation=operation, document_id=document_id)

    @classmethod
    def failed(
        cls,
        operation: str,
        error: str,
        document_id: str | None = None,
    ) -> "Outcome":
        return cls(
            status=OutcomeStatus.FAILED,
            operation=operation,
            document_id=document_id,
            error=error,
        )
