"""Application exception hierarchy.

All custom exceptions inherit from ForumSearchError.
Each exception has an error code for structured error handling.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes for structured error handling."""

    # General errors (1xxx)
    INTERNAL_ERROR = "FRM-1000"
    CONFIGURATION_ERROR = "FRM-1001"
    VALIDATION_ERROR = "FRM-1002"

    # Relational store errors (2xxx)
    ENTITY_NOT_FOUND = "FRM-2000"

    # Embedding errors (3xxx)
    EMBEDDING_SERVICE_ERROR = "FRM-3000"
    EMBEDDING_DIMENSION_MISMATCH = "FRM-3001"

    # Vector store errors (4xxx)
    VECTOR_STORE_ERROR = "FRM-4000"
    COLLECTION_NOT_FOUND = "FRM-4001"
    COLLECTION_EXISTS = "FRM-4002"

    # Search errors (5xxx)
    SEARCH_ERROR = "FRM-5000"

    # Indexing errors (6xxx)
    INDEXING_ERROR = "FRM-6000"
    BOOTSTRAP_ERROR = "FRM-6001"


class ForumSearchError(Exception):
    """Base exception for all forum search errors.

    Attributes:
        message: Human-readable error message.
        code: Structured error code.
        details: Additional error context.
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "details": self.details,
            }
        }


class ConfigurationError(ForumSearchError):
    """Configuration or environment error."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR, details)


class ValidationError(ForumSearchError):
    """Input validation error."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, ErrorCode.VALIDATION_ERROR, details)


class EntityNotFoundError(ForumSearchError):
    """A relational row does not exist."""

    def __init__(
        self,
        model: str,
        entity_id: str,
    ) -> None:
        super().__init__(
            f"{model} not found: {entity_id}",
            ErrorCode.ENTITY_NOT_FOUND,
            {"model": model, "id": entity_id},
        )


class EmbeddingError(ForumSearchError):
    """Embedding service error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.EMBEDDING_SERVICE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class VectorStoreError(ForumSearchError):
    """Vector store operation error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.VECTOR_STORE_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class SearchError(ForumSearchError):
    """Search operation error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.SEARCH_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)


class IndexingError(ForumSearchError):
    """Indexing job error."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.INDEXING_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, code, details)
