"""Search result models."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from forum_search.indexing.collection_names import DocumentType


class SearchResult(BaseModel):
    """A ranked hit flattened to ``{type, score, ...payload}``.

    The payload fields (title, content, username, ...) vary by type and are
    kept as extra attributes, so results render the same whether they came
    from vector search or the keyword fallback.
    """

    model_config = ConfigDict(extra="allow")

    id: str = Field(description="Source entity primary key")
    type: DocumentType = Field(description="Document type")
    score: float = Field(description="Relevance score")

    @classmethod
    def from_payload(
        cls,
        doc_type: DocumentType,
        payload: dict[str, Any],
        score: float,
    ) -> "SearchResult":
        """Inline ``score`` into a stored payload."""
        return cls.model_validate({**payload, "type": doc_type, "score": score})


class SearchMeta(BaseModel):
    """Echo of the search request."""

    query: str = Field(description="Search query")
    count: int = Field(description="Number of results returned")


class SearchResponse(BaseModel):
    """Search endpoint response body."""

    results: list[SearchResult] = Field(default_factory=list)
    meta: SearchMeta
