"""Vector store data models."""

from typing import Any

from pydantic import BaseModel, Field


class VectorRecord(BaseModel):
    """A point to store in the vector database.

    Attributes:
        id: Point identifier, the source entity's primary key.
        vector: The embedding vector.
        payload: Denormalized fields returned with search hits.
    """

    id: str = Field(description="Point identifier")
    vector: list[float] = Field(description="Embedding vector")
    payload: dict[str, Any] = Field(
        default_factory=dict,
        description="Metadata payload",
    )


class VectorHit(BaseModel):
    """A point returned from a similarity search.

    Attributes:
        id: Point identifier.
        score: Cosine similarity (higher is more similar).
        payload: Stored metadata.
    """

    id: str = Field(description="Point identifier")
    score: float = Field(description="Similarity score")
    payload: dict[str, Any] = Field(
        default_factory=dict,
        description="Point metadata",
    )
