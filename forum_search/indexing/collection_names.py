"""Document types and the vector collections that hold them."""

from enum import Enum

from pydantic import BaseModel, Field


class DocumentType(str, Enum):
    """Entity types mirrored into the vector index."""

    POST = "post"
    COMMENT = "comment"
    CATEGORY = "category"


class CollectionNames(BaseModel):
    """Names of the vector collections, one per entity type.

    ``users`` is reserved: it is bootstrapped but no indexer writes to it.
    """

    posts: str = Field(default="posts")
    comments: str = Field(default="comments")
    categories: str = Field(default="categories")
    users: str = Field(default="users")

    @classmethod
    def with_prefix(cls, prefix: str) -> "CollectionNames":
        """Build names namespaced by ``prefix`` (e.g. ``staging_posts``)."""
        if not prefix:
            return cls()
        return cls(
            posts=f"{prefix}posts",
            comments=f"{prefix}comments",
            categories=f"{prefix}categories",
            users=f"{prefix}users",
        )

    def for_type(self, doc_type: DocumentType) -> str:
        """Collection holding documents of ``doc_type``."""
        if doc_type is DocumentType.POST:
            return self.posts
        if doc_type is DocumentType.COMMENT:
            return self.comments
        return self.categories

    def searchable(self) -> list[tuple[DocumentType, str]]:
        """Content collections in search order: posts, comments, categories."""
        return [
            (DocumentType.POST, self.posts),
            (DocumentType.COMMENT, self.comments),
            (DocumentType.CATEGORY, self.categories),
        ]

    def all(self) -> list[str]:
        """Every collection that must exist before indexing."""
        return [self.posts, self.comments, self.categories, self.users]
