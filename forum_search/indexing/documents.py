"""Projection of relational rows into indexable documents.

The same projection feeds the indexers and the keyword fallback, so search
results look identical whichever path produced them.
"""

from forum_search.db.models import Base, Category, Comment, Post
from forum_search.indexing.collection_names import DocumentType
from forum_search.indexing.models import (
    CategoryPayload,
    CommentPayload,
    PostPayload,
    ProjectedDocument,
)


def project_post(post: Post) -> ProjectedDocument:
    """Project a post joined with its user and category."""
    payload = PostPayload(
        id=post.id,
        title=post.title,
        content=post.content,
        created_at=post.created_at,
        user_id=post.user_id,
        username=post.user.username,
        user_name=post.user.name,
        category_id=post.category_id,
        category_name=post.category.name,
    )
    return ProjectedDocument(
        id=post.id,
        type=DocumentType.POST,
        text=f"{post.title} {post.content} {post.user.username} {post.category.name}",
        payload=payload.model_dump(mode="json"),
    )


def project_comment(comment: Comment) -> ProjectedDocument:
    """Project a comment joined with its user and post."""
    payload = CommentPayload(
        id=comment.id,
        content=comment.content,
        created_at=comment.created_at,
        user_id=comment.user_id,
        username=comment.user.username,
        user_name=comment.user.name,
        post_id=comment.post_id,
        post_title=comment.post.title,
    )
    return ProjectedDocument(
        id=comment.id,
        type=DocumentType.COMMENT,
        text=f"{comment.content} {comment.user.username} comment on post: {comment.post.title}",
        payload=payload.model_dump(mode="json"),
    )


def project_category(category: Category) -> ProjectedDocument:
    """Project a category."""
    payload = CategoryPayload(
        id=category.id,
        name=category.name,
        description=category.description,
        slug=category.slug,
    )
    return ProjectedDocument(
        id=category.id,
        type=DocumentType.CATEGORY,
        text=f"{category.name} {category.description or ''}",
        payload=payload.model_dump(mode="json"),
    )


def project(doc_type: DocumentType, entity: Base) -> ProjectedDocument:
    """Dispatch to the projection for ``doc_type``."""
    if doc_type is DocumentType.POST:
        return project_post(entity)  # type: ignore[arg-type]
    if doc_type is DocumentType.COMMENT:
        return project_comment(entity)  # type: ignore[arg-type]
    return project_category(entity)  # type: ignore[arg-type]
