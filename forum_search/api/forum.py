"""Forum CRUD routes.

Every write goes through the indexing repository, so posts, comments and
categories are re-indexed (or removed from the index) right after the
relational write succeeds.
"""

from datetime import datetime

from fastapi import APIRouter, status
from pydantic import BaseModel, ConfigDict, Field

from forum_search.api.dependencies import RepositoryDep
from forum_search.db.models import Category, Comment, Post, User
from forum_search.exceptions import EntityNotFoundError

# Create router
router = APIRouter(prefix="/api", tags=["Forum"])


class UserCreate(BaseModel):
    """Request body for creating a user."""

    username: str = Field(min_length=1, max_length=50)
    name: str | None = Field(default=None, max_length=100)
    email: str | None = Field(default=None, max_length=255)


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    username: str
    name: str | None
    email: str | None
    created_at: datetime


class CategoryCreate(BaseModel):
    """Request body for creating a category."""

    name: str = Field(min_length=1, max_length=100)
    slug: str = Field(min_length=1, max_length=100)
    description: str | None = None


class CategoryUpdate(BaseModel):
    """Partial category update; omitted fields are left unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    slug: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None


class CategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str
    description: str | None
    created_at: datetime


class PostCreate(BaseModel):
    """Request body for creating a post."""

    title: str = Field(min_length=1, max_length=300)
    content: str = Field(min_length=1)
    user_id: str
    category_id: str


class PostUpdate(BaseModel):
    """Partial post update; omitted fields are left unchanged."""

    title: str | None = Field(default=None, min_length=1, max_length=300)
    content: str | None = Field(default=None, min_length=1)
    category_id: str | None = None


class PostOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    content: str
    user_id: str
    category_id: str
    created_at: datetime
    updated_at: datetime


class CommentCreate(BaseModel):
    """Request body for commenting on a post."""

    content: str = Field(min_length=1)
    user_id: str


class CommentUpdate(BaseModel):
    """Request body for editing a comment."""

    content: str = Field(min_length=1)


class CommentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    content: str
    user_id: str
    post_id: str
    created_at: datetime
    updated_at: datetime


@router.post("/users", response_model=UserOut, status_code=status.HTTP_201_CREATED)
async def create_user(body: UserCreate, repository: RepositoryDep) -> User:
    return await repository.create(User, body.model_dump())


@router.post("/categories", response_model=CategoryOut, status_code=status.HTTP_201_CREATED)
async def create_category(body: CategoryCreate, repository: RepositoryDep) -> Category:
    return await repository.create(Category, body.model_dump())


@router.patch("/categories/{category_id}", response_model=CategoryOut)
async def update_category(
    category_id: str,
    body: CategoryUpdate,
    repository: RepositoryDep,
) -> Category:
    return await repository.update(Category, category_id, body.model_dump(exclude_unset=True))


@router.delete("/categories/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_category(category_id: str, repository: RepositoryDep) -> None:
    """Delete a category along with its posts and their comments."""
    await repository.delete(Category, category_id)


@router.post("/posts", response_model=PostOut, status_code=status.HTTP_201_CREATED)
async def create_post(body: PostCreate, repository: RepositoryDep) -> Post:
    return await repository.create(Post, body.model_dump())


@router.get("/posts/{post_id}", response_model=PostOut)
async def get_post(post_id: str, repository: RepositoryDep) -> Post:
    post = await repository.get(Post, post_id)
    if post is None:
        raise EntityNotFoundError("Post", post_id)
    return post


@router.patch("/posts/{post_id}", response_model=PostOut)
async def update_post(post_id: str, body: PostUpdate, repository: RepositoryDep) -> Post:
    return await repository.update(Post, post_id, body.model_dump(exclude_unset=True))


@router.delete("/posts/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(post_id: str, repository: RepositoryDep) -> None:
    await repository.delete(Post, post_id)


@router.post(
    "/posts/{post_id}/comments",
    response_model=CommentOut,
    status_code=status.HTTP_201_CREATED,
)
async def create_comment(
    post_id: str,
    body: CommentCreate,
    repository: RepositoryDep,
) -> Comment:
    if await repository.get(Post, post_id) is None:
        raise EntityNotFoundError("Post", post_id)
    return await repository.create(Comment, {**body.model_dump(), "post_id": post_id})


@router.patch("/comments/{comment_id}", response_model=CommentOut)
async def update_comment(
    comment_id: str,
    body: CommentUpdate,
    repository: RepositoryDep,
) -> Comment:
    return await repository.update(Comment, comment_id, body.model_dump())


@router.delete("/comments/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(comment_id: str, repository: RepositoryDep) -> None:
    await repository.delete(Comment, comment_id)
