"""Data access for forum entities."""

from abc import ABC, abstractmethod
from typing import Any, TypeVar

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload
from sqlalchemy.orm.interfaces import LoaderOption

from forum_search.db.models import Base, Category, Comment, Post, User
from forum_search.db.session import Database
from forum_search.exceptions import EntityNotFoundError, ValidationError
from forum_search.logging_config import get_logger

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


class ForumRepository(ABC):
    """Abstract data access layer for forum entities.

    Reads return rows with the joins needed to render or index them:
    posts carry ``user`` and ``category``, comments carry ``user`` and ``post``.
    """

    @abstractmethod
    async def create(self, model: type[ModelT], values: dict[str, Any]) -> ModelT:
        """Insert a row and return it."""
        ...

    @abstractmethod
    async def update(
        self,
        model: type[ModelT],
        entity_id: str,
        values: dict[str, Any],
    ) -> ModelT:
        """Apply ``values`` to an existing row and return it.

        Raises:
            EntityNotFoundError: If the row does not exist.
        """
        ...

    @abstractmethod
    async def delete(self, model: type[ModelT], entity_id: str) -> ModelT:
        """Delete a row and return it as it was.

        Raises:
            EntityNotFoundError: If the row does not exist.
        """
        ...

    @abstractmethod
    async def cascaded_ids(
        self,
        model: type[Base],
        entity_id: str,
    ) -> dict[type[Base], list[str]]:
        """Ids of the posts and comments that deleting this row would cascade to."""
        ...

    @abstractmethod
    async def get(self, model: type[ModelT], entity_id: str) -> ModelT | None:
        """Fetch one row with its joins, or None."""
        ...

    @abstractmethod
    async def list_all(self, model: type[ModelT]) -> list[ModelT]:
        """Fetch every row of a model with its joins."""
        ...

    @abstractmethod
    async def search_posts(self, query: str, limit: int) -> list[Post]:
        """Posts whose title or content contains ``query``."""
        ...

    @abstractmethod
    async def search_comments(self, query: str, limit: int) -> list[Comment]:
        """Comments whose content contains ``query``."""
        ...

    @abstractmethod
    async def search_categories(self, query: str, limit: int) -> list[Category]:
        """Categories whose name or description contains ``query``."""
        ...


def _load_options(model: type[Base]) -> list[LoaderOption]:
    if model is Post:
        return [
            joinedload(Post.user, innerjoin=True),
            joinedload(Post.category, innerjoin=True),
        ]
    if model is Comment:
        return [
            joinedload(Comment.user, innerjoin=True),
            joinedload(Comment.post, innerjoin=True),
        ]
    return []


async def _commit(session: AsyncSession, model: type[Base]) -> None:
    try:
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        raise ValidationError(
            f"{model.__name__} violates a constraint",
            details={"model": model.__name__, "error": str(e.orig)},
        ) from e


class SQLAlchemyForumRepository(ForumRepository):
    """ForumRepository backed by an async SQLAlchemy session per call."""

    def __init__(self, database: Database) -> None:
        self._database = database

    async def create(self, model: type[ModelT], values: dict[str, Any]) -> ModelT:
        async with self._database.session() as session:
            entity = model(**values)
            session.add(entity)
            await _commit(session, model)

        logger.debug(f"Created {model.__name__}", extra={"id": entity.id})  # type: ignore[attr-defined]
        return entity

    async def update(
        self,
        model: type[ModelT],
        entity_id: str,
        values: dict[str, Any],
    ) -> ModelT:
        async with self._database.session() as session:
            entity = await session.get(model, entity_id)
            if entity is None:
                raise EntityNotFoundError(model.__name__, entity_id)

            for key, value in values.items():
                setattr(entity, key, value)
            await _commit(session, model)

        logger.debug(f"Updated {model.__name__}", extra={"id": entity_id})
        return entity

    async def delete(self, model: type[ModelT], entity_id: str) -> ModelT:
        async with self._database.session() as session:
            entity = await session.get(model, entity_id)
            if entity is None:
                raise EntityNotFoundError(model.__name__, entity_id)

            await session.delete(entity)
            await session.commit()

        logger.debug(f"Deleted {model.__name__}", extra={"id": entity_id})
        return entity

    async def cascaded_ids(
        self,
        model: type[Base],
        entity_id: str,
    ) -> dict[type[Base], list[str]]:
        if model is Post:
            post_ids = select(Post.id).where(Post.id == entity_id)
        elif model is Category:
            post_ids = select(Post.id).where(Post.category_id == entity_id)
        elif model is User:
            post_ids = select(Post.id).where(Post.user_id == entity_id)
        else:
            return {}

        comment_filter = Comment.post_id.in_(post_ids)
        if model is User:
            comment_filter = or_(comment_filter, Comment.user_id == entity_id)

        async with self._database.session() as session:
            posts = (await session.execute(post_ids)).scalars().all()
            comments = (
                await session.execute(select(Comment.id).where(comment_filter))
            ).scalars().all()

        cascaded: dict[type[Base], list[str]] = {Comment: list(comments)}
        if model is not Post:
            cascaded[Post] = list(posts)
        return cascaded

    async def get(self, model: type[ModelT], entity_id: str) -> ModelT | None:
        stmt = (
            select(model)
            .where(model.id == entity_id)  # type: ignore[attr-defined]
            .options(*_load_options(model))
        )
        async with self._database.session() as session:
            result = await session.execute(stmt)
            return result.scalars().unique().one_or_none()

    async def list_all(self, model: type[ModelT]) -> list[ModelT]:
        stmt = (
            select(model)
            .options(*_load_options(model))
            .order_by(model.created_at)  # type: ignore[attr-defined]
        )
        async with self._database.session() as session:
            result = await session.execute(stmt)
            return list(result.scalars().unique().all())

    async def search_posts(self, query: str, limit: int) -> list[Post]:
        stmt = (
            select(Post)
            .where(
                or_(
                    Post.title.icontains(query, autoescape=True),
                    Post.content.icontains(query, autoescape=True),
                )
            )
            .options(*_load_options(Post))
            .order_by(Post.created_at.desc())
            .limit(limit)
        )
        async with self._database.session() as session:
            result = await session.execute(stmt)
            return list(result.scalars().unique().all())

    async def search_comments(self, query: str, limit: int) -> list[Comment]:
        stmt = (
            select(Comment)
            .where(Comment.content.icontains(query, autoescape=True))
            .options(*_load_options(Comment))
            .order_by(Comment.created_at.desc())
            .limit(limit)
        )
        async with self._database.session() as session:
            result = await session.execute(stmt)
            return list(result.scalars().unique().all())

    async def search_categories(self, query: str, limit: int) -> list[Category]:
        stmt = (
            select(Category)
            .where(
                or_(
                    Category.name.icontains(query, autoescape=True),
                    Category.description.icontains(query, autoescape=True),
                )
            )
            .order_by(Category.name)
            .limit(limit)
        )
        async with self._database.session() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())
