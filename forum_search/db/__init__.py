"""Relational store: models, engine and repositories."""

from forum_search.db.models import Base, Category, Comment, Post, User
from forum_search.db.repository import ForumRepository, SQLAlchemyForumRepository
from forum_search.db.session import Database

__all__ = [
    "Base",
    "Category",
    "Comment",
    "Database",
    "ForumRepository",
    "Post",
    "SQLAlchemyForumRepository",
    "User",
]
