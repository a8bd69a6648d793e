"""Semantic search and indexing service for the discussion forum."""

__version__ = "0.1.0"
