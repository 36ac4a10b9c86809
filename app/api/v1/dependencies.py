"""
FastAPI dependencies for dependency injection.

This module provides singleton instances of the store, repositories and
services for use with FastAPI's Depends() system.

Note: We use module-level singletons instead of @lru_cache with Depends()
parameters, which is an antipattern that can cause unexpected behavior.
"""

import os
from pathlib import Path
from typing import Optional

from app.domain.ports import BookRepository, GenreRegistry
from app.domain.services import BookQueryService
from app.infrastructure.db.kv_book_repository import KvBookRepository
from app.infrastructure.db.kv_genre_registry import KvGenreRegistry
from app.infrastructure.kv import KeyValueStore

# Configuration from environment
DB_PATH = Path(os.getenv("DB_PATH", "data/library.db"))
DB_TIMEOUT = float(os.getenv("DB_TIMEOUT", "5.0"))

# Module-level singletons (initialized lazily)
_store: Optional[KeyValueStore] = None
_genre_registry: Optional[GenreRegistry] = None
_book_repository: Optional[BookRepository] = None
_query_service: Optional[BookQueryService] = None


def get_store() -> KeyValueStore:
    """Provide the single store handle shared by all components."""
    global _store
    if _store is None:
        _store = KeyValueStore(DB_PATH, timeout=DB_TIMEOUT)
    return _store


def get_genre_registry() -> GenreRegistry:
    """Provide a singleton instance of the genre registry."""
    global _genre_registry
    if _genre_registry is None:
        _genre_registry = KvGenreRegistry(get_store())
    return _genre_registry


def get_book_repository() -> BookRepository:
    """Provide a singleton instance of the book repository."""
    global _book_repository
    if _book_repository is None:
        _book_repository = KvBookRepository(get_store(), get_genre_registry())
    return _book_repository


def get_query_service() -> BookQueryService:
    """Provide the query service wired to the book repository."""
    global _query_service
    if _query_service is None:
        _query_service = BookQueryService(book_repo=get_book_repository())
    return _query_service


def reset_dependencies() -> None:
    """
    Reset all singletons. Useful for testing.

    Closes the current store, if any, so the next call to get_store()
    picks up the current DB_PATH.
    """
    global _store, _genre_registry, _book_repository, _query_service

    if _store is not None:
        _store.close()

    _store = None
    _genre_registry = None
    _book_repository = None
    _query_service = None
