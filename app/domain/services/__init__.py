"""
Domain services package.

Services orchestrate domain logic that doesn't naturally belong to a single
entity. They depend only on domain entities and port protocols, never on
concrete implementations.
"""

from .book_query_service import BookQueryService

__all__ = [
    "BookQueryService",
]
