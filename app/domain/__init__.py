"""
Domain layer - Core business logic and entities.

This layer contains the business entities and defines the ports
(interfaces) that the infrastructure layer must implement.

It has NO dependencies on external frameworks, databases, or APIs.
"""

from .entities import Book
from .ports import BookRepository, GenreRegistry

__all__ = [
    # Entities
    "Book",
    # Ports
    "BookRepository",
    "GenreRegistry",
]
