"""
Converters between domain entities and API schemas.

This module centralizes all conversion logic between the domain layer
and the API layer, maintaining clean separation of concerns.
"""

from dataclasses import asdict
from typing import List

from app.domain import entities as domain
from app.api.v1 import schemas as api


def domain_book_to_api(book: domain.Book) -> api.Book:
    """
    Convert a stored domain Book entity to an API Book model.

    Args:
        book: Domain Book entity with an assigned id

    Returns:
        API Book model
    """
    return api.Book(**asdict(book))


def domain_books_to_api(books: List[domain.Book]) -> List[api.Book]:
    return [domain_book_to_api(book) for book in books]


def api_create_to_domain(request: api.BookCreate) -> domain.Book:
    """
    Convert an API create request into a new domain Book.

    The request's id is dropped; the repository assigns one on insert.
    """
    return domain.Book(
        title=request.title,
        author=request.author,
        description=request.description,
        genre=request.genre,
    )
