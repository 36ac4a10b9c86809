"""
API endpoints for the book catalog.

This module defines the FastAPI routes for listing, searching, creating,
retrieving and deleting books and for listing genres. It handles HTTP
concerns and delegates to the repository and the query service.

Storage failures are not caught here: they propagate as StorageError and
are rendered as 500 responses by the handler registered in app.main.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.api.v1 import schemas as api
from app.api.v1.converters import (
    api_create_to_domain,
    domain_book_to_api,
    domain_books_to_api,
)
from app.api.v1.dependencies import (
    get_book_repository,
    get_genre_registry,
    get_query_service,
)
from app.domain.ports import BookRepository, GenreRegistry
from app.domain.services import BookQueryService

router = APIRouter()


@router.get("/books", response_model=List[api.Book])
def list_books(
    book_repo: BookRepository = Depends(get_book_repository),
) -> List[api.Book]:
    """List every book in ascending id order."""
    return domain_books_to_api(book_repo.get_all())


@router.get("/books/search", response_model=List[api.Book])
def search_books(
    q: str = Query(default="", description="Case-insensitive title/author substring"),
    service: BookQueryService = Depends(get_query_service),
) -> List[api.Book]:
    """
    Search books by title or author.

    An empty query returns every book.
    """
    return domain_books_to_api(service.search(q))


@router.get("/books/genre/{genre}", response_model=List[api.Book])
def list_books_by_genre(
    genre: str,
    service: BookQueryService = Depends(get_query_service),
) -> List[api.Book]:
    """List books of a genre, ignoring case."""
    return domain_books_to_api(service.by_genre(genre))


@router.post("/book", response_model=api.Book)
def create_book(
    request: api.BookCreate,
    book_repo: BookRepository = Depends(get_book_repository),
) -> api.Book:
    """
    Add a book to the catalog.

    Returns:
        The stored book with its assigned id
    """
    stored = book_repo.insert(api_create_to_domain(request))
    return domain_book_to_api(stored)


@router.get("/book/{book_id}", response_model=api.Book)
def get_book(
    book_id: str,
    book_repo: BookRepository = Depends(get_book_repository),
) -> api.Book:
    """
    Get a book by id.

    Raises:
        404: Book not found
    """
    book = book_repo.get_by_id(book_id)
    if book is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Book not found",
        )
    return domain_book_to_api(book)


@router.delete("/book/{book_id}")
def delete_book(
    book_id: str,
    book_repo: BookRepository = Depends(get_book_repository),
) -> Response:
    """Delete a book by id. Unknown ids also return 200."""
    book_repo.delete(book_id)
    return Response(status_code=status.HTTP_200_OK)


@router.get("/genres", response_model=List[str])
def list_genres(
    registry: GenreRegistry = Depends(get_genre_registry),
) -> List[str]:
    """List every genre name ever used, in key order."""
    return registry.list()


@router.get("/health", response_model=api.HealthStatus)
def health_check(
    book_repo: BookRepository = Depends(get_book_repository),
) -> api.HealthStatus:
    """Check that the store is readable and report the catalog size."""
    return api.HealthStatus(status="ok", books=book_repo.count())
