"""
Domain service for read-only catalog queries.

Both queries scan the whole catalog through the repository and filter in
memory. There is no secondary index, so each call is O(n) in the number of
stored books.
"""

import logging
from typing import List

from app.domain.entities import Book
from app.domain.ports import BookRepository

logger = logging.getLogger(__name__)


class BookQueryService:
    """
    Filters the catalog by text and by genre.

    Usage:
        service = BookQueryService(book_repo=repository)
        dune_like = service.search("herbert")
        scifi = service.by_genre("sci-fi")
    """

    def __init__(self, book_repo: BookRepository) -> None:
        self._book_repo = book_repo

    def search(self, query: str) -> List[Book]:
        """
        Return books whose title or author contains `query`, ignoring case.

        Results keep the repository's scan order. An empty query returns
        every book.

        Raises:
            RuntimeError: If the catalog cannot be read
        """
        books = self._book_repo.get_all()
        matches = [book for book in books if book.matches_text(query)]
        logger.debug(f"search '{query}' matched {len(matches)} of {len(books)} books")
        return matches

    def by_genre(self, genre: str) -> List[Book]:
        """
        Return books whose genre equals `genre`, ignoring case.

        Raises:
            RuntimeError: If the catalog cannot be read
        """
        books = self._book_repo.get_all()
        matches = [book for book in books if book.has_genre(genre)]
        logger.debug(f"genre '{genre}' matched {len(matches)} of {len(books)} books")
        return matches
