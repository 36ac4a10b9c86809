"""
Port interfaces (protocols) for the domain layer.

Ports define the contracts between the domain and infrastructure layers.
They are implemented by adapters in the infrastructure layer, allowing
the domain to remain independent of technical details.

Following Hexagonal Architecture principles, the domain layer depends only
on these abstract protocols, never on concrete implementations.
"""

from typing import List, Optional, Protocol

from .entities import Book


class GenreRegistry(Protocol):
    """
    Port for the set of known genre names.

    Entries are compared by exact string equality, so "Sci-Fi" and "sci-fi"
    are two distinct entries. Entries are never removed.
    """

    def ensure(self, name: str) -> None:
        """
        Register a genre name if it is not registered yet.

        Idempotent: calling it again with the same name does nothing.

        Raises:
            RuntimeError: If a storage error occurs
        """
        ...

    def list(self) -> List[str]:
        """
        Return all registered genre names in key order.

        Returns:
            Genre names, empty if none were ever registered

        Raises:
            RuntimeError: If a storage error occurs
        """
        ...


class BookRepository(Protocol):
    """
    Port for persisting and retrieving books.

    Implementations assign ids on insert and return books in ascending id
    order from get_all().
    """

    def initialize(self) -> None:
        """
        Prepare the underlying storage.

        Raises:
            RuntimeError: If storage cannot be opened. Callers treat this as
                fatal.
        """
        ...

    def insert(self, book: Book) -> Book:
        """
        Store a new book, registering its genre first.

        Any id already set on `book` is ignored.

        Args:
            book: The book to store

        Returns:
            A copy of the book carrying its newly assigned id

        Raises:
            RuntimeError: If a storage error occurs
        """
        ...

    def get_all(self) -> List[Book]:
        """
        Retrieve all books in ascending id order.

        Raises:
            RuntimeError: If a storage or decoding error occurs
        """
        ...

    def get_by_id(self, book_id: str) -> Optional[Book]:
        """
        Retrieve a book by id.

        Returns:
            The Book if found, None otherwise

        Raises:
            RuntimeError: If a storage or decoding error occurs
        """
        ...

    def delete(self, book_id: str) -> None:
        """
        Delete a book by id. Deleting an unknown id is not an error.

        Raises:
            RuntimeError: If a storage error occurs
        """
        ...

    def count(self) -> int:
        """Return the number of stored books."""
        ...
