"""
Domain entities for the library catalog.

Entities are objects with a unique identity that runs through time and
different representations. They are the core building blocks of the domain.
"""

from dataclasses import dataclass, fields
from typing import Optional


@dataclass
class Book:
    """
    Represents a book in the catalog.

    A book gets its identity when it is inserted into the catalog; until
    then `id` is None. Books are never updated in place.
    """

    id: Optional[str] = None
    """Decimal rendering of the catalog sequence number, assigned on insert"""

    title: str = ""
    """Book title"""

    author: str = ""
    """Author name"""

    description: str = ""
    """Free-text description"""

    genre: str = ""
    """Genre name; compared case-insensitively when grouping"""

    def __post_init__(self) -> None:
        """Validate field types."""
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "id" and value is None:
                continue
            if not isinstance(value, str):
                raise ValueError(
                    f"Book field '{f.name}' must be a string, got {type(value).__name__}"
                )

    def matches_text(self, query: str) -> bool:
        """
        Check whether the title or the author contains `query`, ignoring case.

        An empty query matches every book.
        """
        needle = query.lower()
        return needle in self.title.lower() or needle in self.author.lower()

    def has_genre(self, genre: str) -> bool:
        """Check whether this book belongs to `genre`, ignoring case."""
        return self.genre.lower() == genre.lower()
