"""
Request and response models for the HTTP API.
"""

from pydantic import BaseModel, Field, field_validator


class BookCreate(BaseModel):
    """
    Request body for POST /book.

    Missing text fields default to an empty string. A client-supplied `id`
    is accepted but ignored; the catalog assigns ids.
    """

    id: str | None = Field(default=None, description="Ignored on create")
    title: str = Field(default="", description="Book title")
    author: str = Field(default="", description="Author name")
    description: str = Field(default="", description="Free-text description")
    genre: str = Field(default="", description="Genre name")

    @field_validator("title", "author", "description", "genre")
    @classmethod
    def encodable_as_utf8(cls, value: str) -> str:
        """Reject text such as lone surrogates that cannot be stored as UTF-8."""
        try:
            value.encode("utf-8")
        except UnicodeEncodeError as e:
            raise ValueError(f"text is not valid UTF-8: {e.reason}") from e
        return value


class Book(BaseModel):
    """
    API representation of a Book entity.
    """

    id: str = Field(description="Catalog-assigned decimal id")
    title: str = Field(description="Book title")
    author: str = Field(description="Author name")
    description: str = Field(description="Free-text description")
    genre: str = Field(description="Genre name")


class HealthStatus(BaseModel):
    status: str = Field(description="'ok' when the store is reachable")
    books: int = Field(ge=0, description="Number of stored books")
