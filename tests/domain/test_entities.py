"""
Unit tests for the Book entity.

Covers field validation and the two matching rules the query service
relies on: substring matching on title/author and genre equality, both
ignoring case.
"""

import pytest

from app.domain.entities import Book


class TestBookCreation:

    def test_defaults_are_empty_strings_and_no_id(self) -> None:
        book = Book()

        assert book.id is None
        assert (book.title, book.author, book.description, book.genre) == ("", "", "", "")

    def test_books_with_same_fields_are_equal(self) -> None:
        assert Book(id="1", title="Dune") == Book(id="1", title="Dune")
        assert Book(id="1", title="Dune") != Book(id="2", title="Dune")

    @pytest.mark.parametrize("field_name", ["id", "title", "author", "description", "genre"])
    def test_non_string_fields_are_rejected(self, field_name: str) -> None:
        """
        GIVEN a non-string value for a text field
        WHEN the Book is constructed
        THEN ValueError names the offending field
        """
        with pytest.raises(ValueError, match=field_name):
            Book(**{field_name: 42})


class TestMatchesText:

    @pytest.fixture
    def book(self) -> Book:
        return Book(title="The Left Hand of Darkness", author="Ursula K. Le Guin")

    @pytest.mark.parametrize("query", ["left hand", "LEFT HAND", "darkness", "le guin", "URSULA"])
    def test_matches_title_or_author_ignoring_case(self, book: Book, query: str) -> None:
        assert book.matches_text(query)

    def test_empty_query_matches(self, book: Book) -> None:
        assert book.matches_text("")

    def test_description_and_genre_are_not_searched(self) -> None:
        book = Book(title="Dune", author="Herbert", description="spice", genre="Sci-Fi")

        assert not book.matches_text("spice")
        assert not book.matches_text("sci")

    def test_non_ascii_text_matches_by_lowercasing(self) -> None:
        """
        GIVEN a title containing non-ASCII letters
        WHEN searching with an upper-case query
        THEN letters are compared lowercased, without expanding "ß" to "ss"
        """
        book = Book(title="Die Straße", author="Émile Zola")

        assert book.matches_text("DIE STRAßE")
        assert book.matches_text("ÉMILE")
        assert not book.matches_text("STRASSE")


class TestHasGenre:

    def test_genre_comparison_ignores_case(self) -> None:
        book = Book(genre="Sci-Fi")

        assert book.has_genre("sci-fi")
        assert book.has_genre("SCI-FI")

    def test_genre_requires_exact_match(self) -> None:
        book = Book(genre="Sci-Fi")

        assert not book.has_genre("Sci")
        assert not book.has_genre("Sci-Fi ")
