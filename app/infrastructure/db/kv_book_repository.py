"""
Key-value implementation of the BookRepository port.

Books are stored as JSON documents in the "Books" collection. The key of a
book is its sequence number encoded as 8 big-endian bytes, so iterating the
collection yields books in ascending numeric id order. The external id is
the decimal string of the same number.
"""

import dataclasses
import json
import logging
from typing import List, Optional

from app.domain.entities import Book
from app.domain.ports import GenreRegistry
from app.infrastructure.kv import (
    UINT64_MAX,
    Collection,
    CorruptRecordError,
    KeyValueStore,
    SequenceAllocator,
    StorageError,
    StoreInitializationError,
    Transaction,
    decode_uint64,
    encode_uint64,
)

logger = logging.getLogger(__name__)

BOOKS_COLLECTION = "Books"


class KvBookRepository:
    """
    Record store for books.

    insert() registers the book's genre and stores the book in two separate
    transactions, genre first. A crash between the two leaves at most an
    unused genre entry behind, never a book with an unregistered genre.
    """

    def __init__(
        self,
        store: KeyValueStore,
        genre_registry: GenreRegistry,
        sequences: Optional[SequenceAllocator] = None,
    ) -> None:
        self._store = store
        self._genre_registry = genre_registry
        self._sequences = sequences or SequenceAllocator()

    def initialize(self) -> None:
        """
        Open the store and make sure the Books collection exists.

        Raises:
            StoreInitializationError: If the store cannot be prepared
        """
        self._store.open()
        try:
            with self._store.update() as tx:
                tx.create_collection_if_not_exists(BOOKS_COLLECTION)
        except StorageError as e:
            raise StoreInitializationError(
                f"cannot create collection '{BOOKS_COLLECTION}': {e}"
            ) from e

    def _id_to_key(self, book_id: str) -> Optional[bytes]:
        """
        Convert an external id to its storage key.

        Only canonical decimal strings ("1", "42", never "01" or "+1") map to
        a key; anything else cannot name a stored book.
        """
        if not book_id or not (book_id.isascii() and book_id.isdigit()):
            return None
        number = int(book_id)
        if str(number) != book_id or number > UINT64_MAX:
            return None
        return encode_uint64(number)

    def _book_to_value(self, book: Book) -> bytes:
        """Serialize a Book to the bytes stored in the collection."""
        try:
            return json.dumps(dataclasses.asdict(book)).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise StorageError(f"Cannot encode book: {e}") from e

    def _value_to_book(self, key: bytes, value: bytes) -> Book:
        """
        Deserialize stored bytes back into a Book.

        The record must carry a string id equal to the decimal form of the
        key it is stored under.
        """
        try:
            data = json.loads(value.decode("utf-8"))
            if not isinstance(data, dict):
                raise ValueError("stored book is not a JSON object")
            expected_id = str(decode_uint64(key))
            if data.get("id") != expected_id:
                raise ValueError(
                    f"stored id {data.get('id')!r} does not match key {expected_id}"
                )
            return Book(
                id=data["id"],
                title=data.get("title", ""),
                author=data.get("author", ""),
                description=data.get("description", ""),
                genre=data.get("genre", ""),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise CorruptRecordError(f"Malformed book record: {e}") from e

    def _books_collection(self, tx: Transaction) -> Collection:
        books = tx.collection(BOOKS_COLLECTION)
        if books is None:
            raise StorageError(f"collection '{BOOKS_COLLECTION}' does not exist")
        return books

    def insert(self, book: Book) -> Book:
        """Register the genre, then store the book under a fresh id."""
        self._genre_registry.ensure(book.genre)

        with self._store.update() as tx:
            books = self._books_collection(tx)
            number = self._sequences.next(tx, BOOKS_COLLECTION)
            stored = dataclasses.replace(book, id=str(number))
            books.put(encode_uint64(number), self._book_to_value(stored))

        logger.info(f"Inserted book id={stored.id} title='{stored.title}'")
        return stored

    def get_all(self) -> List[Book]:
        """Retrieve all books in ascending id order."""
        with self._store.view() as tx:
            books = self._books_collection(tx)
            return [self._value_to_book(key, value) for key, value in books.items()]

    def get_by_id(self, book_id: str) -> Optional[Book]:
        """Retrieve a book by its id."""
        key = self._id_to_key(book_id)
        if key is None:
            return None

        with self._store.view() as tx:
            value = self._books_collection(tx).get(key)

        if value is None:
            logger.debug(f"Book id={book_id} not found")
            return None
        return self._value_to_book(key, value)

    def delete(self, book_id: str) -> None:
        """Delete a book. Unknown ids are ignored."""
        key = self._id_to_key(book_id)
        if key is None:
            return

        with self._store.update() as tx:
            self._books_collection(tx).delete(key)
        logger.info(f"Deleted book id={book_id}")

    def count(self) -> int:
        """Get the total number of stored books."""
        with self._store.view() as tx:
            return self._books_collection(tx).count()
