"""
Key-value implementation of the GenreRegistry port.

Genres live in their own "Genres" collection, keyed and valued by the
genre's literal text. The collection is created on the first registration.
"""

import logging
from typing import List

from app.infrastructure.kv import CorruptRecordError, KeyValueStore, StorageError

logger = logging.getLogger(__name__)

GENRES_COLLECTION = "Genres"


class KvGenreRegistry:
    """
    Exact-match genre registry.

    Keys are compared byte for byte, so genres that differ only in case are
    stored as separate entries. Listing returns names in byte order of
    their UTF-8 encoding.
    """

    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def ensure(self, name: str) -> None:
        """Register `name` unless an identical entry already exists."""
        try:
            key = name.encode("utf-8")
        except UnicodeEncodeError as e:
            raise StorageError(f"Cannot encode genre name: {e.reason}") from e

        with self._store.update() as tx:
            genres = tx.create_collection_if_not_exists(GENRES_COLLECTION)
            if genres.get(key) is not None:
                return
            genres.put(key, key)
        logger.info(f"Registered genre '{name}'")

    def list(self) -> List[str]:
        """Return all registered genre names in key order."""
        with self._store.view() as tx:
            genres = tx.collection(GENRES_COLLECTION)
            if genres is None:
                return []
            try:
                return [value.decode("utf-8") for _, value in genres.items()]
            except UnicodeDecodeError as e:
                raise CorruptRecordError(f"Invalid genre entry: {e}") from e
