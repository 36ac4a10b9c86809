#!/usr/bin/env python3
"""
Book Loading Script.

This script reads a JSON array of books and inserts each one into the
catalog store, registering genres along the way.

Usage:
    python -m scripts.load_books --input books.json --db-path data/library.db

Input format:
    [{"title": "Dune", "author": "Herbert", "description": "", "genre": "Sci-Fi"}, ...]
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List

from app.domain.entities import Book
from app.infrastructure.db.kv_book_repository import KvBookRepository
from app.infrastructure.db.kv_genre_registry import KvGenreRegistry
from app.infrastructure.kv import KeyValueStore, StorageError

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path("data/library.db")


def read_books(input_path: Path) -> List[Book]:
    """
    Parse the input file into Book entities.

    Any "id" present in the input is ignored.

    Raises:
        ValueError: If the file is not a JSON array of book objects
    """
    with open(input_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, list):
        raise ValueError(f"{input_path} must contain a JSON array")

    books = []
    for position, item in enumerate(data):
        if not isinstance(item, dict):
            raise ValueError(f"Entry {position} is not a JSON object")
        books.append(Book(
            title=item.get("title", ""),
            author=item.get("author", ""),
            description=item.get("description", ""),
            genre=item.get("genre", ""),
        ))
    return books


def main(input_path: Path, db_path: Path = DEFAULT_DB_PATH) -> int:
    """
    Main entry point for the loading script.

    Args:
        input_path: JSON file with the books to insert
        db_path: Store file to insert into (created if absent)

    Returns:
        Number of books in the catalog after loading
    """
    logger.info(f"Loading books from {input_path} into {db_path}")

    store = KeyValueStore(db_path)
    repository = KvBookRepository(store, KvGenreRegistry(store))

    try:
        books = read_books(input_path)
        repository.initialize()
        for book in books:
            stored = repository.insert(book)
            logger.info(f"Stored '{stored.title}' as id {stored.id}")
        total = repository.count()
    except (OSError, ValueError, StorageError) as e:
        logger.error(f"Loading failed: {e}")
        sys.exit(1)
    finally:
        store.close()

    logger.info(f"Loaded {len(books)} books, catalog now holds {total}")
    return total


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Load books from a JSON file into the catalog")
    parser.add_argument(
        "--input", "-i",
        type=Path,
        required=True,
        help="JSON file containing an array of books"
    )
    parser.add_argument(
        "--db-path", "-d",
        type=Path,
        default=DEFAULT_DB_PATH,
        help=f"Store file (default: {DEFAULT_DB_PATH})"
    )

    args = parser.parse_args()
    main(args.input, args.db_path)
