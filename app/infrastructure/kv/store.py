"""
Ordered, transactional key-value store persisted in a single SQLite file.

=============================================================================
Model
=============================================================================

The store holds named *collections*. Each collection is an independent
keyspace of (bytes -> bytes) entries, iterated in ascending byte order of
the key, and carries its own persisted sequence counter.

Access happens only inside a transaction:

    with store.update() as tx:          # single writer, committed on exit
        books = tx.create_collection_if_not_exists("Books")
        books.put(b"k", b"v")

    with store.view() as tx:            # snapshot read, never blocks writers
        books = tx.collection("Books")
        for key, value in books.items():
            ...

Write transactions start with BEGIN IMMEDIATE, so SQLite serializes them.
The database runs in WAL mode, so a read transaction sees one consistent
snapshot and is never blocked by a concurrent writer.

Each transaction uses its own short-lived connection; nothing is held open
between transactions.
=============================================================================
"""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from .errors import StorageError, StoreInitializationError
from .keys import decode_uint64, encode_uint64

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS collections (
    name TEXT PRIMARY KEY,
    sequence BLOB NOT NULL
);

CREATE TABLE IF NOT EXISTS entries (
    collection TEXT NOT NULL REFERENCES collections(name),
    key BLOB NOT NULL,
    value BLOB NOT NULL,
    PRIMARY KEY (collection, key)
) WITHOUT ROWID;
"""


class Collection:
    """A single ordered keyspace, bound to the transaction that opened it."""

    def __init__(self, tx: "Transaction", name: str) -> None:
        self._tx = tx
        self.name = name

    def get(self, key: bytes) -> Optional[bytes]:
        """Return the value stored under `key`, or None if absent."""
        row = self._tx._execute(
            "SELECT value FROM entries WHERE collection = ? AND key = ?",
            (self.name, key),
        ).fetchone()
        return None if row is None else bytes(row[0])

    def put(self, key: bytes, value: bytes) -> None:
        """Insert or overwrite the entry for `key`."""
        self._tx._require_writable()
        self._tx._execute(
            """
            INSERT INTO entries (collection, key, value) VALUES (?, ?, ?)
            ON CONFLICT(collection, key) DO UPDATE SET value = excluded.value
            """,
            (self.name, key, value),
        )

    def delete(self, key: bytes) -> None:
        """Remove the entry for `key`. Deleting an absent key is a no-op."""
        self._tx._require_writable()
        self._tx._execute(
            "DELETE FROM entries WHERE collection = ? AND key = ?",
            (self.name, key),
        )

    def items(self) -> Iterator[Tuple[bytes, bytes]]:
        """Yield (key, value) pairs in ascending key order."""
        rows = self._tx._execute(
            "SELECT key, value FROM entries WHERE collection = ? ORDER BY key",
            (self.name,),
        ).fetchall()
        for key, value in rows:
            yield bytes(key), bytes(value)

    def count(self) -> int:
        row = self._tx._execute(
            "SELECT COUNT(*) FROM entries WHERE collection = ?",
            (self.name,),
        ).fetchone()
        return row[0]


class Transaction:
    """
    A read-only or read-write transaction over the store.

    Instances are handed out by KeyValueStore.view() and
    KeyValueStore.update() and must not be used after the `with` block ends.
    """

    def __init__(self, conn: sqlite3.Connection, writable: bool) -> None:
        self._conn = conn
        self.writable = writable
        self._closed = False

    def collection(self, name: str) -> Optional[Collection]:
        """Return the named collection, or None if it was never created."""
        row = self._execute(
            "SELECT 1 FROM collections WHERE name = ?", (name,)
        ).fetchone()
        return None if row is None else Collection(self, name)

    def create_collection_if_not_exists(self, name: str) -> Collection:
        """Return the named collection, creating it (sequence 0) if needed."""
        self._require_writable()
        if not name:
            raise StorageError("collection name cannot be empty")
        self._execute(
            "INSERT OR IGNORE INTO collections (name, sequence) VALUES (?, ?)",
            (name, encode_uint64(0)),
        )
        return Collection(self, name)

    def collection_names(self) -> List[str]:
        rows = self._execute("SELECT name FROM collections ORDER BY name").fetchall()
        return [row[0] for row in rows]

    def get_sequence(self, name: str) -> int:
        """Return the last sequence value issued for a collection."""
        row = self._execute(
            "SELECT sequence FROM collections WHERE name = ?", (name,)
        ).fetchone()
        if row is None:
            raise StorageError(f"collection '{name}' does not exist")
        try:
            return decode_uint64(bytes(row[0]))
        except ValueError as e:
            raise StorageError(f"invalid sequence for collection '{name}': {e}") from e

    def set_sequence(self, name: str, value: int) -> None:
        self._require_writable()
        try:
            encoded = encode_uint64(value)
        except ValueError as e:
            raise StorageError(str(e)) from e
        cursor = self._execute(
            "UPDATE collections SET sequence = ? WHERE name = ?", (encoded, name)
        )
        if cursor.rowcount == 0:
            raise StorageError(f"collection '{name}' does not exist")

    def _require_writable(self) -> None:
        if not self.writable:
            raise StorageError("cannot write inside a read-only transaction")

    def _execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        if self._closed:
            raise StorageError("transaction is already closed")
        try:
            return self._conn.execute(sql, params)
        except sqlite3.Error as e:
            raise StorageError(f"database error: {e}") from e


class KeyValueStore:
    """
    Handle to a single store file.

    Construct once at startup, call open(), and share the instance with
    every component that needs storage. open() is idempotent.
    """

    def __init__(self, db_path: Path, timeout: float = 5.0) -> None:
        """
        Args:
            db_path: Location of the backing file (created if absent)
            timeout: Seconds a writer waits for the write lock before failing
        """
        self._db_path = Path(db_path)
        self._timeout = timeout
        self._opened = False

    @property
    def path(self) -> Path:
        return self._db_path

    @property
    def is_open(self) -> bool:
        return self._opened

    def open(self) -> None:
        """
        Create the backing file and internal tables if needed.

        Raises:
            StoreInitializationError: If the file cannot be opened or prepared
        """
        if self._opened:
            return
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = self._connect()
            try:
                conn.execute("PRAGMA journal_mode=WAL")
                conn.executescript(_SCHEMA)
            finally:
                conn.close()
        except (OSError, sqlite3.Error) as e:
            raise StoreInitializationError(
                f"cannot open store at '{self._db_path}': {e}"
            ) from e
        self._opened = True
        logger.info(f"Opened key-value store at {self._db_path}")

    def close(self) -> None:
        if self._opened:
            self._opened = False
            logger.info(f"Closed key-value store at {self._db_path}")

    @contextmanager
    def view(self) -> Iterator[Transaction]:
        """Run a read-only transaction over a consistent snapshot."""
        with self._transaction(writable=False) as tx:
            yield tx

    @contextmanager
    def update(self) -> Iterator[Transaction]:
        """
        Run a read-write transaction.

        Committed when the block exits normally, rolled back if it raises.
        """
        with self._transaction(writable=True) as tx:
            yield tx

    @contextmanager
    def _transaction(self, writable: bool) -> Iterator[Transaction]:
        if not self._opened:
            raise StorageError("store is not open")

        try:
            conn = self._connect()
        except sqlite3.Error as e:
            raise StorageError(f"cannot connect to store: {e}") from e

        tx = Transaction(conn, writable)
        try:
            try:
                conn.execute("BEGIN IMMEDIATE" if writable else "BEGIN")
            except sqlite3.Error as e:
                raise StorageError(f"cannot begin transaction: {e}") from e

            try:
                yield tx
            except BaseException:
                conn.rollback()
                raise

            try:
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                raise StorageError(f"cannot commit transaction: {e}") from e
        finally:
            tx._closed = True
            conn.close()

    def _connect(self) -> sqlite3.Connection:
        # isolation_level=None: transactions are begun and ended explicitly above
        return sqlite3.connect(
            str(self._db_path),
            timeout=self._timeout,
            isolation_level=None,
            check_same_thread=False,
        )
