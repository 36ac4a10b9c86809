"""
Integration tests for KeyValueStore and SequenceAllocator.

These tests use a REAL SQLite file under pytest's tmp_path instead of
mocks, so transaction boundaries, ordering and persistence are exercised
for real.

=============================================================================
Test Categories:
=============================================================================
1. Opening: file creation, idempotency, fatal failures
2. Collections: creation, independence, byte ordering
3. Transactions: commit, rollback, read-only enforcement
4. Sequences: monotonicity, persistence, exhaustion
=============================================================================
"""

import pytest

from app.infrastructure.kv import (
    UINT64_MAX,
    KeyValueStore,
    SequenceAllocator,
    StorageError,
    StoreInitializationError,
    decode_uint64,
    encode_uint64,
)


# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def store(tmp_path) -> KeyValueStore:
    """An opened store backed by a fresh file."""
    kv = KeyValueStore(tmp_path / "store.db")
    kv.open()
    yield kv
    kv.close()


@pytest.fixture
def sequences() -> SequenceAllocator:
    return SequenceAllocator()


# -----------------------------------------------------------------------------
# Test: Opening
# -----------------------------------------------------------------------------


class TestOpen:

    def test_open_creates_file_and_parent_directories(self, tmp_path) -> None:
        """
        GIVEN a path inside directories that do not exist yet
        WHEN the store is opened
        THEN the directories and the file are created
        """
        db_path = tmp_path / "nested" / "dir" / "store.db"
        kv = KeyValueStore(db_path)

        kv.open()

        assert db_path.exists()
        assert kv.is_open

    def test_open_is_idempotent(self, store: KeyValueStore) -> None:
        store.open()
        assert store.is_open

    def test_open_fails_when_path_is_a_directory(self, tmp_path) -> None:
        """
        GIVEN a path that points at a directory
        WHEN the store is opened
        THEN StoreInitializationError is raised
        """
        kv = KeyValueStore(tmp_path)

        with pytest.raises(StoreInitializationError):
            kv.open()

    def test_transactions_require_open_store(self, tmp_path) -> None:
        kv = KeyValueStore(tmp_path / "store.db")

        with pytest.raises(StorageError, match="not open"):
            with kv.view():
                pass

    def test_closed_store_rejects_transactions(self, store: KeyValueStore) -> None:
        store.close()

        with pytest.raises(StorageError):
            with store.update():
                pass


# -----------------------------------------------------------------------------
# Test: Collections
# -----------------------------------------------------------------------------


class TestCollections:

    def test_missing_collection_is_none(self, store: KeyValueStore) -> None:
        with store.view() as tx:
            assert tx.collection("Books") is None

    def test_create_collection_if_not_exists_keeps_data(self, store: KeyValueStore) -> None:
        """
        GIVEN a collection holding an entry
        WHEN it is "created" again
        THEN the existing entry survives
        """
        with store.update() as tx:
            tx.create_collection_if_not_exists("Books").put(b"a", b"1")

        with store.update() as tx:
            books = tx.create_collection_if_not_exists("Books")
            assert books.get(b"a") == b"1"

    def test_collections_are_independent_keyspaces(self, store: KeyValueStore) -> None:
        with store.update() as tx:
            tx.create_collection_if_not_exists("Books").put(b"k", b"book")
            tx.create_collection_if_not_exists("Genres").put(b"k", b"genre")

        with store.view() as tx:
            assert tx.collection("Books").get(b"k") == b"book"
            assert tx.collection("Genres").get(b"k") == b"genre"
            assert tx.collection_names() == ["Books", "Genres"]

    def test_items_are_in_byte_order(self, store: KeyValueStore) -> None:
        """
        GIVEN keys inserted out of order
        WHEN the collection is iterated
        THEN keys come back in ascending byte order
        """
        with store.update() as tx:
            col = tx.create_collection_if_not_exists("Genres")
            for key in [b"sci-fi", b"Sci-Fi", b"Fantasy", b"horror"]:
                col.put(key, key)

        with store.view() as tx:
            keys = [k for k, _ in tx.collection("Genres").items()]

        assert keys == [b"Fantasy", b"Sci-Fi", b"horror", b"sci-fi"]

    def test_integer_keys_iterate_numerically(self, store: KeyValueStore) -> None:
        with store.update() as tx:
            col = tx.create_collection_if_not_exists("Books")
            for n in [10, 2, 256, 1, 9]:
                col.put(encode_uint64(n), str(n).encode())

        with store.view() as tx:
            numbers = [decode_uint64(k) for k, _ in tx.collection("Books").items()]

        assert numbers == [1, 2, 9, 10, 256]

    def test_put_overwrites_and_delete_is_idempotent(self, store: KeyValueStore) -> None:
        with store.update() as tx:
            col = tx.create_collection_if_not_exists("Books")
            col.put(b"k", b"old")
            col.put(b"k", b"new")
            assert col.get(b"k") == b"new"
            assert col.count() == 1

            col.delete(b"k")
            col.delete(b"k")
            assert col.get(b"k") is None
            assert col.count() == 0


# -----------------------------------------------------------------------------
# Test: Transactions
# -----------------------------------------------------------------------------


class TestTransactions:

    def test_update_commits_on_success(self, store: KeyValueStore) -> None:
        with store.update() as tx:
            tx.create_collection_if_not_exists("Books").put(b"k", b"v")

        with store.view() as tx:
            assert tx.collection("Books").get(b"k") == b"v"

    def test_update_rolls_back_on_error(self, store: KeyValueStore) -> None:
        """
        GIVEN a write transaction that raises after writing
        WHEN the block exits
        THEN none of its writes are visible
        """
        with store.update() as tx:
            tx.create_collection_if_not_exists("Books")

        with pytest.raises(RuntimeError, match="boom"):
            with store.update() as tx:
                tx.collection("Books").put(b"k", b"v")
                raise RuntimeError("boom")

        with store.view() as tx:
            assert tx.collection("Books").get(b"k") is None

    def test_view_rejects_writes(self, store: KeyValueStore) -> None:
        with store.update() as tx:
            tx.create_collection_if_not_exists("Books")

        with store.view() as tx:
            with pytest.raises(StorageError, match="read-only"):
                tx.collection("Books").put(b"k", b"v")
            with pytest.raises(StorageError, match="read-only"):
                tx.create_collection_if_not_exists("Genres")

    def test_transaction_unusable_after_block(self, store: KeyValueStore) -> None:
        with store.view() as tx:
            pass

        with pytest.raises(StorageError, match="closed"):
            tx.collection("Books")

    def test_read_snapshot_ignores_concurrent_commit(self, store: KeyValueStore) -> None:
        """
        GIVEN a read transaction that has already read once
        WHEN another transaction commits a new entry
        THEN the reader keeps seeing its original snapshot
        """
        with store.update() as tx:
            tx.create_collection_if_not_exists("Books").put(b"a", b"1")

        with store.view() as reader:
            assert reader.collection("Books").count() == 1

            with store.update() as writer:
                writer.collection("Books").put(b"b", b"2")

            assert reader.collection("Books").count() == 1

        with store.view() as tx:
            assert tx.collection("Books").count() == 2

    def test_data_survives_reopen(self, tmp_path) -> None:
        db_path = tmp_path / "store.db"
        first = KeyValueStore(db_path)
        first.open()
        with first.update() as tx:
            tx.create_collection_if_not_exists("Books").put(b"k", b"v")
        first.close()

        second = KeyValueStore(db_path)
        second.open()
        with second.view() as tx:
            assert tx.collection("Books").get(b"k") == b"v"


# -----------------------------------------------------------------------------
# Test: Sequences
# -----------------------------------------------------------------------------


class TestSequenceAllocator:

    def test_sequence_starts_at_one_and_increases(
        self, store: KeyValueStore, sequences: SequenceAllocator
    ) -> None:
        with store.update() as tx:
            tx.create_collection_if_not_exists("Books")
            values = [sequences.next(tx, "Books") for _ in range(3)]

        assert values == [1, 2, 3]

    def test_sequences_are_scoped_per_collection(
        self, store: KeyValueStore, sequences: SequenceAllocator
    ) -> None:
        with store.update() as tx:
            tx.create_collection_if_not_exists("Books")
            tx.create_collection_if_not_exists("Genres")
            sequences.next(tx, "Books")
            sequences.next(tx, "Books")
            assert sequences.next(tx, "Genres") == 1
            assert sequences.current(tx, "Books") == 2

    def test_sequence_persists_across_reopen(
        self, tmp_path, sequences: SequenceAllocator
    ) -> None:
        db_path = tmp_path / "store.db"
        first = KeyValueStore(db_path)
        first.open()
        with first.update() as tx:
            tx.create_collection_if_not_exists("Books")
            sequences.next(tx, "Books")
            sequences.next(tx, "Books")
        first.close()

        second = KeyValueStore(db_path)
        second.open()
        with second.update() as tx:
            assert sequences.next(tx, "Books") == 3

    def test_unknown_collection_raises(
        self, store: KeyValueStore, sequences: SequenceAllocator
    ) -> None:
        with store.update() as tx:
            with pytest.raises(StorageError, match="does not exist"):
                sequences.next(tx, "Missing")

    def test_exhausted_sequence_raises(
        self, store: KeyValueStore, sequences: SequenceAllocator
    ) -> None:
        """
        GIVEN a sequence at the unsigned 64-bit maximum
        WHEN the next value is requested
        THEN StorageError is raised instead of wrapping around
        """
        with store.update() as tx:
            tx.create_collection_if_not_exists("Books")
            tx.set_sequence("Books", UINT64_MAX)
            with pytest.raises(StorageError, match="exhausted"):
                sequences.next(tx, "Books")


class TestKeyEncoding:

    def test_encoding_round_trips_extremes(self) -> None:
        for value in (0, 1, 255, 256, UINT64_MAX):
            assert decode_uint64(encode_uint64(value)) == value

    def test_out_of_range_values_are_rejected(self) -> None:
        with pytest.raises(ValueError):
            encode_uint64(-1)
        with pytest.raises(ValueError):
            encode_uint64(UINT64_MAX + 1)
        with pytest.raises(ValueError):
            decode_uint64(b"\x00")
