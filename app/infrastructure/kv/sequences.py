"""
Per-collection sequence allocation.

A sequence is a persisted counter stored alongside its collection. Values
are strictly increasing and never reused for the lifetime of the
collection. A value allocated inside a transaction that is later rolled
back is simply skipped; ids need to be unique and ordered, not dense.
"""

import logging

from .errors import StorageError
from .keys import UINT64_MAX
from .store import Transaction

logger = logging.getLogger(__name__)


class SequenceAllocator:
    """Hands out the next value of a collection's sequence."""

    def next(self, tx: Transaction, collection: str) -> int:
        """
        Advance the collection's sequence and return the new value.

        Must be called inside a write transaction; the new value becomes
        durable when that transaction commits.

        Raises:
            StorageError: If the collection does not exist or the sequence
                is exhausted
        """
        current = tx.get_sequence(collection)
        if current >= UINT64_MAX:
            raise StorageError(f"sequence for collection '{collection}' is exhausted")
        value = current + 1
        tx.set_sequence(collection, value)
        logger.debug(f"Allocated sequence value {value} for '{collection}'")
        return value

    def current(self, tx: Transaction, collection: str) -> int:
        """Return the last value issued for the collection (0 if none)."""
        return tx.get_sequence(collection)
