"""
Embedded key-value storage.

Exposes the store, its transaction and collection handles, the sequence
allocator, and the error types shared by everything built on top of it.
"""

from .errors import CorruptRecordError, StorageError, StoreInitializationError
from .keys import UINT64_MAX, decode_uint64, encode_uint64
from .sequences import SequenceAllocator
from .store import Collection, KeyValueStore, Transaction

__all__ = [
    "KeyValueStore",
    "Transaction",
    "Collection",
    "SequenceAllocator",
    "StorageError",
    "CorruptRecordError",
    "StoreInitializationError",
    "UINT64_MAX",
    "encode_uint64",
    "decode_uint64",
]
