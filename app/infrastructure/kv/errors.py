"""
Error types raised by the key-value store and the repositories built on it.

All of them derive from RuntimeError so callers that only distinguish
"bad input" (ValueError) from "infrastructure failure" (RuntimeError)
keep working unchanged.
"""


class StorageError(RuntimeError):
    """A transaction, encoding or decoding step failed."""


class CorruptRecordError(StorageError):
    """Bytes read from a collection could not be decoded into a record."""


class StoreInitializationError(StorageError):
    """The backing file could not be opened or prepared. Fatal at startup."""
