"""
Storage Services Package

Provides the byte-store interface, its file and in-memory implementations,
the snapshot codec and the RecordStore built on top of them.
"""

from expense_ledger.services.storage.interface import (
    ByteStoreInterface,
    CorruptSnapshotError,
    PersistenceError,
    StorageError,
)
from expense_ledger.services.storage.memory import InMemoryByteStore
from expense_ledger.services.storage.file_store import FileByteStore
from expense_ledger.services.storage.codec import (
    DecodedSnapshot,
    RejectedEntry,
    decode_snapshot,
    encode_snapshot,
)
from expense_ledger.services.storage.record_store import (
    DEFAULT_KEY,
    RecordStore,
    generate_record_id,
)

__all__ = [
    # Interfaces
    "ByteStoreInterface",
    # Exceptions
    "CorruptSnapshotError",
    "PersistenceError",
    "StorageError",
    # Implementations
    "FileByteStore",
    "InMemoryByteStore",
    # Codec
    "DecodedSnapshot",
    "RejectedEntry",
    "decode_snapshot",
    "encode_snapshot",
    # Record store
    "DEFAULT_KEY",
    "RecordStore",
    "generate_record_id",
]
