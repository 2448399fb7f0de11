"""
Abstract Byte Store Interface

DESIGN DECISION: The record store talks to persistence only through a
minimal key-value interface over raw bytes. This allows us to:
1. Keep data in a directory of files for the desktop app
2. Use in-memory storage for testing (including simulated failures)
3. Keep the record store free of any file or serialization details

The interface is intentionally tiny - this is the local-storage model
(get / set / delete under a key), not a database.
"""

from abc import ABC, abstractmethod
from typing import Optional


class ByteStoreInterface(ABC):
    """
    Abstract interface for a local key-value byte store.

    Any implementation must raise PersistenceError (or a subclass) when
    the underlying medium is unavailable or a write cannot be completed.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """
        Read the blob stored under a key.

        Args:
            key: Storage key

        Returns:
            The stored bytes, or None if nothing is stored under the key

        Raises:
            PersistenceError: If the store cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: bytes) -> None:
        """
        Replace the blob stored under a key.

        Args:
            key: Storage key
            value: Full new content

        Raises:
            PersistenceError: If the write fails (unavailable, quota, I/O)
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """
        Erase a key. Deleting a missing key is not an error.

        Raises:
            PersistenceError: If the store cannot be modified
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class PersistenceError(StorageError):
    """The byte store could not be read or written."""
    pass


class CorruptSnapshotError(PersistenceError):
    """The persisted blob could not be decoded into a list of entries."""
    pass
