"""
In-Memory Byte Store

Keeps blobs in a dict for the lifetime of the process. Used by tests and
by the `memory` storage backend.

It can simulate the failure modes of browser-style local storage: a store
that is switched off, and a per-store quota.
"""

from typing import Optional

from expense_ledger.services.storage.interface import (
    ByteStoreInterface,
    PersistenceError,
)


class InMemoryByteStore(ByteStoreInterface):
    """Dict-backed implementation of the byte store."""

    def __init__(self, quota_bytes: Optional[int] = None):
        self._data: dict[str, bytes] = {}
        self._quota_bytes = quota_bytes
        self.available = True

    def _check_available(self) -> None:
        if not self.available:
            raise PersistenceError("Byte store is unavailable")

    def get(self, key: str) -> Optional[bytes]:
        self._check_available()
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self._check_available()
        if self._quota_bytes is not None:
            used = sum(len(v) for k, v in self._data.items() if k != key)
            if used + len(value) > self._quota_bytes:
                raise PersistenceError(
                    f"Quota exceeded: {used + len(value)} > {self._quota_bytes} bytes"
                )
        self._data[key] = bytes(value)

    def delete(self, key: str) -> None:
        self._check_available()
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)
