"""
Record Store

The single source of truth for all expense records. Every create, read
and delete goes through here.

DESIGN DECISION: Full-snapshot rewrites. Every mutation serializes the
whole ordered list and writes it under one fixed key. No deltas, no
versions. Personal expense logs are small; this is not meant to scale
to large record counts.

TRADEOFF: Availability over durability. When the byte store refuses a
write (unavailable, quota exceeded, I/O error) the failure is logged and
remembered in `last_persistence_error`, and the in-memory change stands.
Callers that need durability check `persistence_healthy`.

The store is single-threaded by construction: one writer, no locks.
"""

import secrets
import time
from datetime import datetime, timezone
from typing import Callable, Optional

from expense_ledger.audit import AuditLogger
from expense_ledger.models.record import ExpenseCandidate, Record, to_millisecond_utc
from expense_ledger.services.storage.codec import decode_snapshot, encode_snapshot
from expense_ledger.services.storage.interface import (
    ByteStoreInterface,
    CorruptSnapshotError,
    PersistenceError,
)


Snapshot = tuple[Record, ...]
Observer = Callable[[Snapshot], None]

DEFAULT_KEY = "transactions_v1"

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(value: int) -> str:
    digits = []
    while True:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
        if value == 0:
            return "".join(reversed(digits))


def generate_record_id() -> str:
    """
    Create a record id: milliseconds since the epoch in base 36,
    followed by 10 random base-36 characters.
    """
    time_part = _to_base36(time.time_ns() // 1_000_000)
    random_part = "".join(secrets.choice(_BASE36) for _ in range(10))
    return time_part + random_part


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RecordStore:
    """
    Owns the canonical ordered snapshot of Records and mirrors it to an
    injected byte store.

    Consumers only ever receive immutable tuples; they never hold a
    reference to the live list.
    """

    def __init__(
        self,
        byte_store: ByteStoreInterface,
        key: str = DEFAULT_KEY,
        audit_logger: Optional[AuditLogger] = None,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = generate_record_id,
        quarantine_key: Optional[str] = None,
    ):
        """
        Initialize the store. Nothing is read until load() is called.

        Args:
            byte_store: Persistence backend
            key: Key the snapshot is stored under
            audit_logger: Side channel for persistence problems and mutations
            clock: Source of creation instants (aware datetimes)
            id_factory: Source of candidate record ids
            quarantine_key: If set, the raw blob is copied here whenever
                            load() has to drop entries or the whole blob
        """
        self._byte_store = byte_store
        self._key = key
        self._audit = audit_logger or AuditLogger()
        self._clock = clock
        self._id_factory = id_factory
        self._quarantine_key = quarantine_key

        self._records: list[Record] = []
        self._issued_ids: set[str] = set()
        self._last_timestamp: Optional[datetime] = None
        self._observers: list[Observer] = []
        self._last_error: Optional[PersistenceError] = None

    # -- read ---------------------------------------------------------------

    @property
    def key(self) -> str:
        return self._key

    def snapshot(self) -> Snapshot:
        """Read-only copy of the current ordered records."""
        return tuple(self._records)

    def get(self, record_id: str) -> Optional[Record]:
        return next((r for r in self._records if r.id == record_id), None)

    def __len__(self) -> int:
        return len(self._records)

    @property
    def persistence_healthy(self) -> bool:
        """False when the most recent write or delete failed."""
        return self._last_error is None

    @property
    def last_persistence_error(self) -> Optional[PersistenceError]:
        return self._last_error

    # -- load ---------------------------------------------------------------

    def load(self) -> Snapshot:
        """
        Rehydrate the snapshot from the byte store.

        Malformed entries are dropped and logged; an unreadable or corrupt
        blob yields an empty snapshot. Never raises.

        Returns:
            The loaded snapshot
        """
        try:
            blob = self._byte_store.get(self._key)
        except PersistenceError as e:
            self._audit.log_read_failed(self._key, str(e))
            blob = None

        records: Snapshot = ()
        if blob:
            try:
                decoded = decode_snapshot(blob)
            except CorruptSnapshotError as e:
                self._audit.log_snapshot_corrupt(self._key, str(e))
                self._quarantine(blob)
            else:
                records = decoded.records
                for rejected in decoded.rejected:
                    self._audit.log_malformed_record(
                        self._key, rejected.position, rejected.reason, rejected.raw
                    )
                if decoded.rejected:
                    self._quarantine(blob)
                self._audit.log_snapshot_loaded(
                    self._key, len(records), len(decoded.rejected)
                )

        self._records = list(records)
        self._issued_ids.update(r.id for r in records)
        if records:
            newest = max(r.timestamp for r in records)
            if self._last_timestamp is None or newest > self._last_timestamp:
                self._last_timestamp = newest
        return self.snapshot()

    def _quarantine(self, blob: bytes) -> None:
        """Best-effort copy of a problematic blob to the quarantine key."""
        if not self._quarantine_key:
            return
        try:
            self._byte_store.set(self._quarantine_key, blob)
        except PersistenceError as e:
            self._audit.log_write_failed(self._quarantine_key, "quarantine", str(e))
        else:
            self._audit.log_snapshot_quarantined(self._key, self._quarantine_key, len(blob))

    # -- create -------------------------------------------------------------

    def append(self, candidate: ExpenseCandidate) -> Record:
        """
        Finalize a candidate into a Record and append it.

        Assigns a fresh id and the current instant, persists the full
        snapshot and notifies observers.

        Returns:
            The finalized Record
        """
        record = Record.from_candidate(
            candidate,
            record_id=self._next_id(),
            timestamp=self._next_timestamp(),
        )
        self._records.append(record)
        self._audit.log_record_appended(record.id, str(record.amount), record.category.value)
        self._persist("append")
        self._notify()
        return record

    def _next_id(self) -> str:
        record_id = self._id_factory()
        while record_id in self._issued_ids:
            record_id = self._id_factory()
        self._issued_ids.add(record_id)
        return record_id

    def _next_timestamp(self) -> datetime:
        """Current instant, never earlier than the previous one."""
        now = to_millisecond_utc(self._clock())
        if self._last_timestamp is not None and now < self._last_timestamp:
            now = self._last_timestamp
        self._last_timestamp = now
        return now

    # -- delete -------------------------------------------------------------

    def remove(self, record_id: str) -> bool:
        """
        Remove the record with this id.

        An unknown id is a no-op, so deletes are safe to retry.

        Returns:
            True if a record was removed, False otherwise
        """
        remaining = [r for r in self._records if r.id != record_id]
        if len(remaining) == len(self._records):
            return False
        self._records = remaining
        self._audit.log_record_removed(record_id)
        self._persist("remove")
        self._notify()
        return True

    def clear(self) -> None:
        """Empty the snapshot and erase the persisted blob."""
        removed = len(self._records)
        self._records = []
        self._audit.log_snapshot_cleared(self._key, removed)
        try:
            self._byte_store.delete(self._key)
        except PersistenceError as e:
            self._record_failure("clear", e)
        else:
            self._last_error = None
        self._notify()

    # -- observers ----------------------------------------------------------

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """
        Register a callable notified with the new snapshot after every
        mutation.

        Returns:
            A function that unregisters the observer
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for observer in list(self._observers):
            observer(snapshot)

    # -- helpers ------------------------------------------------------------

    def _persist(self, operation: str) -> None:
        try:
            self._byte_store.set(self._key, encode_snapshot(self._records))
        except PersistenceError as e:
            self._record_failure(operation, e)
        else:
            self._last_error = None

    def _record_failure(self, operation: str, error: PersistenceError) -> None:
        self._last_error = error
        self._audit.log_write_failed(self._key, operation, str(error))
