"""
Snapshot Codec

Converts between the in-memory snapshot (a tuple of Records) and the
persisted blob: a UTF-8 JSON array of objects with the keys
id, amount, category, date and (optionally) note.

Decoding is tolerant per entry: one malformed entry is reported and
skipped, the rest of the snapshot still loads. Only a blob that is not
a JSON array at all is treated as corrupt.
"""

import json
from decimal import Decimal
from typing import Any, Iterable, NamedTuple, Optional

from pydantic import ValidationError

from expense_ledger.models.record import Record
from expense_ledger.services.storage.interface import (
    CorruptSnapshotError,
    PersistenceError,
)


REQUIRED_FIELDS = ("id", "amount", "category", "date")


class RejectedEntry(NamedTuple):
    """A persisted entry that could not be turned into a Record."""
    position: int
    reason: str
    raw: Any


class DecodedSnapshot(NamedTuple):
    records: tuple[Record, ...]
    rejected: tuple[RejectedEntry, ...]


def encode_snapshot(records: Iterable[Record]) -> bytes:
    """
    Serialize records, in order, to the persisted blob.

    Raises:
        PersistenceError: If a record cannot be written exactly
    """
    try:
        payload = [record.to_storage_dict() for record in records]
        text = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    except (ValueError, OverflowError) as e:
        raise PersistenceError(f"Snapshot could not be encoded: {e}") from e
    return text.encode("utf-8")


def _type_problem(entry: dict) -> Optional[str]:
    """Describe why an entry has the wrong shape, or None if it is fine."""
    for name in REQUIRED_FIELDS:
        if name not in entry:
            return f"missing field '{name}'"
    if not isinstance(entry["id"], str):
        return "id is not a string"
    amount = entry["amount"]
    if isinstance(amount, bool) or not isinstance(amount, (int, Decimal)):
        return "amount is not a number"
    if not isinstance(entry["category"], str):
        return "category is not a string"
    if not isinstance(entry["date"], str):
        return "date is not a string"
    if entry.get("note") is not None and not isinstance(entry["note"], str):
        return "note is not a string"
    return None


def decode_snapshot(blob: bytes) -> DecodedSnapshot:
    """
    Deserialize a persisted blob.

    Raises:
        CorruptSnapshotError: If the blob is not UTF-8 JSON holding an array
    """
    try:
        data = json.loads(blob.decode("utf-8"), parse_float=Decimal)
    except (UnicodeDecodeError, ValueError) as e:
        raise CorruptSnapshotError(f"Snapshot is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise CorruptSnapshotError(
            f"Snapshot must be a JSON array, got {type(data).__name__}"
        )

    records: list[Record] = []
    rejected: list[RejectedEntry] = []
    seen_ids: set[str] = set()

    for position, entry in enumerate(data):
        if not isinstance(entry, dict):
            rejected.append(RejectedEntry(position, "entry is not an object", entry))
            continue

        problem = _type_problem(entry)
        if problem is None:
            try:
                record = Record.model_validate({
                    **{name: entry[name] for name in REQUIRED_FIELDS},
                    "note": entry.get("note"),
                })
            except ValidationError as e:
                problem = "; ".join(
                    f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                    for err in e.errors()
                )
            else:
                if record.id in seen_ids:
                    problem = f"duplicate id '{record.id}'"

        if problem is not None:
            rejected.append(RejectedEntry(position, problem, entry))
            continue

        seen_ids.add(record.id)
        records.append(record)

    return DecodedSnapshot(tuple(records), tuple(rejected))
