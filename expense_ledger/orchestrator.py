"""
Main Orchestrator for the Expense Ledger

Ties the components together from configuration:
byte store → RecordStore → EntryIntake, plus the export service and
the shared audit logger.

DESIGN DECISION: One RecordStore per process. The UI, intake and
export all read from the same store so they never disagree about the
current snapshot.
"""

from typing import NamedTuple, Optional

from expense_ledger.audit import AuditLogger, configure_logging
from expense_ledger.config import Settings, StorageSettings, get_settings
from expense_ledger.services.export import ExportService
from expense_ledger.services.storage import (
    ByteStoreInterface,
    FileByteStore,
    InMemoryByteStore,
    RecordStore,
)
from expense_ledger.validation import EntryIntake


class LedgerComponents(NamedTuple):
    """Everything the front end needs, wired to one store."""
    store: RecordStore
    intake: EntryIntake
    exporter: ExportService
    audit_logger: AuditLogger
    settings: Settings


def build_byte_store(storage_settings: StorageSettings) -> ByteStoreInterface:
    """Create the byte store selected by `LEDGER_STORAGE_BACKEND`."""
    if storage_settings.backend == "memory":
        return InMemoryByteStore()
    return FileByteStore(storage_settings.data_dir)


def create_app_components(
    settings: Optional[Settings] = None,
    byte_store: Optional[ByteStoreInterface] = None,
) -> LedgerComponents:
    """
    Factory function to create all application components.

    The store is loaded before it is returned, so callers can read the
    snapshot straight away.

    Args:
        settings: Settings to use, the cached settings if None
        byte_store: Overrides the configured backend (tests)

    Returns:
        LedgerComponents
    """
    settings = settings or get_settings()
    app_settings = settings.app
    storage_settings = settings.storage

    configure_logging(app_settings.log_level)
    audit_logger = AuditLogger()

    store = RecordStore(
        byte_store if byte_store is not None else build_byte_store(storage_settings),
        key=storage_settings.key,
        audit_logger=audit_logger,
        quarantine_key=(
            storage_settings.quarantine_key
            if storage_settings.quarantine_malformed
            else None
        ),
    )
    store.load()

    return LedgerComponents(
        store=store,
        intake=EntryIntake(store, audit_logger=audit_logger),
        exporter=ExportService(audit_logger=audit_logger),
        audit_logger=audit_logger,
        settings=settings,
    )
