"""
Application Wiring for Finance Tracker

Builds the store, logger, validator and a loaded ledger engine from
settings. Callers (a UI, a notebook, an import script) get a ready engine
and never construct the pieces themselves.

DESIGN DECISION: If the configured JSON store cannot be created, the
application still starts on an in-memory store and says so loudly in the
log. Nothing typed in that session will survive a restart.
"""

from dataclasses import dataclass
from typing import Optional

import structlog

from finance_tracker.activity import ActivityLogger, configure_log_level
from finance_tracker.config import Settings, get_settings
from finance_tracker.ledger import LedgerEngine
from finance_tracker.services.storage import (
    InMemoryStore,
    JsonFileStore,
    KeyValueStore,
    StorageError,
)
from finance_tracker.validation import LedgerValidator


logger = structlog.get_logger("finance_tracker.orchestrator")


@dataclass
class AppComponents:
    """Everything a caller needs to drive the ledger."""

    engine: LedgerEngine
    store: KeyValueStore
    activity: ActivityLogger
    validator: LedgerValidator
    persistent: bool


def build_store(settings: Settings) -> tuple[KeyValueStore, bool]:
    """
    Create the configured store.

    Returns:
        (store, persistent) where persistent is False for in-memory stores
    """
    storage = settings.storage
    if storage.backend == "memory":
        return InMemoryStore(), False

    try:
        return JsonFileStore(storage.data_dir, max_attempts=storage.max_write_attempts), True
    except StorageError as e:
        logger.warning(
            "storage_not_configured",
            backend=storage.backend,
            data_dir=str(storage.data_dir),
            error=str(e),
        )
        return InMemoryStore(), False


def create_app_components(
    use_storage: bool = True,
    settings: Optional[Settings] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        use_storage: Whether to use the configured store.
                    Set to False for an in-memory session.
        settings: Settings to use (defaults to the cached environment settings)

    Returns:
        AppComponents with a loaded, reconciled engine
    """
    settings = settings or get_settings()
    configure_log_level(settings.app.log_level)

    if use_storage:
        store, persistent = build_store(settings)
    else:
        store, persistent = InMemoryStore(), False

    activity = ActivityLogger()
    validator = LedgerValidator()
    engine = LedgerEngine(
        store,
        settings=settings.ledger,
        slots=settings.storage.slots,
        validator=validator,
        activity=activity,
    ).load()

    return AppComponents(
        engine=engine,
        store=store,
        activity=activity,
        validator=validator,
        persistent=persistent,
    )
