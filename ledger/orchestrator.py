"""
Application Wiring for the Personal Ledger

This module ties the components together for the presentation layer:
settings → logging → database → record store + preference store.

The presentation layer (screens, forms, tabs) is not part of this package.
It creates the components once and then only calls the RecordStore and
PreferenceStore APIs.
"""

from typing import Optional

import structlog
from sqlalchemy.engine import Engine

from ledger.config import Settings, get_settings
from ledger.logging_setup import configure_logging
from ledger.models.preferences import ButtonPosition
from ledger.preferences import PreferenceStore
from ledger.services.storage import (
    SQLitePreferenceStorage,
    SQLiteRecordStorage,
    get_engine,
)
from ledger.store import RecordStore


def create_app_components(
    settings: Optional[Settings] = None,
    database_url: Optional[str] = None,
) -> tuple[RecordStore, PreferenceStore, Engine]:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to use. Defaults to the cached environment settings.
        database_url: Overrides the configured database URL (tests, tooling).

    Returns:
        (record_store, preference_store, engine)

    Raises:
        ConnectionError: If the database cannot be opened
    """
    settings = settings or get_settings()
    app_settings = settings.app
    storage_settings = settings.storage
    preference_settings = settings.preferences

    configure_logging(level=app_settings.log_level, json=app_settings.log_json)
    logger = structlog.get_logger(__name__)

    url = database_url or storage_settings.database_url
    engine = get_engine(url, echo=storage_settings.echo)

    record_store = RecordStore(SQLiteRecordStorage(engine))
    preference_store = PreferenceStore(
        SQLitePreferenceStorage(engine),
        key=preference_settings.button_position_key,
        delay=preference_settings.debounce_seconds,
        default=ButtonPosition(
            x=preference_settings.default_x,
            y=preference_settings.default_y,
        ),
    )

    logger.info(
        "ledger_started",
        environment=app_settings.app_environment,
        database_url=url,
    )
    return record_store, preference_store, engine
