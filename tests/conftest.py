"""Pytest configuration: per-test settings isolation and a throwaway database.

Every test gets its own SQLite file under ``tmp_path`` and runs from inside
``tmp_path`` so a developer's ``.env`` file is never picked up by the
settings classes.
"""

from datetime import datetime
from pathlib import Path

import pytest

from ledger.config import get_settings
from ledger.services.storage import SQLiteRecordStorage, get_engine
from tests.helpers import TickingClock


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    monkeypatch.chdir(tmp_path)
    for name in ("LEDGER_LOG_LEVEL", "LEDGER_STORAGE_DATABASE_URL"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock(datetime(2024, 12, 5, 9, 0, 0))


@pytest.fixture
def database_url(tmp_path: Path) -> str:
    return f"sqlite:///{tmp_path / 'data' / 'ledger.db'}"


@pytest.fixture
def engine(database_url: str):
    engine = get_engine(database_url)
    yield engine
    engine.dispose()


@pytest.fixture
def record_storage(engine) -> SQLiteRecordStorage:
    return SQLiteRecordStorage(engine)
