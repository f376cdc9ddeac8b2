"""
SQLAlchemy engine/session helpers.

Usage
-----
engine = get_engine("sqlite:///ledger.db")
with session_scope(engine) as session:
    session.execute(...)
"""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ledger.services.storage.interface import ConnectionError
from ledger.services.storage.tables import Base


def get_engine(database_url: str, *, echo: bool = False) -> Engine:
    """
    Create an engine for `database_url` and make sure the schema exists.

    Raises:
        ConnectionError: If the database cannot be opened or initialized
    """
    url = make_url(database_url)
    options = {}
    if url.database in (None, "", ":memory:"):
        # One shared connection, or each thread would see its own empty database
        options = {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    else:
        Path(url.database).expanduser().parent.mkdir(parents=True, exist_ok=True)
    try:
        engine = create_engine(url, echo=echo, **options)
        Base.metadata.create_all(bind=engine)
    except SQLAlchemyError as e:
        raise ConnectionError(f"Failed to open database {database_url}: {e}")
    return engine


@contextmanager
def session_scope(engine: Engine) -> Iterator[Session]:
    """Provide a transactional scope around a series of operations."""

    session = sessionmaker(bind=engine, expire_on_commit=False)()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
