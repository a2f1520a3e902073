"""Database engine setup for the SQLite link index with WAL mode.

The index lives at {vault_root}/.notereap/index.db. SQLAlchemy Core
(not ORM) is used because notereap is a short-lived CLI process.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine

from notereap.infrastructure.database.schema import metadata

INDEX_DIRNAME = ".notereap"
INDEX_FILENAME = "index.db"


def create_db_engine(db_path: Path) -> Engine:
    """Create a SQLite engine with WAL journaling."""
    engine = create_engine(f"sqlite:///{db_path}", echo=False)

    @event.listens_for(engine, "connect")
    def _set_sqlite_pragma(dbapi_conn: Any, _: Any) -> None:
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    return engine


def init_database(vault_root: Path) -> Engine:
    """Initialize the link index at ``{vault_root}/.notereap/index.db``.

    Idempotent — safe to call on an existing vault. Returns the engine
    ready for use.
    """
    index_dir = vault_root / INDEX_DIRNAME
    index_dir.mkdir(parents=True, exist_ok=True)

    engine = create_db_engine(index_dir / INDEX_FILENAME)
    metadata.create_all(engine)
    return engine
