"""SQLite link index engine and schema via SQLAlchemy Core."""

from notereap.infrastructure.database.engine import create_db_engine, init_database
from notereap.infrastructure.database.schema import documents, metadata, refs

__all__ = [
    "create_db_engine",
    "documents",
    "init_database",
    "metadata",
    "refs",
]
