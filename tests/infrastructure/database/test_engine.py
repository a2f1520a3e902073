"""Tests for link index engine setup and initialization."""

from pathlib import Path

from sqlalchemy import inspect, text
from sqlalchemy.engine import Engine

from notereap.infrastructure.database.engine import (
    INDEX_DIRNAME,
    INDEX_FILENAME,
    create_db_engine,
    init_database,
)


class TestCreateDbEngine:
    def test_wal_mode_enabled(self, tmp_path: Path) -> None:
        engine = create_db_engine(tmp_path / "test.db")
        with engine.connect() as conn:
            assert conn.execute(text("PRAGMA journal_mode")).scalar() == "wal"
        engine.dispose()


class TestInitDatabase:
    def test_creates_index_file(self, db_engine: Engine, tmp_path: Path) -> None:
        assert (tmp_path / INDEX_DIRNAME / INDEX_FILENAME).is_file()

    def test_tables_created(self, db_engine: Engine) -> None:
        tables = set(inspect(db_engine).get_table_names())
        assert {"documents", "refs"} <= tables

    def test_idempotent(self, db_engine: Engine, tmp_path: Path) -> None:
        engine = init_database(tmp_path)
        assert set(inspect(engine).get_table_names()) >= {"documents", "refs"}
        engine.dispose()
