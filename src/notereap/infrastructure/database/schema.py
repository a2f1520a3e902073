"""SQLAlchemy Core table definitions for the link index.

The index is derived state: every row can be rebuilt from the files in
the vault. ``documents`` holds one row per file; ``refs`` holds one row
per link or embed occurrence, with the resolved target (if any).
"""

from __future__ import annotations

from sqlalchemy import REAL, Column, Index, Integer, MetaData, Table, Text

metadata = MetaData()

documents = Table(
    "documents",
    metadata,
    Column("path", Text, primary_key=True),
    Column("name", Text, nullable=False),  # file name with extension
    Column("stem", Text, nullable=False),
    Column("extension", Text, nullable=False),  # lower-case, no dot
    Column("mtime", REAL, nullable=False),
)

refs = Table(
    "refs",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("source_path", Text, nullable=False),
    Column("target", Text, nullable=False),  # link text, anchor/alias removed
    Column("kind", Text, nullable=False),  # link | embed
    Column("line", Integer, nullable=False),
    Column("resolved_path", Text),  # NULL when unresolved
)

# ---------------------------------------------------------------------------
# Indexes for lookup columns
# ---------------------------------------------------------------------------

Index("ix_documents_name", documents.c.name)
Index("ix_documents_stem", documents.c.stem)
Index("ix_refs_source", refs.c.source_path)
Index("ix_refs_resolved", refs.c.resolved_path)
