"""Vault — the directory-vault corpus manager.

The Vault owns everything the deletion services treat as host
capabilities: the forward-link cache, link resolution, the reverse-link
index, and the storage primitives. It implements
:class:`notereap.services.protocols.Corpus`.

The link index is a SQLite database (see
:mod:`notereap.infrastructure.database`) refreshed incrementally by file
mtime on first use. Storage primitives keep it current: a write
re-indexes the document, a removal drops its rows and re-resolves the
references that pointed at it.
"""

from __future__ import annotations

import logging
import posixpath
from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from sqlalchemy import delete, func, insert, select, update

from notereap.domain.documents import (
    Document,
    EdgeKind,
    Occurrence,
    OutgoingReferences,
    Reference,
)
from notereap.domain.links import extract_references
from notereap.infrastructure.database.engine import INDEX_DIRNAME, init_database
from notereap.infrastructure.database.schema import documents, refs
from notereap.infrastructure.filesystem import (
    copy_to_backup,
    find_vault_files,
    read_text_file,
    remove_file,
    resolve_vault_path,
    to_vault_path,
    write_text_file,
)
from notereap.infrastructure.graph.engine import GraphEngine

if TYPE_CHECKING:
    from sqlalchemy import Connection
    from sqlalchemy.engine import Engine

    from notereap.config.settings import NotereapSettings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Link resolution
# ---------------------------------------------------------------------------


class LinkResolver:
    """Resolve link text to a vault path against a fixed set of documents.

    Resolution order:
    1. Relative paths (``./x``, ``../x``) against the context folder
    2. Exact vault path, then vault path + ``.md``
    3. Path in the context folder, then + ``.md``
    4. Name match (``name`` or, for notes, ``stem``); with a folder
       prefix, any path ending in that prefix. Ties prefer the context
       folder, then the shortest path.

    Matching is case-insensitive.
    """

    def __init__(self, paths: Iterable[str]) -> None:
        self._by_lower: dict[str, str] = {}
        self._by_name: dict[str, list[str]] = defaultdict(list)
        for path in sorted(paths):
            doc = Document(path)
            self._by_lower.setdefault(path.lower(), path)
            self._by_name[doc.name.lower()].append(path)
            if doc.is_text:
                self._by_name[doc.stem.lower()].append(path)

    def resolve(self, target: str, context_path: str) -> str | None:
        text = target.strip().replace("\\", "/")
        if not text:
            return None
        folder = Document(context_path).folder

        if text.startswith(("./", "../")):
            joined = posixpath.normpath(posixpath.join(folder, text))
            return self._exact(joined)

        text = text.lstrip("/")
        found = self._exact(text)
        if found is None and folder:
            found = self._exact(f"{folder}/{text}")
        if found is not None:
            return found

        return self._by_basename(text, folder)

    def _exact(self, path: str) -> str | None:
        lower = path.lower()
        return self._by_lower.get(lower) or self._by_lower.get(f"{lower}.md")

    def _by_basename(self, text: str, folder: str) -> str | None:
        lower = text.lower()
        base = PurePosixPath(lower).name
        candidates = self._by_name.get(base, [])
        if "/" in lower:
            candidates = [
                c
                for c in candidates
                if c.lower().endswith(f"/{lower}") or c.lower().endswith(f"/{lower}.md")
            ]
        if not candidates:
            return None
        return min(
            candidates,
            key=lambda p: (Document(p).folder != folder, len(p), p),
        )


@dataclass(frozen=True)
class IndexStats:
    """Counts reported by :meth:`Vault.refresh_index`."""

    documents: int
    references: int
    unresolved: int
    indexed: int
    removed: int


# ---------------------------------------------------------------------------
# Vault — the corpus manager
# ---------------------------------------------------------------------------


class Vault:
    """Corpus manager for a directory of markdown notes and attachments.

    Constructed from :class:`NotereapSettings`; the index is refreshed
    lazily on the first query so ``--help`` never touches the disk.
    """

    def __init__(self, settings: NotereapSettings) -> None:
        self._settings = settings
        self._engine: Engine = init_database(self.root)
        self._graph = GraphEngine(self._engine)
        self._resolver: LinkResolver | None = None
        self._fresh = False

    @property
    def root(self) -> Path:
        """The vault root directory."""
        return self._settings.vault_root

    @property
    def graph(self) -> GraphEngine:
        """Reporting view of the resolved link graph."""
        self._ensure_index()
        return self._graph

    def close(self) -> None:
        """Dispose of the index engine."""
        self._engine.dispose()

    # ------------------------------------------------------------------
    # Index maintenance
    # ------------------------------------------------------------------

    def refresh_index(self, *, rebuild: bool = False) -> IndexStats:
        """Bring the link index in line with the files on disk.

        Only files whose mtime changed are re-read unless *rebuild* is set.
        When the set of documents changes, every reference is re-resolved.
        """
        on_disk: dict[str, float] = {}
        ignore = {*self._settings.vault.ignore_dirs, INDEX_DIRNAME}
        for path in find_vault_files(self.root, ignore_dirs=ignore):
            on_disk[to_vault_path(self.root, path)] = path.stat().st_mtime

        with self._engine.begin() as conn:
            if rebuild:
                conn.execute(delete(refs))
                conn.execute(delete(documents))

            known = {
                str(row.path): float(row.mtime)
                for row in conn.execute(select(documents.c.path, documents.c.mtime))
            }
            removed = sorted(set(known) - set(on_disk))
            added = set(on_disk) - set(known)
            changed = sorted(p for p, mtime in on_disk.items() if known.get(p) != mtime)

            for path in removed:
                self._drop_rows(conn, path)
            for path in changed:
                doc = Document(path)
                conn.execute(delete(documents).where(documents.c.path == path))
                conn.execute(
                    insert(documents).values(
                        path=path,
                        name=doc.name,
                        stem=doc.stem,
                        extension=doc.extension,
                        mtime=on_disk[path],
                    )
                )

            self._resolver = LinkResolver(on_disk)
            for path in changed:
                self._index_references(conn, Document(path))
            if removed or added:
                self._reresolve(conn)

            stats = IndexStats(
                documents=len(on_disk),
                references=conn.execute(select(func.count()).select_from(refs)).scalar_one(),
                unresolved=conn.execute(
                    select(func.count()).select_from(refs).where(refs.c.resolved_path.is_(None))
                ).scalar_one(),
                indexed=len(changed),
                removed=len(removed),
            )

        self._fresh = True
        self._graph.invalidate()
        logger.debug(
            "Index refreshed: %d documents, %d re-indexed, %d removed",
            stats.documents,
            stats.indexed,
            stats.removed,
        )
        return stats

    def _ensure_index(self) -> None:
        if not self._fresh:
            self.refresh_index()

    def _get_resolver(self) -> LinkResolver:
        self._ensure_index()
        if self._resolver is None:
            with self._engine.connect() as conn:
                paths = [str(r.path) for r in conn.execute(select(documents.c.path))]
            self._resolver = LinkResolver(paths)
        return self._resolver

    def _drop_rows(self, conn: Connection, path: str) -> None:
        conn.execute(delete(documents).where(documents.c.path == path))
        conn.execute(delete(refs).where(refs.c.source_path == path))

    def _index_references(self, conn: Connection, doc: Document) -> int:
        """Replace the stored references of *doc* (text documents only)."""
        conn.execute(delete(refs).where(refs.c.source_path == doc.path))
        if not doc.is_text:
            return 0
        try:
            body = read_text_file(resolve_vault_path(self.root, doc.path))
        except (OSError, UnicodeDecodeError, ValueError):
            logger.warning("Could not read %s for indexing", doc.path, exc_info=True)
            return 0

        resolver = self._resolver or LinkResolver([])
        rows = [
            {
                "source_path": doc.path,
                "target": ref.target,
                "kind": str(ref.kind),
                "line": ref.line,
                "resolved_path": resolver.resolve(ref.target, doc.path),
            }
            for ref in extract_references(body)
        ]
        if rows:
            conn.execute(insert(refs), rows)
        return len(rows)

    def _reresolve(self, conn: Connection, *, pointing_at: str | None = None) -> None:
        """Recompute ``resolved_path`` for all references (or those pointing at one path)."""
        resolver = self._resolver or LinkResolver([])
        query = select(refs.c.id, refs.c.source_path, refs.c.target)
        if pointing_at is not None:
            query = query.where(refs.c.resolved_path == pointing_at)
        for row in conn.execute(query).fetchall():
            conn.execute(
                update(refs)
                .where(refs.c.id == row.id)
                .values(resolved_path=resolver.resolve(str(row.target), str(row.source_path)))
            )

    # ------------------------------------------------------------------
    # Corpus: lookups
    # ------------------------------------------------------------------

    def get_document(self, path: str) -> Document | None:
        """Find a document by vault-relative path or by filesystem path."""
        self._ensure_index()
        candidates = [Document.from_path(path).path]
        fs_path = Path(path)
        if fs_path.exists():
            try:
                candidates.append(to_vault_path(self.root, fs_path))
            except ValueError:
                pass  # outside the vault
        with self._engine.connect() as conn:
            for rel in candidates:
                row = conn.execute(select(documents.c.path).where(documents.c.path == rel)).first()
                if row is not None:
                    return Document(str(row.path))
        return None

    def get_outgoing_references(self, doc: Document) -> OutgoingReferences | None:
        self._ensure_index()
        with self._engine.connect() as conn:
            known = conn.execute(
                select(documents.c.path).where(documents.c.path == doc.path)
            ).first()
            if known is None:
                return None
            rows = conn.execute(
                select(refs.c.target, refs.c.kind, refs.c.line)
                .where(refs.c.source_path == doc.path)
                .order_by(refs.c.id)
            ).fetchall()
        return OutgoingReferences.from_references(
            [Reference(str(r.target), EdgeKind(r.kind), int(r.line)) for r in rows]
        )

    def resolve_reference(self, reference: str, context_path: str) -> Document | None:
        resolved = self._get_resolver().resolve(reference, context_path)
        return Document(resolved) if resolved is not None else None

    def get_referrers(self, doc: Document) -> Mapping[Document, list[Occurrence]]:
        self._ensure_index()
        result: dict[Document, list[Occurrence]] = {}
        with self._engine.connect() as conn:
            rows = conn.execute(
                select(refs.c.source_path, refs.c.line, refs.c.target, refs.c.kind)
                .where(refs.c.resolved_path == doc.path)
                .order_by(refs.c.source_path, refs.c.line)
            ).fetchall()
        for row in rows:
            occurrence = Occurrence(
                line=int(row.line), target=str(row.target), kind=EdgeKind(row.kind)
            )
            result.setdefault(Document(str(row.source_path)), []).append(occurrence)
        return result

    # ------------------------------------------------------------------
    # Corpus: storage primitives
    # ------------------------------------------------------------------

    def read_text(self, doc: Document) -> str:
        return read_text_file(resolve_vault_path(self.root, doc.path))

    def write_text(self, doc: Document, content: str) -> None:
        """Overwrite *doc* and re-index its references."""
        path = resolve_vault_path(self.root, doc.path)
        write_text_file(path, content)
        self._ensure_index()
        with self._engine.begin() as conn:
            conn.execute(
                update(documents)
                .where(documents.c.path == doc.path)
                .values(mtime=path.stat().st_mtime)
            )
            self._index_references(conn, doc)
        self._graph.invalidate()

    def remove_document(self, doc: Document) -> None:
        """Delete the file behind *doc* and drop it from the index.

        References pointing at it are re-resolved: they become unresolved
        or, if another document now matches, point there instead.
        """
        remove_file(resolve_vault_path(self.root, doc.path))
        self._ensure_index()
        with self._engine.begin() as conn:
            self._drop_rows(conn, doc.path)
            remaining = [str(r.path) for r in conn.execute(select(documents.c.path))]
            self._resolver = LinkResolver(remaining)
            self._reresolve(conn, pointing_at=doc.path)
        self._graph.invalidate()

    def copy_to_backup(self, doc: Document, destination: Path) -> None:
        target = copy_to_backup(self.root, doc.path, destination)
        logger.debug("Backed up %s to %s", doc.path, target)
