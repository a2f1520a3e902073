"""Shared pytest fixtures and test helpers for notereap tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from pathlib import Path

import pytest
from click.testing import CliRunner
from sqlalchemy.engine import Engine

from notereap.config.settings import NotereapSettings
from notereap.domain.documents import Document, Occurrence, OutgoingReferences
from notereap.domain.links import extract_references
from notereap.infrastructure.database.engine import init_database
from notereap.infrastructure.vault import LinkResolver, Vault


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def db_engine(tmp_path: Path) -> Iterator[Engine]:
    """Initialized SQLite engine with all tables created."""
    engine = init_database(tmp_path)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def vault_root(tmp_path: Path) -> Path:
    """Temporary vault directory with a small linked corpus.

    ``Projects/Apollo.md`` links to ``Launch`` (which links back and to
    ``Crew``) and embeds ``assets/rocket.png``. ``Index.md`` links to
    ``Launch`` and ``Crew`` from outside the deletion set.
    """
    write_file(
        tmp_path,
        "Projects/Apollo.md",
        "# Apollo\n\nSee [[Launch]] for the schedule.\n![[rocket.png]]\n",
    )
    write_file(tmp_path, "Projects/Launch.md", "Back to [[Apollo]].\nTeam: [[Crew|the crew]]\n")
    write_file(tmp_path, "Crew.md", "Names go here.\n")
    write_file(tmp_path, "Index.md", "- [[Launch]]\nAlso see [[Crew]] today.\n[[Launch]]\n")
    write_file(tmp_path, "assets/rocket.png", b"\x89PNG")
    return tmp_path


@pytest.fixture
def settings(vault_root: Path) -> NotereapSettings:
    return NotereapSettings.from_cli(vault_root=vault_root)


@pytest.fixture
def vault(settings: NotereapSettings) -> Iterator[Vault]:
    """Vault over ``vault_root`` with the link index built on first use."""
    v = Vault(settings)
    try:
        yield v
    finally:
        v.close()


@pytest.fixture
def _isolated_vault(vault_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the temp vault root so the CLI opens it.

    Use via ``@pytest.mark.usefixtures("_isolated_vault")`` on command test
    classes.
    """
    monkeypatch.delenv("NOTEREAP_CONFIG", raising=False)
    monkeypatch.chdir(vault_root)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def write_file(root: Path, rel: str, content: str | bytes) -> Path:
    """Write a vault file, creating parent folders."""
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content, encoding="utf-8")
    return path


class FakeCorpus:
    """In-memory Corpus: references are parsed from text, resolved by name.

    Failure injection: put paths into ``fail_expand``, ``fail_read``,
    ``fail_write``, ``fail_remove`` or ``fail_backup`` to make the
    matching operation raise ``OSError`` for that document. ``on_read``
    runs after every successful read.
    """

    def __init__(self, files: Mapping[str, str]) -> None:
        self.files: dict[str, str] = dict(files)
        self.removed: list[str] = []
        self.writes: list[str] = []
        self.backups: list[tuple[str, Path]] = []
        self.fail_expand: set[str] = set()
        self.fail_read: set[str] = set()
        self.fail_write: set[str] = set()
        self.fail_remove: set[str] = set()
        self.fail_backup: set[str] = set()
        self.on_read: Callable[[Document], None] | None = None
        self._resolver: tuple[frozenset[str], LinkResolver] | None = None

    def get_document(self, path: str) -> Document | None:
        return Document(path) if path in self.files else None

    def get_outgoing_references(self, doc: Document) -> OutgoingReferences | None:
        if doc.path in self.fail_expand:
            raise OSError(f"cache unavailable for {doc.path}")
        if doc.path not in self.files:
            return None
        if not doc.is_text:
            return OutgoingReferences()
        return OutgoingReferences.from_references(extract_references(self.files[doc.path]))

    def resolve_reference(self, reference: str, context_path: str) -> Document | None:
        paths = frozenset(self.files)
        if self._resolver is None or self._resolver[0] != paths:
            self._resolver = (paths, LinkResolver(paths))
        resolved = self._resolver[1].resolve(reference, context_path)
        return Document(resolved) if resolved is not None else None

    def get_referrers(self, doc: Document) -> dict[Document, list[Occurrence]]:
        result: dict[Document, list[Occurrence]] = {}
        for path, text in sorted(self.files.items()):
            if not Document(path).is_text:
                continue
            for ref in extract_references(text):
                if self.resolve_reference(ref.target, path) == doc:
                    occurrence = Occurrence(ref.line, ref.target, ref.kind)
                    result.setdefault(Document(path), []).append(occurrence)
        return result

    def read_text(self, doc: Document) -> str:
        if doc.path in self.fail_read:
            raise OSError(f"cannot read {doc.path}")
        text = self.files[doc.path]
        if self.on_read is not None:
            self.on_read(doc)
        return text

    def write_text(self, doc: Document, content: str) -> None:
        if doc.path in self.fail_write:
            raise OSError(f"cannot write {doc.path}")
        self.files[doc.path] = content
        self.writes.append(doc.path)

    def remove_document(self, doc: Document) -> None:
        if doc.path in self.fail_remove:
            raise OSError(f"cannot remove {doc.path}")
        del self.files[doc.path]
        self.removed.append(doc.path)

    def copy_to_backup(self, doc: Document, destination: Path) -> None:
        if doc.path in self.fail_backup:
            raise OSError(f"cannot back up {doc.path}")
        self.backups.append((doc.path, destination))
