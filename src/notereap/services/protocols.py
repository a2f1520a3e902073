"""Corpus — the host collaborator interface the services depend on.

The forward-link cache, link resolution, the reverse-link index, and
the storage primitives all belong to the host corpus manager. Services
only query and call into it; they never rebuild any of it themselves.
:class:`notereap.infrastructure.vault.Vault` is the directory-vault
implementation.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Protocol, runtime_checkable

from notereap.domain.documents import Document, Occurrence, OutgoingReferences


@runtime_checkable
class Corpus(Protocol):
    """Read/write access to a corpus of interlinked documents."""

    def get_document(self, path: str) -> Document | None:
        """Look up a document by vault-relative path (None if absent)."""
        ...

    def get_outgoing_references(self, doc: Document) -> OutgoingReferences | None:
        """Cached links and embeds of *doc* (None if the document has no cache entry)."""
        ...

    def resolve_reference(self, reference: str, context_path: str) -> Document | None:
        """Map link text to a document, relative to *context_path* (None if unresolved)."""
        ...

    def get_referrers(self, doc: Document) -> Mapping[Document, list[Occurrence]]:
        """Reverse-link index lookup: documents referencing *doc*, with occurrences."""
        ...

    def read_text(self, doc: Document) -> str: ...

    def write_text(self, doc: Document, content: str) -> None: ...

    def remove_document(self, doc: Document) -> None: ...

    def copy_to_backup(self, doc: Document, destination: Path) -> None:
        """Copy *doc* under *destination*, keeping its vault-relative path."""
        ...
