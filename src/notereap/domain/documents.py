"""Document identity, content kinds, and reference edges.

A Document is identified by its vault-relative POSIX path. The content
kind is derived from the file extension alone: ``.md`` files are text
notes, everything else is an attachment.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import PurePosixPath

# Extensions treated as text notes (everything else is an attachment).
TEXT_EXTENSIONS = frozenset({"md"})


class ContentKind(StrEnum):
    """Content-type discriminator for a Document."""

    TEXT = "text"
    ATTACHMENT = "attachment"


class EdgeKind(StrEnum):
    """How one document refers to another."""

    LINK = "link"
    EMBED = "embed"


@dataclass(frozen=True, order=True)
class Document:
    """A unit of content in the corpus, identified by vault-relative path."""

    path: str

    @classmethod
    def from_path(cls, path: str | PurePosixPath) -> Document:
        """Normalize *path* (backslashes, leading ``./`` or ``/``) into a Document."""
        raw = str(path).replace("\\", "/")
        return cls(path=PurePosixPath(raw.lstrip("/")).as_posix().removeprefix("./"))

    @property
    def name(self) -> str:
        """File name with extension (``Folder/Note.md`` -> ``Note.md``)."""
        return PurePosixPath(self.path).name

    @property
    def stem(self) -> str:
        return PurePosixPath(self.path).stem

    @property
    def extension(self) -> str:
        """Lower-cased extension without the dot (empty if none)."""
        return PurePosixPath(self.path).suffix.lstrip(".").lower()

    @property
    def folder(self) -> str:
        parent = PurePosixPath(self.path).parent.as_posix()
        return "" if parent == "." else parent

    @property
    def kind(self) -> ContentKind:
        if self.extension in TEXT_EXTENSIONS:
            return ContentKind.TEXT
        return ContentKind.ATTACHMENT

    @property
    def is_text(self) -> bool:
        return self.kind is ContentKind.TEXT

    @property
    def display_name(self) -> str:
        """Bare name used in references.

        Text notes lose ``.md``, attachments keep their extension.
        """
        if self.is_text:
            return self.stem
        return self.name

    def __str__(self) -> str:
        return self.path


@dataclass(frozen=True)
class Reference:
    """One outgoing reference as written in a document (unresolved)."""

    target: str  # link text with anchor/alias removed
    kind: EdgeKind = EdgeKind.LINK
    line: int = 0  # 0-based line number in the source document
    anchor: str | None = None
    alias: str | None = None


@dataclass(frozen=True)
class LinkEdge:
    """A resolved directed relation ``source -> target``."""

    source: Document
    target: Document
    kind: EdgeKind


@dataclass(frozen=True)
class OutgoingReferences:
    """Cached forward references of a document, split by kind."""

    links: list[Reference] = field(default_factory=list)
    embeds: list[Reference] = field(default_factory=list)

    @classmethod
    def from_references(cls, references: list[Reference]) -> OutgoingReferences:
        return cls(
            links=[r for r in references if r.kind is EdgeKind.LINK],
            embeds=[r for r in references if r.kind is EdgeKind.EMBED],
        )


@dataclass(frozen=True)
class Occurrence:
    """A line-level occurrence of a reference inside a referrer."""

    line: int
    target: str
    kind: EdgeKind = EdgeKind.LINK
