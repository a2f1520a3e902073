"""Tests for Document identity and content kinds."""

from __future__ import annotations

import pytest

from notereap.domain.documents import (
    ContentKind,
    Document,
    EdgeKind,
    OutgoingReferences,
    Reference,
)


class TestDocument:
    def test_name_stem_folder(self) -> None:
        doc = Document("Projects/Apollo.md")
        assert doc.name == "Apollo.md"
        assert doc.stem == "Apollo"
        assert doc.folder == "Projects"
        assert doc.extension == "md"

    def test_root_folder_is_empty(self) -> None:
        assert Document("Index.md").folder == ""

    @pytest.mark.parametrize(
        ("path", "kind"),
        [
            ("a.md", ContentKind.TEXT),
            ("A.MD", ContentKind.TEXT),
            ("b.png", ContentKind.ATTACHMENT),
            ("c.pdf", ContentKind.ATTACHMENT),
            ("noext", ContentKind.ATTACHMENT),
        ],
    )
    def test_kind_from_extension(self, path: str, kind: ContentKind) -> None:
        assert Document(path).kind is kind

    def test_display_name(self) -> None:
        assert Document("notes/Note.md").display_name == "Note"
        assert Document("assets/img.png").display_name == "img.png"

    def test_from_path_normalizes(self) -> None:
        assert Document.from_path("./notes/a.md").path == "notes/a.md"
        assert Document.from_path("/notes/a.md").path == "notes/a.md"
        assert Document.from_path("notes\\a.md").path == "notes/a.md"

    def test_hashable_and_ordered(self) -> None:
        docs = {Document("b.md"), Document("a.md"), Document("a.md")}
        assert sorted(docs) == [Document("a.md"), Document("b.md")]


class TestOutgoingReferences:
    def test_split_by_kind(self) -> None:
        refs = [
            Reference("A"),
            Reference("img.png", EdgeKind.EMBED),
            Reference("B", EdgeKind.LINK, line=3),
        ]
        out = OutgoingReferences.from_references(refs)
        assert [r.target for r in out.links] == ["A", "B"]
        assert [r.target for r in out.embeds] == ["img.png"]
