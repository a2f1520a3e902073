"""Tests for LinkResolver — link text to vault path."""

from __future__ import annotations

import pytest

from notereap.infrastructure.vault import LinkResolver

_PATHS = [
    "Index.md",
    "Note.md",
    "archive/Note.md",
    "projects/Plan.md",
    "projects/sub/Plan.md",
    "assets/img.png",
    "projects/img.png",
]


@pytest.fixture
def resolver() -> LinkResolver:
    return LinkResolver(_PATHS)


class TestLinkResolver:
    def test_by_stem(self, resolver: LinkResolver) -> None:
        assert resolver.resolve("Index", "Note.md") == "Index.md"

    def test_case_insensitive(self, resolver: LinkResolver) -> None:
        assert resolver.resolve("index", "Note.md") == "Index.md"

    def test_exact_path_with_extension(self, resolver: LinkResolver) -> None:
        assert resolver.resolve("archive/Note.md", "Index.md") == "archive/Note.md"

    def test_exact_path_without_extension(self, resolver: LinkResolver) -> None:
        assert resolver.resolve("archive/Note", "Index.md") == "archive/Note.md"

    def test_context_folder_before_name_match(self, resolver: LinkResolver) -> None:
        assert resolver.resolve("Plan", "projects/sub/x.md") == "projects/sub/Plan.md"
        assert resolver.resolve("Plan", "Index.md") == "projects/Plan.md"
        assert resolver.resolve("img.png", "projects/Plan.md") == "projects/img.png"

    def test_shortest_path_breaks_ties(self, resolver: LinkResolver) -> None:
        assert resolver.resolve("Note", "elsewhere/x.md") == "Note.md"
        assert resolver.resolve("img.png", "Index.md") == "assets/img.png"

    def test_folder_suffix(self, resolver: LinkResolver) -> None:
        assert resolver.resolve("sub/Plan", "Index.md") == "projects/sub/Plan.md"

    def test_relative(self, resolver: LinkResolver) -> None:
        assert resolver.resolve("../Index", "archive/Note.md") == "Index.md"
        assert resolver.resolve("./sub/Plan.md", "projects/Plan.md") == "projects/sub/Plan.md"

    def test_attachment_needs_extension(self, resolver: LinkResolver) -> None:
        assert resolver.resolve("img", "Index.md") is None

    def test_unresolved(self, resolver: LinkResolver) -> None:
        assert resolver.resolve("Missing", "Index.md") is None
        assert resolver.resolve("  ", "Index.md") is None
