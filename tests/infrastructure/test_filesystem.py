"""Tests for filesystem operations — file I/O, path resolution, discovery."""

from pathlib import Path

import pytest

from notereap.infrastructure.filesystem import (
    BACKUP_MARKER,
    copy_to_backup,
    find_vault_files,
    read_text_file,
    remove_file,
    resolve_vault_path,
    to_vault_path,
    write_text_file,
)
from tests.conftest import write_file


class TestResolveVaultPath:
    def test_inside(self, tmp_path: Path) -> None:
        assert resolve_vault_path(tmp_path, "notes/a.md") == tmp_path / "notes" / "a.md"

    def test_escape_rejected(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError, match="escapes vault root"):
            resolve_vault_path(tmp_path, "../outside.md")

    def test_to_vault_path(self, tmp_path: Path) -> None:
        assert to_vault_path(tmp_path, tmp_path / "notes" / "a.md") == "notes/a.md"


class TestFindVaultFiles:
    def test_skips_ignored_dirs_at_any_depth(self, tmp_path: Path) -> None:
        write_file(tmp_path, "a.md", "")
        write_file(tmp_path, "sub/b.png", b"")
        write_file(tmp_path, ".obsidian/app.json", "{}")
        write_file(tmp_path, "sub/.git/HEAD", "")
        found = find_vault_files(tmp_path, ignore_dirs={".obsidian", ".git"})
        assert [to_vault_path(tmp_path, p) for p in found] == ["a.md", "sub/b.png"]

    def test_empty_vault(self, tmp_path: Path) -> None:
        assert find_vault_files(tmp_path) == []


class TestFileIO:
    def test_line_endings_preserved(self, tmp_path: Path) -> None:
        path = tmp_path / "a.md"
        write_text_file(path, "one\r\ntwo\n")
        assert read_text_file(path) == "one\r\ntwo\n"
        assert path.read_bytes() == b"one\r\ntwo\n"

    def test_remove_file(self, tmp_path: Path) -> None:
        path = write_file(tmp_path, "a.md", "x")
        remove_file(path)
        assert not path.exists()

    def test_remove_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            remove_file(tmp_path / "gone.md")


class TestCopyToBackup:
    def test_keeps_relative_layout(self, tmp_path: Path) -> None:
        vault = tmp_path / "vault"
        write_file(vault, "notes/a.md", "content")
        target = copy_to_backup(vault, "notes/a.md", tmp_path / "backup")
        assert target == tmp_path / "backup" / "notes" / "a.md"
        assert target.read_text(encoding="utf-8") == "content"
        assert (vault / "notes" / "a.md").exists()

    def test_marks_destination(self, tmp_path: Path) -> None:
        vault = tmp_path / "vault"
        write_file(vault, "a.md", "content")
        copy_to_backup(vault, "a.md", tmp_path / "backup")
        assert (tmp_path / "backup" / BACKUP_MARKER).is_file()

    def test_destination_inside_vault_is_not_discovered(self, tmp_path: Path) -> None:
        write_file(tmp_path, "notes/a.md", "content")
        copy_to_backup(tmp_path, "notes/a.md", tmp_path / "bak")
        found = find_vault_files(tmp_path)
        assert [to_vault_path(tmp_path, p) for p in found] == ["notes/a.md"]
