"""Filesystem operations for vault documents.

INVARIANT: Files are truth. The link index is derived and can always
be rebuilt from the files under the vault root.

This module handles actual file I/O, path resolution, file discovery,
and the backup copy. It knows nothing about links.
"""

from __future__ import annotations

import shutil
from collections.abc import Iterable
from pathlib import Path

# Written into every backup destination; discovery skips marked folders.
BACKUP_MARKER = ".notereap-backup"


def resolve_vault_path(vault_root: Path, rel_path: str) -> Path:
    """Resolve a vault-relative POSIX path to an absolute filesystem path.

    Raises ValueError if the result escapes the vault root.
    """
    result = vault_root / rel_path
    if not result.resolve().is_relative_to(vault_root.resolve()):
        msg = f"Path escapes vault root: {rel_path}"
        raise ValueError(msg)
    return result


def to_vault_path(vault_root: Path, path: Path) -> str:
    """Express *path* as a POSIX path relative to *vault_root*."""
    return path.resolve().relative_to(vault_root.resolve()).as_posix()


def find_vault_files(vault_root: Path, *, ignore_dirs: Iterable[str] = ()) -> list[Path]:
    """Discover every file in the vault, skipping *ignore_dirs* at any depth.

    Folders holding a :data:`BACKUP_MARKER` are backup copies and are
    skipped too. Returns paths sorted for deterministic indexing.
    """
    skip = frozenset(ignore_dirs)
    backups = {marker.parent for marker in vault_root.rglob(BACKUP_MARKER)}
    results: list[Path] = []
    for path in vault_root.rglob("*"):
        if not path.is_file():
            continue
        rel_parts = path.relative_to(vault_root).parts
        if any(part in skip for part in rel_parts[:-1]):
            continue
        if any(parent in backups for parent in path.parents):
            continue
        results.append(path)
    return sorted(results)


# ---------------------------------------------------------------------------
# File I/O
# ---------------------------------------------------------------------------


def read_text_file(path: Path) -> str:
    """Read a text document as UTF-8.

    ``newline=""`` disables newline translation so a rewrite keeps the
    document's original line endings.
    """
    with path.open(encoding="utf-8", newline="") as fh:
        return fh.read()


def write_text_file(path: Path, content: str) -> None:
    """Overwrite a text document with *content*, line endings untouched."""
    with path.open("w", encoding="utf-8", newline="") as fh:
        fh.write(content)


def remove_file(path: Path) -> None:
    """Delete a single file. Raises FileNotFoundError if it is already gone."""
    path.unlink()


def copy_to_backup(vault_root: Path, rel_path: str, destination: Path) -> Path:
    """Copy a vault file to ``destination/<rel_path>``, creating parents.

    The destination is marked with :data:`BACKUP_MARKER` so one inside the
    vault is never indexed as vault content. Returns the backup path.
    """
    source = resolve_vault_path(vault_root, rel_path)
    destination.mkdir(parents=True, exist_ok=True)
    (destination / BACKUP_MARKER).touch()
    target = destination / rel_path
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(source, target)
    return target
