"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, notereap.toml only contains
overrides. A fresh vault needs no config file at all.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, field_validator

from notereap.domain.filters import DeletionScope
from notereap.domain.rewrite import PLACEHOLDER, RewritePolicy

# --- notereap.toml sections ---


class VaultConfig(BaseModel):
    """[vault] section."""

    model_config = {"frozen": True}

    ignore_dirs: tuple[str, ...] = (".obsidian", ".git", ".trash", ".notereap")


class DeleteConfig(BaseModel):
    """[delete] section."""

    model_config = {"frozen": True}

    confirm: bool = True
    recursive: bool = True
    scope: DeletionScope = DeletionScope.ALL


class BackupConfig(BaseModel):
    """[backup] section."""

    model_config = {"frozen": True}

    enabled: bool = False
    destination: Path | None = None
    required: bool = False

    @field_validator("destination", mode="before")
    @classmethod
    def _blank_is_unset(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class BacklinksConfig(BaseModel):
    """[backlinks] section."""

    model_config = {"frozen": True}

    cleanup: bool = False
    policy: RewritePolicy = RewritePolicy.PLACEHOLDER
    list_items_standalone: bool = False
    placeholder: str = PLACEHOLDER
    verify_before_write: bool = False

    @field_validator("placeholder")
    @classmethod
    def _placeholder_is_plain_text(cls, value: str) -> str:
        if "[[" in value or "]]" in value:
            msg = "placeholder must not contain wikilink brackets"
            raise ValueError(msg)
        return value
