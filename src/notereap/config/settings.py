"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``NOTEREAP_*`` prefix, ``__`` for nested sections
  3. TOML file    — ``notereap.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the ``find_config`` walk-up discovery from
:mod:`notereap.config.discovery`.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from notereap.config.discovery import find_config, read_toml
from notereap.config.models import BackupConfig, BacklinksConfig, DeleteConfig, VaultConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``notereap.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            self._data = read_toml(toml_path)

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for the TOML path during construction.
_tls = threading.local()


class NotereapSettings(BaseSettings):
    """Unified settings for the notereap CLI.

    Merges CLI flags, environment variables, TOML config sections,
    and code-baked defaults into a single frozen object.

    Attributes:
        vault_root: Resolved vault directory (parent of ``notereap.toml``,
            or CWD if no config found).
        config_path: The TOML file that was loaded, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "NOTEREAP_",
        "env_nested_delimiter": "__",
    }

    vault_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    no_interact: bool = False

    # --- TOML sections ---
    vault: VaultConfig = Field(default_factory=VaultConfig)
    delete: DeleteConfig = Field(default_factory=DeleteConfig)
    backup: BackupConfig = Field(default_factory=BackupConfig)
    backlinks: BacklinksConfig = Field(default_factory=BacklinksConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        vault_root: Path | None = None,
        **cli_flags: Any,
    ) -> NotereapSettings:
        """Construct settings from a CLI invocation.

        Discovers ``notereap.toml`` via walk-up (or explicit *config_path*),
        resolves *vault_root* from the config file's parent directory,
        and merges CLI flags as highest-priority overrides.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(vault_root)

        resolved_root = vault_root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            return cls(
                vault_root=resolved_root,
                config_path=toml_path,
                **cli_flags,
            )
        finally:
            _tls.toml_path = None

    def with_overrides(self, **sections: dict[str, Any]) -> NotereapSettings:
        """Return a copy with per-command section overrides applied.

        ``None`` values are ignored so unset CLI options keep the
        configured value. Overridden sections are re-validated.

        Example::

            settings.with_overrides(delete={"scope": "text-only", "recursive": None})
        """
        update: dict[str, Any] = {}
        for name, values in sections.items():
            given = {k: v for k, v in values.items() if v is not None}
            if not given:
                continue
            section = getattr(self, name)
            update[name] = type(section).model_validate({**section.model_dump(), **given})
        if not update:
            return self
        return self.model_copy(update=update)
