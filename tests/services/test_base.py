"""Tests for BaseService and the Corpus protocol."""

from __future__ import annotations

from pathlib import Path

from notereap.config.settings import NotereapSettings
from notereap.infrastructure.vault import Vault
from notereap.services.base import BaseService
from notereap.services.protocols import Corpus
from tests.conftest import FakeCorpus


class TestBaseService:
    def test_settings_exposed(self, tmp_path: Path) -> None:
        settings = NotereapSettings.from_cli(vault_root=tmp_path)
        assert BaseService(FakeCorpus({}), settings).settings is settings

    def test_record_failure(self, tmp_path: Path) -> None:
        svc = BaseService(FakeCorpus({}), NotereapSettings.from_cli(vault_root=tmp_path))
        failures: list[dict[str, str]] = []
        svc._record_failure(failures, "delete", "a.md", OSError("busy"))
        assert failures == [{"path": "a.md", "op": "delete", "error": "busy"}]


class TestCorpusProtocol:
    def test_vault_is_a_corpus(self, vault: Vault) -> None:
        assert isinstance(vault, Corpus)

    def test_fake_is_a_corpus(self) -> None:
        assert isinstance(FakeCorpus({}), Corpus)
