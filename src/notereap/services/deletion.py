"""DeletionService — plan and execute a recursive deletion.

Pipeline, triggered on a chosen root document:

    WALK -> FILTER -> (confirm, in the CLI) -> BACKUP -> REMOVE -> REWRITE

``compute_deletion_set`` covers WALK + FILTER and never mutates.
``execute_deletion`` covers the rest. Every per-document step is
isolated: a failed backup, removal, read, or write is logged and
recorded in the outcome, and the batch carries on.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from notereap.domain.filters import DeletionScope, done_message, empty_message, filter_candidates
from notereap.services.base import BaseService
from notereap.services.result import ErrorCode, ServiceResult
from notereap.services.rewriter import BacklinkRewriter
from notereap.services.walker import LinkGraphWalker

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from notereap.domain.documents import Document

logger = structlog.get_logger(__name__)


def _describe(doc: Document) -> dict[str, Any]:
    return {
        "path": doc.path,
        "name": doc.name,
        "kind": str(doc.kind),
        "extension": doc.extension,
    }


class DeletionService(BaseService):
    """Computes deletion candidates and removes them from the corpus."""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def walk(self, root: Document) -> set[Document]:
        """Reachable set of *root* under the configured recursion setting."""
        walker = LinkGraphWalker(self._corpus, recursive=self._settings.delete.recursive)
        return walker.walk(root)

    def candidates(self, root: Document) -> list[Document]:
        """Walker + Filter, as plain documents."""
        return filter_candidates(self.walk(root), self._settings.delete.scope)

    def compute_deletion_set(self, root_path: str) -> ServiceResult:
        """Resolve *root_path* and list what a deletion would remove.

        An empty list is a normal outcome, reported with a scope-specific
        message.
        """
        op = "plan"
        cfg = self._settings.delete

        try:
            root = self._corpus.get_document(root_path)
        except Exception as exc:
            logger.error("root.lookup_failed", path=root_path, error=str(exc))
            return ServiceResult.failure(
                op,
                ErrorCode.LOOKUP_FAILED,
                f"Could not look up {root_path!r}: {exc}",
                path=root_path,
            )
        if root is None:
            return ServiceResult.failure(
                op, ErrorCode.NOT_FOUND, f"No document found at {root_path!r}", path=root_path
            )

        candidates = self.candidates(root)
        data: dict[str, Any] = {
            "root": root.path,
            "scope": str(cfg.scope),
            "recursive": cfg.recursive,
            "items": [_describe(doc) for doc in candidates],
            "count": len(candidates),
        }
        if not candidates:
            data["message"] = empty_message(cfg.scope)
        return ServiceResult(ok=True, op=op, data=data)

    def execute_deletion(self, candidates: Sequence[Document]) -> ServiceResult:
        """Back up (optionally), remove, and clean up references to *candidates*.

        The caller is responsible for confirmation. Returns an outcome
        summary; ``ok`` is False only when the run was blocked or at least
        one removal failed.
        """
        op = "delete"
        scope: DeletionScope = self._settings.delete.scope
        warnings: list[str] = []
        failures: list[dict[str, str]] = []

        if not candidates:
            return ServiceResult(
                ok=True,
                op=op,
                data={"deleted": [], "deleted_count": 0, "message": empty_message(scope)},
            )

        destination = self._backup_destination(warnings)
        if destination is None and self._settings.backup.enabled and self._settings.backup.required:
            return ServiceResult.failure(
                op,
                ErrorCode.BACKUP_NOT_CONFIGURED,
                "Backup is required but no backup destination is configured; nothing was deleted.",
                warnings=warnings,
            )

        rewriter = BacklinkRewriter(self._corpus, self._settings.backlinks)
        cleanup = self._settings.backlinks.cleanup
        referrers = rewriter.collect_referrers(candidates) if cleanup else {}

        backed_up: list[str] = []
        deleted: list[Document] = []
        for doc in candidates:
            if destination is not None:
                if not self._backup(doc, destination, failures):
                    if self._settings.backup.required:
                        continue
                else:
                    backed_up.append(doc.path)
            try:
                self._corpus.remove_document(doc)
            except Exception as exc:
                self._record_failure(failures, "delete", doc.path, exc)
                continue
            logger.info("document.deleted", path=doc.path)
            deleted.append(doc)

        rewritten: list[str] = []
        if cleanup and deleted:
            survivors = set(deleted)
            live_referrers = {
                ref: targets & survivors
                for ref, targets in referrers.items()
                if targets & survivors
            }
            report = rewriter.rewrite(deleted, live_referrers)
            rewritten = report.rewritten
            failures.extend(report.failures)

        data: dict[str, Any] = {
            "deleted": [doc.path for doc in deleted],
            "deleted_count": len(deleted),
            "failures": failures,
            "backed_up": backed_up,
            "rewritten": rewritten,
            "message": done_message(scope),
        }
        warnings.extend(f"{f['op']} failed for {f['path']}: {f['error']}" for f in failures)

        if len(deleted) < len(candidates):
            return ServiceResult.failure(
                op,
                ErrorCode.DELETE_FAILED,
                f"{len(candidates) - len(deleted)} of {len(candidates)} documents were not deleted",
                data=data,
                warnings=warnings,
            )
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _backup_destination(self, warnings: list[str]) -> Path | None:
        """The backup directory, or None when backup is off or unconfigured."""
        cfg = self._settings.backup
        if not cfg.enabled:
            return None
        if cfg.destination is None:
            logger.warning("backup.not_configured")
            warnings.append("Backup location is not set.")
            return None
        destination = cfg.destination.expanduser()
        if not destination.is_absolute():
            destination = self._settings.vault_root / destination
        return destination

    def _backup(self, doc: Document, destination: Path, failures: list[dict[str, str]]) -> bool:
        try:
            self._corpus.copy_to_backup(doc, destination)
        except Exception as exc:
            self._record_failure(failures, "backup", doc.path, exc)
            return False
        return True
