"""IndexService — link index maintenance and backlink inspection."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from notereap.services.base import BaseService
from notereap.services.result import ErrorCode, ServiceResult

if TYPE_CHECKING:
    from notereap.infrastructure.vault import Vault

logger = structlog.get_logger(__name__)


class IndexService(BaseService):
    """Read-only views over the vault's link index."""

    _corpus: Vault

    def refresh(self, *, rebuild: bool = False) -> ServiceResult:
        """Refresh (or fully rebuild) the index and summarize the link graph."""
        op = "index"
        try:
            stats = self._corpus.refresh_index(rebuild=rebuild)
            summary = self._corpus.graph.summary()
        except Exception as exc:
            logger.error("index.refresh_failed", error=str(exc))
            return ServiceResult.failure(
                op, ErrorCode.LOOKUP_FAILED, f"Could not refresh the link index: {exc}"
            )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "documents": stats.documents,
                "references": stats.references,
                "unresolved": stats.unresolved,
                "indexed": stats.indexed,
                "removed": stats.removed,
                "components": summary["components"],
                "orphans": summary["orphans"],
                "unreferenced_attachments": summary["unreferenced_attachments"],
                "rebuild": rebuild,
            },
        )

    def backlinks(self, path: str) -> ServiceResult:
        """List every document referencing *path*, with line numbers."""
        op = "backlinks"
        try:
            doc = self._corpus.get_document(path)
            referrers = self._corpus.get_referrers(doc) if doc is not None else {}
        except Exception as exc:
            logger.error("backlinks.lookup_failed", path=path, error=str(exc))
            return ServiceResult.failure(
                op, ErrorCode.LOOKUP_FAILED, f"Could not look up {path!r}: {exc}", path=path
            )
        if doc is None:
            return ServiceResult.failure(
                op, ErrorCode.NOT_FOUND, f"No document found at {path!r}", path=path
            )

        items = [
            {
                "path": referrer.path,
                "lines": [occ.line + 1 for occ in occurrences],
                "kinds": sorted({str(occ.kind) for occ in occurrences}),
            }
            for referrer, occurrences in sorted(referrers.items())
        ]
        return ServiceResult(
            ok=True,
            op=op,
            data={"target": doc.path, "items": items, "count": len(items)},
        )
