"""BaseService — shared foundation for the notereap services.

Every service receives a :class:`Corpus` collaborator and the resolved
settings at construction time. Services never touch files directly;
all reads, writes, and removals go through the corpus.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from notereap.config.settings import NotereapSettings
    from notereap.services.protocols import Corpus

logger = structlog.get_logger(__name__)


class BaseService:
    """Base for service-layer classes.

    Usage::

        class DeletionService(BaseService):
            def compute_deletion_set(self, root: str) -> ServiceResult:
                doc = self._corpus.get_document(root)
                ...
    """

    def __init__(self, corpus: Corpus, settings: NotereapSettings) -> None:
        self._corpus = corpus
        self._settings = settings

    @property
    def settings(self) -> NotereapSettings:
        return self._settings

    def _record_failure(
        self,
        failures: list[dict[str, str]],
        op: str,
        path: str,
        exc: BaseException,
    ) -> None:
        """Log a per-document failure and append it to *failures*.

        INVARIANT: one document's failure never stops the batch.
        """
        logger.warning("document.failed", op=op, path=path, error=str(exc))
        failures.append({"path": path, "op": op, "error": str(exc)})
