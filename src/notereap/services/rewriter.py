"""BacklinkRewriter — strip or rewrite references to removed documents.

Single linear pass, best-effort, not transactional across documents:

    for each referrer of the removed documents:
        read -> rewrite_text -> write (only if changed)

A read or write failure on one referrer is logged and recorded; the
remaining referrers are still processed.

The write replaces the whole document. An edit made by someone else
between the read and the write is overwritten unless
``verify_before_write`` is on, in which case the document is re-read
and the write is skipped when its content hash changed.
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import structlog

from notereap.domain.rewrite import rewrite_text

if TYPE_CHECKING:
    from notereap.config.models import BacklinksConfig
    from notereap.domain.documents import Document, Occurrence
    from notereap.services.protocols import Corpus

logger = structlog.get_logger(__name__)


class ConcurrentModificationError(RuntimeError):
    """A referrer changed on disk between the rewriter's read and write."""


@dataclass
class RewriteReport:
    """What one rewrite pass touched."""

    rewritten: list[str] = field(default_factory=list)
    unchanged: list[str] = field(default_factory=list)
    failures: list[dict[str, str]] = field(default_factory=list)


def _digest(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


class BacklinkRewriter:
    """Rewrites every referrer of a batch of removed documents."""

    def __init__(self, corpus: Corpus, config: BacklinksConfig) -> None:
        self._corpus = corpus
        self._config = config

    def collect_referrers(self, deleted: Iterable[Document]) -> dict[Document, set[Document]]:
        """Snapshot the reverse index: referrer -> removed documents it mentions.

        Must run before removal if the host forgets removed documents.
        Referrers that are themselves in *deleted* are left out.
        """
        deleted = list(deleted)
        doomed = set(deleted)
        by_referrer: dict[Document, set[Document]] = {}
        for doc in deleted:
            try:
                referrers: Mapping[Document, list[Occurrence]] = self._corpus.get_referrers(doc)
            except Exception as exc:
                logger.warning("backlinks.lookup_failed", path=doc.path, error=str(exc))
                continue
            if not referrers:
                logger.debug("backlinks.none", path=doc.path)
            for referrer in referrers:
                if referrer in doomed:
                    continue
                by_referrer.setdefault(referrer, set()).add(doc)
        return by_referrer

    def rewrite(
        self,
        deleted: Iterable[Document],
        referrers: Mapping[Document, set[Document]] | None = None,
    ) -> RewriteReport:
        """Rewrite references to *deleted* in every referring document.

        Pass *referrers* (from :meth:`collect_referrers`) when the
        documents are already gone from the reverse index.
        """
        deleted = list(deleted)
        report = RewriteReport()
        if not deleted:
            return report
        if referrers is None:
            referrers = self.collect_referrers(deleted)

        # Names of every removed document are applied to every referrer:
        # a referrer's index entry can lag behind its text.
        names = sorted({doc.display_name for doc in deleted})
        for referrer in sorted(referrers):
            self._rewrite_one(referrer, names, report)
        return report

    def _rewrite_one(self, referrer: Document, names: list[str], report: RewriteReport) -> None:
        cfg = self._config
        log = logger.bind(path=referrer.path)

        try:
            original = self._corpus.read_text(referrer)
        except Exception as exc:
            log.warning("backlinks.read_failed", error=str(exc))
            report.failures.append({"path": referrer.path, "op": "read", "error": str(exc)})
            return

        updated, changed = rewrite_text(
            original,
            names,
            cfg.policy,
            list_items_standalone=cfg.list_items_standalone,
            placeholder=cfg.placeholder,
        )
        if not changed:
            log.debug("backlinks.unchanged")
            report.unchanged.append(referrer.path)
            return

        try:
            if cfg.verify_before_write:
                current = self._corpus.read_text(referrer)
                if _digest(current) != _digest(original):
                    msg = f"{referrer.path} changed since it was read; rewrite skipped"
                    raise ConcurrentModificationError(msg)
            self._corpus.write_text(referrer, updated)
        except ConcurrentModificationError as exc:
            log.warning("backlinks.conflict", error=str(exc))
            report.failures.append({"path": referrer.path, "op": "conflict", "error": str(exc)})
            return
        except Exception as exc:
            log.warning("backlinks.write_failed", error=str(exc))
            report.failures.append({"path": referrer.path, "op": "write", "error": str(exc)})
            return

        log.info("backlinks.rewritten", policy=str(cfg.policy))
        report.rewritten.append(referrer.path)
