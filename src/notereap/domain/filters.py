"""Deletion scope — narrows a reachable set to the documents to remove."""

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum

from notereap.domain.documents import Document


class DeletionScope(StrEnum):
    """Which content kinds a deletion run may remove."""

    ALL = "all"
    TEXT_ONLY = "text-only"
    ATTACHMENTS_ONLY = "attachments-only"


def filter_candidates(candidates: Iterable[Document], scope: DeletionScope) -> list[Document]:
    """Keep the candidates allowed by *scope*, sorted by path.

    Pure predicate over content kind: never adds documents, never raises
    for well-formed input.
    """
    if scope == DeletionScope.TEXT_ONLY:
        kept = [doc for doc in candidates if doc.is_text]
    elif scope == DeletionScope.ATTACHMENTS_ONLY:
        kept = [doc for doc in candidates if not doc.is_text]
    else:
        kept = list(candidates)
    return sorted(set(kept))


_EMPTY_MESSAGES: dict[DeletionScope, str] = {
    DeletionScope.ALL: "No linked items found to delete.",
    DeletionScope.TEXT_ONLY: "No linked notes found to delete.",
    DeletionScope.ATTACHMENTS_ONLY: "No linked attachments found to delete.",
}

_DONE_MESSAGES: dict[DeletionScope, str] = {
    DeletionScope.ALL: "Linked notes and attachments deleted.",
    DeletionScope.TEXT_ONLY: "Linked notes deleted.",
    DeletionScope.ATTACHMENTS_ONLY: "Linked attachments deleted.",
}


def empty_message(scope: DeletionScope) -> str:
    """User-facing message when nothing matched *scope*."""
    return _EMPTY_MESSAGES[DeletionScope(scope)]


def done_message(scope: DeletionScope) -> str:
    """User-facing message after a successful deletion run."""
    return _DONE_MESSAGES[DeletionScope(scope)]
