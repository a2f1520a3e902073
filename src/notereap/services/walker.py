"""LinkGraphWalker — reachable-set discovery from a root document.

Iterative depth-first traversal with an explicit visited set, so cyclic
corpora terminate and deep chains cannot exhaust the call stack.

Rules:
- Links are added to the result and, when ``recursive`` is on, expanded.
- Embeds are added to the result but never expanded, whatever
  ``recursive`` says.
- Unresolvable references are skipped silently.
- A failure while expanding one document is logged and skipped; the
  rest of the traversal carries on.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from notereap.domain.documents import Document, Reference
    from notereap.services.protocols import Corpus

logger = logging.getLogger(__name__)


class LinkGraphWalker:
    """Collects every document reachable from a root via links and embeds."""

    def __init__(self, corpus: Corpus, *, recursive: bool = True) -> None:
        self._corpus = corpus
        self._recursive = recursive

    def walk(self, root: Document) -> set[Document]:
        """Return the reachable set of *root*, excluding *root* itself."""
        visited: set[Document] = set()
        found: set[Document] = set()
        stack: list[Document] = [root]

        while stack:
            current = stack.pop()
            if current in visited:
                continue
            visited.add(current)
            try:
                self._expand(current, visited, found, stack)
            except Exception:
                logger.exception("Error processing linked file: %s", current.path)

        found.discard(root)
        return found

    def _expand(
        self,
        current: Document,
        visited: set[Document],
        found: set[Document],
        stack: list[Document],
    ) -> None:
        refs = self._corpus.get_outgoing_references(current)
        if refs is None:
            logger.debug("No reference cache for %s", current.path)
            return

        for target in self._resolve_all(refs.links, current):
            if target in visited:
                continue
            found.add(target)
            if self._recursive:
                stack.append(target)

        for target in self._resolve_all(refs.embeds, current):
            if target not in visited:
                found.add(target)

    def _resolve_all(self, references: list[Reference], context: Document) -> list[Document]:
        resolved: list[Document] = []
        for ref in references:
            try:
                target = self._corpus.resolve_reference(ref.target, context.path)
            except Exception:
                logger.exception("Error resolving %r in %s", ref.target, context.path)
                continue
            if target is not None:
                resolved.append(target)
        return resolved
