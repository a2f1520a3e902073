"""GraphEngine — lazy-built NetworkX graph from the SQLite link index.

Rebuilt on demand after any index change; used for reporting (orphans,
unreferenced attachments, component counts). The deletion walker does not
use it: traversal goes through the Corpus interface.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import networkx as nx

from notereap.domain.documents import Document, EdgeKind, LinkEdge

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine

_Graph = nx.DiGraph


class GraphEngine:
    """Lazy-loading graph engine backed by the ``documents`` and ``refs`` tables."""

    def __init__(self, db: Engine) -> None:
        self._db = db
        self._graph: _Graph | None = None

    @property
    def graph(self) -> _Graph:
        """Return the graph, building from the index on first access."""
        if self._graph is None:
            self._graph = self._build_from_db()
        return self._graph

    def invalidate(self) -> None:
        """Clear the cached graph, forcing rebuild on next access."""
        self._graph = None

    def summary(self) -> dict[str, Any]:
        """Document/edge counts plus orphans (text notes nothing links to or from)."""
        g = self.graph
        orphans = sorted(
            node
            for node, attrs in g.nodes(data=True)
            if g.degree(node) == 0 and attrs.get("extension") == "md"
        )
        unreferenced_attachments = sorted(
            node
            for node, attrs in g.nodes(data=True)
            if g.in_degree(node) == 0 and attrs.get("extension") != "md"
        )
        return {
            "documents": g.number_of_nodes(),
            "edges": g.number_of_edges(),
            "components": nx.number_weakly_connected_components(g) if len(g) else 0,
            "orphans": orphans,
            "unreferenced_attachments": unreferenced_attachments,
        }

    def _build_from_db(self) -> _Graph:
        """Build a DiGraph from the index.

        Loads all documents first (so isolated documents appear), then
        adds one edge per resolved source/target pair. An edge is an
        embed only when every reference between the pair is an embed.
        """
        from sqlalchemy import select

        from notereap.infrastructure.database.schema import documents

        g: _Graph = nx.DiGraph()
        with self._db.connect() as conn:
            for row in conn.execute(select(documents.c.path, documents.c.extension)):
                g.add_node(row.path, extension=row.extension)

        for edge in self.edges():
            source, target = edge.source.path, edge.target.path
            if g.has_edge(source, target):
                data = g.edges[source, target]
                data["count"] += 1
                if edge.kind is EdgeKind.LINK:
                    data["kind"] = str(EdgeKind.LINK)
            else:
                g.add_edge(source, target, kind=str(edge.kind), count=1)
        return g

    def edges(self) -> Iterator[LinkEdge]:
        """Yield one LinkEdge per resolved reference in the index."""
        from sqlalchemy import select

        from notereap.infrastructure.database.schema import refs

        query = (
            select(refs.c.source_path, refs.c.resolved_path, refs.c.kind)
            .where(refs.c.resolved_path.is_not(None))
            .order_by(refs.c.id)
        )
        with self._db.connect() as conn:
            rows = conn.execute(query).fetchall()
        for row in rows:
            yield LinkEdge(
                Document(row.source_path), Document(row.resolved_path), EdgeKind(row.kind)
            )
