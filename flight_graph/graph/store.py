"""
Flight Graph In-Memory Graph Store

Adjacency-list multigraph over hashable node identifiers (airport codes,
or dense integer indexes handed out by the ingest adapter).

Edges have: source, target, integer weight (flight count)
Parallel edges are kept: one stored edge per observed record.

Built once, then read-only for the duration of analysis.
"""

import logging
from dataclasses import dataclass
from typing import Hashable, Iterable, Iterator

logger = logging.getLogger("flight_graph.graph")


class UnknownNodeError(KeyError):
    """Raised when a traversal starts from a node the store has never seen."""

    def __init__(self, node: Hashable):
        super().__init__(node)
        self.node = node

    def __str__(self):
        return f"unknown node: {self.node!r}"


@dataclass(frozen=True)
class Edge:
    """One stored adjacency entry."""
    source: Hashable
    target: Hashable
    weight: int
    mirror: bool = False   # True for the reverse entry created in undirected mode


class GraphStore:
    """Directed or undirected multigraph with integer edge weights.

    In undirected mode add_edge(u, v, w) also stores (v, u, w) as an
    independent mirror entry, so out-degrees count both directions.
    """

    def __init__(self, directed: bool = True):
        self.directed = directed
        # node -> list of (neighbor, weight), insertion ordered
        self._outgoing: dict[Hashable, list[tuple[Hashable, int]]] = {}
        self._incoming: dict[Hashable, list[tuple[Hashable, int]]] = {}
        self._edges: list[Edge] = []

    # --------------------------------------------------------
    # Construction
    # --------------------------------------------------------

    def add_node(self, node: Hashable) -> None:
        """Register a node with no edges. Idempotent."""
        if node not in self._outgoing:
            self._outgoing[node] = []
            self._incoming[node] = []

    def add_edge(self, source: Hashable, target: Hashable, weight: int = 1) -> None:
        """Insert one edge (and its mirror in undirected mode).

        Nodes are created on first appearance. Existing edges between the
        same pair are never replaced.
        """
        self.add_node(source)
        self.add_node(target)
        self._insert(source, target, weight, mirror=False)
        if not self.directed:
            self._insert(target, source, weight, mirror=True)

    def _insert(self, source, target, weight, mirror):
        self._outgoing[source].append((target, weight))
        self._incoming[target].append((source, weight))
        self._edges.append(Edge(source, target, weight, mirror))

    # --------------------------------------------------------
    # Queries
    # --------------------------------------------------------

    def has_node(self, node: Hashable) -> bool:
        return node in self._outgoing

    def require_node(self, node: Hashable) -> None:
        if node not in self._outgoing:
            raise UnknownNodeError(node)

    def nodes(self) -> list[Hashable]:
        """All nodes in first-appearance order."""
        return list(self._outgoing)

    def neighbors(self, node: Hashable) -> Iterator[tuple[Hashable, int]]:
        """Outgoing (neighbor, weight) pairs. Empty for unknown nodes."""
        return iter(self._outgoing.get(node, ()))

    def predecessors(self, node: Hashable) -> Iterator[tuple[Hashable, int]]:
        """Incoming (neighbor, weight) pairs. Empty for unknown nodes."""
        return iter(self._incoming.get(node, ()))

    def out_degree(self, node: Hashable) -> int:
        return len(self._outgoing.get(node, ()))

    def edges(self, include_mirrors: bool = True) -> list[Edge]:
        if include_mirrors:
            return list(self._edges)
        return [e for e in self._edges if not e.mirror]

    # --------------------------------------------------------
    # Stats
    # --------------------------------------------------------

    @property
    def node_count(self) -> int:
        return len(self._outgoing)

    @property
    def edge_count(self) -> int:
        """Stored adjacency entries, mirrors included."""
        return len(self._edges)

    def __contains__(self, node: Hashable) -> bool:
        return self.has_node(node)

    def __len__(self) -> int:
        return self.node_count


def build(edge_stream: Iterable[tuple[Hashable, Hashable, int]],
          directed: bool = True) -> GraphStore:
    """Build a graph from (origin, destination, weight) triples."""
    graph = GraphStore(directed=directed)
    for origin, destination, weight in edge_stream:
        graph.add_edge(origin, destination, weight)
    logger.debug(f"Built {'directed' if directed else 'undirected'} graph: "
                 f"{graph.node_count} nodes, {graph.edge_count} edges")
    return graph
