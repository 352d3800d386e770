"""
Flight Graph Shortest-Path Counting

Single-source BFS that records, for every node, its hop distance, how
many distinct shortest paths reach it, and its predecessors on those
paths. Betweenness centrality is accumulated from these counts.

Parallel edges do not multiply paths: a path is a sequence of nodes.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Hashable

from flight_graph.graph.store import GraphStore
from flight_graph.graph.traversal import UNREACHABLE, DistanceMap


@dataclass
class ShortestPathCounts:
    """Shortest-path structure rooted at one source."""
    source: Hashable
    distances: DistanceMap
    path_counts: dict[Hashable, int]
    predecessors: dict[Hashable, list[Hashable]]
    order: list[Hashable] = field(default_factory=list)   # BFS discovery order

    def through_counts(self) -> dict[Hashable, dict[Hashable, int]]:
        """Per target, the number of shortest source->target paths that
        pass through each intermediate node.

        Source and target themselves are never intermediates. Unreachable
        targets and the source have no entry.

        Betweenness sums dependencies() instead; this table is for
        inspecting individual targets.
        """
        table = {}
        for position, target in enumerate(self.order):
            if target == self.source:
                continue
            # paths from each node down to target along the predecessor DAG
            downstream = {target: 1}
            stack = self.order[:position + 1]
            while stack:
                node = stack.pop()
                paths_below = downstream.get(node)
                if not paths_below:
                    continue
                for pred in self.predecessors[node]:
                    downstream[pred] = downstream.get(pred, 0) + paths_below
            table[target] = {
                node: self.path_counts[node] * below
                for node, below in downstream.items()
                if node != self.source and node != target
            }
        return table

    def dependencies(self) -> dict[Hashable, float]:
        """Brandes dependency of the source on every node.

        Equals, per node v, the sum over targets t of
        through_counts()[t][v] / path_counts[t].
        """
        delta = {node: 0.0 for node in self.distances}
        stack = list(self.order)
        while stack:
            node = stack.pop()
            coefficient = (1.0 + delta[node]) / self.path_counts[node]
            for pred in self.predecessors[node]:
                delta[pred] += self.path_counts[pred] * coefficient
        delta[self.source] = 0.0
        return delta


def count_shortest_paths(graph: GraphStore, source: Hashable) -> ShortestPathCounts:
    """BFS from source accumulating shortest-path counts.

    A neighbor first seen at depth d+1 takes the current node's count;
    seen again at d+1 from another node, it adds that node's count.
    Raises UnknownNodeError if source was never inserted.
    """
    graph.require_node(source)
    distances = {node: UNREACHABLE for node in graph.nodes()}
    path_counts = {node: 0 for node in distances}
    predecessors = {node: [] for node in distances}
    distances[source] = 0
    path_counts[source] = 1

    order = []
    queue = deque([source])
    while queue:
        current = queue.popleft()
        order.append(current)
        next_depth = distances[current] + 1
        seen = set()
        for neighbor, _ in graph.neighbors(current):
            if neighbor in seen:
                continue
            seen.add(neighbor)
            if distances[neighbor] == UNREACHABLE:
                distances[neighbor] = next_depth
                queue.append(neighbor)
            if distances[neighbor] == next_depth:
                path_counts[neighbor] += path_counts[current]
                predecessors[neighbor].append(current)

    return ShortestPathCounts(
        source=source,
        distances=distances,
        path_counts=path_counts,
        predecessors=predecessors,
        order=order,
    )
