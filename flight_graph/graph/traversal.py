"""
Flight Graph Traversal Engine

Single-source shortest distances over a GraphStore:
- hop_distance: classic FIFO BFS, every edge counts 1
- weighted_distance: additive edge weights

Every known node appears in the returned map. Nodes with no path from
the start map to UNREACHABLE, which never takes part in arithmetic.
"""

import heapq
import math
from collections import deque
from typing import Hashable

from flight_graph.graph.store import GraphStore


UNREACHABLE = math.inf

DistanceMap = dict[Hashable, float]


def is_reachable(distance) -> bool:
    return distance != UNREACHABLE


def saturating_add(distance, weight) -> float:
    """Add an edge weight to a distance, sticking at UNREACHABLE."""
    if distance == UNREACHABLE or weight == UNREACHABLE:
        return UNREACHABLE
    return distance + weight


def _initial_distances(graph: GraphStore, start: Hashable) -> DistanceMap:
    graph.require_node(start)
    distances = {node: UNREACHABLE for node in graph.nodes()}
    distances[start] = 0
    return distances


def hop_distance(graph: GraphStore, start: Hashable) -> DistanceMap:
    """Edge-count distance from start. Weights are ignored.

    Raises UnknownNodeError if start was never inserted.
    """
    distances = _initial_distances(graph, start)
    queue = deque([start])

    while queue:
        current = queue.popleft()
        next_depth = distances[current] + 1
        for neighbor, _ in graph.neighbors(current):
            if distances[neighbor] == UNREACHABLE:
                distances[neighbor] = next_depth
                queue.append(neighbor)

    return distances


def weighted_distance(graph: GraphStore, start: Hashable,
                      method: str = "relax") -> DistanceMap:
    """Sum-of-weights distance from start.

    method="relax": FIFO label-correcting relaxation. A neighbor is
    re-queued every time a strictly shorter distance is found, so the
    result is exact for non-negative weights, at the cost of repeated
    visits on dense graphs.
    method="dijkstra": binary-heap Dijkstra. Same result, fewer visits.

    Negative weights are unsupported.
    Raises UnknownNodeError if start was never inserted.
    """
    if method == "relax":
        return _relax_distances(graph, start)
    if method == "dijkstra":
        return _dijkstra_distances(graph, start)
    raise ValueError(f"Unknown weighted distance method: {method}")


def _relax_distances(graph: GraphStore, start: Hashable) -> DistanceMap:
    distances = _initial_distances(graph, start)
    queue = deque([start])

    while queue:
        current = queue.popleft()
        current_distance = distances[current]
        for neighbor, weight in graph.neighbors(current):
            candidate = saturating_add(current_distance, weight)
            if candidate < distances[neighbor]:
                distances[neighbor] = candidate
                queue.append(neighbor)

    return distances


def _dijkstra_distances(graph: GraphStore, start: Hashable) -> DistanceMap:
    distances = _initial_distances(graph, start)
    settled = set()
    # (distance, tiebreak counter, node); node ids need not be orderable
    counter = 0
    heap = [(0, counter, start)]

    while heap:
        current_distance, _, current = heapq.heappop(heap)
        if current in settled:
            continue
        settled.add(current)
        for neighbor, weight in graph.neighbors(current):
            candidate = saturating_add(current_distance, weight)
            if candidate < distances[neighbor]:
                distances[neighbor] = candidate
                counter += 1
                heapq.heappush(heap, (candidate, counter, neighbor))

    return distances
