"""
Flight Graph Centrality Metrics

Pure functions from a GraphStore to a score for every known node:
- Degree: stored outgoing adjacency entries
- Closeness: (reachable - 1) / total distance to reachable nodes
- Harmonic: sum of 1/d over reachable nodes at hop distance d > 0
- Betweenness: share of ordered-pair shortest paths through a node

All-pairs metrics run one traversal per source. Each traversal only
reads the store and writes its own result, so sources are independent.
"""

from enum import Enum
from typing import Hashable

from flight_graph.graph.store import GraphStore
from flight_graph.graph.traversal import hop_distance, weighted_distance, is_reachable
from flight_graph.graph.paths import count_shortest_paths


CentralityMap = dict[Hashable, float]


class DistanceMode(Enum):
    WEIGHTED = "weighted"
    HOP = "hop"


def degree_centrality(graph: GraphStore) -> CentralityMap:
    """Out-degree per node, parallel and mirror entries included.

    Sums to graph.edge_count.
    """
    return {node: float(graph.out_degree(node)) for node in graph.nodes()}


def closeness_centrality(graph: GraphStore,
                         distance: DistanceMode = DistanceMode.WEIGHTED) -> CentralityMap:
    """Closeness over reachable nodes only.

    Score is (reachable_count - 1) / total_distance, where reachable_count
    includes the node itself. Nodes that reach nothing, or reach only at
    zero total distance, score 0.
    """
    distance = DistanceMode(distance)
    centrality = {}

    for node in graph.nodes():
        if distance is DistanceMode.HOP:
            distances = hop_distance(graph, node)
        else:
            distances = weighted_distance(graph, node)
        finite = [d for d in distances.values() if is_reachable(d)]
        total_distance = sum(finite)
        reachable_count = len(finite)
        if reachable_count > 1 and total_distance > 0:
            centrality[node] = (reachable_count - 1) / total_distance
        else:
            centrality[node] = 0.0

    return centrality


def harmonic_centrality(graph: GraphStore) -> CentralityMap:
    """Sum of reciprocal hop distances to every node reachable from each node."""
    centrality = {}
    for node in graph.nodes():
        distances = hop_distance(graph, node)
        centrality[node] = sum((1.0 / d for d in distances.values()
                                if is_reachable(d) and d > 0), 0.0)
    return centrality


def betweenness_centrality(graph: GraphStore, normalized: bool = False) -> CentralityMap:
    """Unweighted betweenness summed over every ordered (source, target) pair.

    For each source, every intermediate node v earns
    paths_through(v, target) / total_paths(target) per reachable target.
    normalized=True divides by (n-1)(n-2).
    """
    nodes = graph.nodes()
    centrality = {node: 0.0 for node in nodes}

    for source in nodes:
        counts = count_shortest_paths(graph, source)
        for node, dependency in counts.dependencies().items():
            centrality[node] += dependency

    n = len(nodes)
    if normalized and n > 2:
        scale = 1.0 / ((n - 1) * (n - 2))
        for node in centrality:
            centrality[node] *= scale

    return centrality
