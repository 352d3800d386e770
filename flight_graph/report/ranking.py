"""
Flight Graph Reporting

Caller-side ranking and formatting over complete centrality maps.
"""

from typing import Hashable

from flight_graph.graph.store import GraphStore
from flight_graph.graph.components import connected_components


def top_k(scores: dict[Hashable, float], k: int,
          tie_break: str = "label") -> list[tuple[Hashable, float]]:
    """Highest-scoring k entries, descending.

    tie_break="label": equal scores ordered by str(node).
    tie_break="order": equal scores keep the map's own order.
    """
    if tie_break == "label":
        ranked = sorted(scores.items(), key=lambda item: (-item[1], str(item[0])))
    elif tie_break == "order":
        ranked = sorted(scores.items(), key=lambda item: -item[1])
    else:
        raise ValueError(f"Unknown tie_break: {tie_break}")
    return ranked[:max(k, 0)]


def format_ranking(title: str, ranked: list[tuple[Hashable, float]],
                   precision: int = 6) -> list[str]:
    lines = [title]
    if not ranked:
        lines.append("  (no nodes)")
        return lines
    width = max(len(str(node)) for node, _ in ranked)
    for position, (node, score) in enumerate(ranked, 1):
        lines.append(f"  {position:>3}. {str(node):<{width}}  {score:.{precision}f}")
    return lines


def graph_summary(graph: GraphStore) -> dict:
    components = connected_components(graph)
    return {
        "nodes": graph.node_count,
        "edges": graph.edge_count,
        "directed": graph.directed,
        "components": len(components),
        "largest_component": max((len(c) for c in components), default=0),
    }
