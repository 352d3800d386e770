"""
Flight Graph Connected Components

Undirected reachability: edge direction is ignored, so a directed store
yields its weakly connected components.
"""

from typing import Hashable

from flight_graph.graph.store import GraphStore


def connected_components(graph: GraphStore) -> list[set[Hashable]]:
    """Partition all nodes into components, in order of first seed."""
    visited = set()
    components = []

    for seed in graph.nodes():
        if seed in visited:
            continue
        visited.add(seed)
        component = {seed}
        stack = [seed]
        while stack:
            current = stack.pop()
            for neighbor, _ in graph.neighbors(current):
                if neighbor not in visited:
                    visited.add(neighbor)
                    component.add(neighbor)
                    stack.append(neighbor)
            if graph.directed:
                for neighbor, _ in graph.predecessors(current):
                    if neighbor not in visited:
                        visited.add(neighbor)
                        component.add(neighbor)
                        stack.append(neighbor)
        components.append(component)

    return components


def largest_component(graph: GraphStore) -> set[Hashable]:
    """The component with the most nodes; the first one found wins ties.
    Empty set for an empty graph."""
    largest = set()
    for component in connected_components(graph):
        if len(component) > len(largest):
            largest = component
    return largest
