"""Tests for Flight Graph graph layer: store, traversal, path counting, components."""

import sys, os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest

from flight_graph.graph.store import GraphStore, Edge, UnknownNodeError, build
from flight_graph.graph.traversal import (
    UNREACHABLE, is_reachable, saturating_add, hop_distance, weighted_distance,
)
from flight_graph.graph.paths import count_shortest_paths
from flight_graph.graph.components import connected_components, largest_component


def triangle() -> GraphStore:
    return build([("A", "B", 5), ("B", "C", 10), ("A", "C", 20)], directed=True)

def diamond() -> GraphStore:
    return build([("A", "B", 1), ("A", "C", 1), ("B", "D", 1), ("C", "D", 1)],
                 directed=True)

# Small mixed-weight network used for method agreement checks
ROUTES = [
    ("JFK", "LHR", 7), ("JFK", "CDG", 3), ("CDG", "LHR", 2), ("LHR", "FRA", 4),
    ("CDG", "FRA", 9), ("FRA", "NRT", 11), ("LHR", "NRT", 20), ("NRT", "SYD", 9),
    ("CDG", "SYD", 40), ("SYD", "JFK", 22), ("FRA", "FRA", 1),
]


# ============================================================
# Store Tests
# ============================================================

def test_add_edge_creates_nodes():
    g = GraphStore()
    g.add_edge("A", "B", 5)
    g.add_edge("B", "C", 10)
    assert g.node_count == 3
    assert g.edge_count == 2
    assert g.nodes() == ["A", "B", "C"]
    assert list(g.neighbors("A")) == [("B", 5)]
    assert list(g.neighbors("C")) == []
    print("  ✓ add_edge (lazy node creation)")

def test_neighbors_unknown_node_is_empty():
    g = triangle()
    assert list(g.neighbors("ZZZ")) == []
    assert list(g.predecessors("ZZZ")) == []
    assert g.out_degree("ZZZ") == 0
    assert "ZZZ" not in g
    print("  ✓ neighbors (unknown node yields nothing)")

def test_undirected_mirrors():
    g = GraphStore(directed=False)
    g.add_edge("A", "B", 5)
    assert g.edge_count == 2
    assert list(g.neighbors("B")) == [("A", 5)]
    assert g.edges(include_mirrors=False) == [Edge("A", "B", 5)]
    assert g.edges()[1] == Edge("B", "A", 5, mirror=True)
    print("  ✓ undirected (mirror stored independently)")

def test_parallel_edges_preserved():
    g = GraphStore()
    g.add_edge("A", "B", 5)
    g.add_edge("A", "B", 5)
    g.add_edge("A", "B", 7)
    assert g.out_degree("A") == 3
    assert g.edge_count == 3
    assert sorted(w for _, w in g.neighbors("A")) == [5, 5, 7]
    print("  ✓ parallel_edges (multigraph, nothing replaced)")

def test_require_node():
    g = triangle()
    g.require_node("A")
    with pytest.raises(UnknownNodeError) as info:
        g.require_node("Q")
    assert isinstance(info.value, KeyError)
    assert "Q" in str(info.value)
    print("  ✓ require_node (UnknownNodeError)")

def test_isolated_node():
    g = GraphStore()
    g.add_node("solo")
    g.add_node("solo")
    assert g.node_count == 1
    assert g.edge_count == 0
    print("  ✓ add_node (idempotent)")


# ============================================================
# Traversal Tests
# ============================================================

def test_hop_distance_ignores_weight():
    d = hop_distance(triangle(), "A")
    assert d == {"A": 0, "B": 1, "C": 1}
    print("  ✓ hop_distance (direct edge is one hop)")

def test_weighted_distance_relaxes():
    g = triangle()
    for method in ("relax", "dijkstra"):
        d = weighted_distance(g, "A", method=method)
        assert d == {"A": 0, "B": 5, "C": 15}
    print("  ✓ weighted_distance (A->B->C beats A->C)")

def test_unreachable_nodes():
    g = triangle()
    d = hop_distance(g, "C")
    assert d["C"] == 0
    assert d["A"] == UNREACHABLE
    assert not is_reachable(d["B"])
    w = weighted_distance(g, "B")
    assert w == {"A": UNREACHABLE, "B": 0, "C": 10}
    print("  ✓ unreachable (every known node present)")

def test_start_is_zero_everywhere():
    g = build(ROUTES)
    for node in g.nodes():
        assert hop_distance(g, node)[node] == 0
        assert weighted_distance(g, node)[node] == 0
    print("  ✓ start distance is 0")

def test_unit_weights_agree():
    g = build([(s, t, 1) for s, t, _ in ROUTES])
    for node in g.nodes():
        assert hop_distance(g, node) == weighted_distance(g, node)
    print("  ✓ hop == weighted under unit weights")

def test_relax_matches_dijkstra():
    for directed in (True, False):
        g = build(ROUTES, directed=directed)
        for node in g.nodes():
            assert (weighted_distance(g, node, method="relax")
                    == weighted_distance(g, node, method="dijkstra"))
    d = weighted_distance(build(ROUTES), "JFK")
    assert d["LHR"] == 5       # JFK->CDG->LHR
    assert d["SYD"] == 29      # JFK->CDG->LHR->FRA->NRT->SYD
    print("  ✓ relaxation agrees with dijkstra")

def test_zero_weight_edges():
    g = build([("A", "B", 0), ("B", "C", 0)])
    assert weighted_distance(g, "A") == {"A": 0, "B": 0, "C": 0}
    print("  ✓ zero-weight edges")

def test_saturating_add():
    assert saturating_add(3, 4) == 7
    assert saturating_add(UNREACHABLE, 5) == UNREACHABLE
    assert saturating_add(5, UNREACHABLE) == UNREACHABLE
    print("  ✓ saturating_add")

def test_traversal_unknown_start():
    g = triangle()
    for fn in (hop_distance, weighted_distance, count_shortest_paths):
        with pytest.raises(UnknownNodeError):
            fn(g, "nowhere")
    with pytest.raises(ValueError):
        weighted_distance(g, "A", method="bellman")
    print("  ✓ unknown start raises")


# ============================================================
# Path Counting Tests
# ============================================================

def test_diamond_path_counts():
    counts = count_shortest_paths(diamond(), "A")
    assert counts.distances == {"A": 0, "B": 1, "C": 1, "D": 2}
    assert counts.path_counts == {"A": 1, "B": 1, "C": 1, "D": 2}
    assert counts.predecessors["D"] == ["B", "C"]
    assert counts.predecessors["A"] == []
    assert counts.order == ["A", "B", "C", "D"]
    print("  ✓ path_counts (diamond has 2 shortest paths)")

def test_through_counts_table():
    table = count_shortest_paths(diamond(), "A").through_counts()
    assert table["D"] == {"B": 1, "C": 1}
    assert table["B"] == {}
    assert "A" not in table
    chain = build([("A", "B", 1), ("B", "C", 1), ("C", "D", 1)])
    assert count_shortest_paths(chain, "A").through_counts()["D"] == {"B": 1, "C": 1}
    print("  ✓ through_counts (per-target intermediate table)")

def test_dependencies_match_table():
    g = build(ROUTES, directed=False)
    for source in g.nodes():
        counts = count_shortest_paths(g, source)
        expected = {node: 0.0 for node in g.nodes()}
        for target, row in counts.through_counts().items():
            for node, through in row.items():
                expected[node] += through / counts.path_counts[target]
        assert counts.dependencies() == pytest.approx(expected)
    print("  ✓ dependencies == summed through_counts")

def test_parallel_edges_do_not_multiply_paths():
    g = build([("A", "B", 1), ("A", "B", 3), ("B", "C", 1)])
    counts = count_shortest_paths(g, "A")
    assert counts.path_counts["C"] == 1
    assert counts.predecessors["B"] == ["A"]
    print("  ✓ parallel edges count once per path")

def test_unreachable_contributes_nothing():
    g = build([("A", "B", 1), ("C", "A", 1)])
    counts = count_shortest_paths(g, "A")
    assert counts.path_counts["C"] == 0
    assert counts.predecessors["C"] == []
    assert "C" not in counts.through_counts()
    assert counts.dependencies()["C"] == 0.0
    print("  ✓ unreachable nodes contribute nothing")


# ============================================================
# Component Tests
# ============================================================

def test_two_components():
    g = build([("A", "B", 1), ("B", "C", 1), ("D", "E", 1)], directed=False)
    comps = connected_components(g)
    assert len(comps) == 2
    assert sorted(len(c) for c in comps) == [2, 3]
    assert largest_component(g) == {"A", "B", "C"}
    print("  ✓ two components (sizes 3 and 2)")

def test_components_partition():
    g = build(ROUTES + [("X", "Y", 1), ("Z", "Z", 1)], directed=False)
    comps = connected_components(g)
    seen = set()
    for comp in comps:
        assert not (comp & seen)
        seen |= comp
    assert seen == set(g.nodes())
    largest = largest_component(g)
    assert largest in comps
    assert len(largest) == max(len(c) for c in comps)
    print("  ✓ components partition all nodes exactly once")

def test_directed_components_ignore_direction():
    g = build([("A", "B", 1), ("C", "B", 1)], directed=True)
    assert connected_components(g) == [{"A", "B", "C"}]
    print("  ✓ directed store gives weak components")

def test_largest_component_tie_first_found():
    g = build([("A", "B", 1), ("C", "D", 1)], directed=False)
    assert largest_component(g) == {"A", "B"}
    print("  ✓ largest_component (first found wins ties)")

def test_empty_graph_components():
    g = GraphStore()
    assert connected_components(g) == []
    assert largest_component(g) == set()
    print("  ✓ empty graph components")


if __name__ == "__main__":
    print("Testing Graph layer...\n")

    print("Store:")
    test_add_edge_creates_nodes()
    test_neighbors_unknown_node_is_empty()
    test_undirected_mirrors()
    test_parallel_edges_preserved()
    test_require_node()
    test_isolated_node()

    print("\nTraversal:")
    test_hop_distance_ignores_weight()
    test_weighted_distance_relaxes()
    test_unreachable_nodes()
    test_start_is_zero_everywhere()
    test_unit_weights_agree()
    test_relax_matches_dijkstra()
    test_zero_weight_edges()
    test_saturating_add()
    test_traversal_unknown_start()

    print("\nPath Counting:")
    test_diamond_path_counts()
    test_through_counts_table()
    test_dependencies_match_table()
    test_parallel_edges_do_not_multiply_paths()
    test_unreachable_contributes_nothing()

    print("\nComponents:")
    test_two_components()
    test_components_partition()
    test_directed_components_ignore_direction()
    test_largest_component_tie_first_found()
    test_empty_graph_components()

    print("\n" + "=" * 50)
    print("ALL GRAPH TESTS PASSED ✓")
    print("=" * 50)
