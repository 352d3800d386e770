#!/usr/bin/env python3
"""
Flight Graph CLI
================
Analyse a flight report from the command line.

Example usage::

    python analyze.py International_Report_Departures.csv
    python analyze.py flights.csv --directed --top 20 --metrics degree harmonic
    python analyze.py flights.csv --origin ORIGIN --destination DEST --weight PASSENGERS

Defaults come from FLIGHT_GRAPH_* environment variables.
"""

import argparse
import logging
import sys

from pydantic import ValidationError

from flight_graph.core.config import AnalysisConfig
from flight_graph.graph.store import GraphStore
from flight_graph.metrics.centrality import (
    DistanceMode, degree_centrality, closeness_centrality,
    harmonic_centrality, betweenness_centrality,
)
from flight_graph.ingest.records import ColumnSpec, RecordError, load_graph
from flight_graph.report.ranking import top_k, format_ranking, graph_summary

logger = logging.getLogger("flight_graph.cli")

METRICS = ("degree", "closeness", "harmonic", "betweenness")


def parse_arguments(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Centrality analysis of a flight network")
    parser.add_argument("csv", nargs="?", help="flight report CSV (default: $FLIGHT_GRAPH_CSV)")
    parser.add_argument("--directed", action=argparse.BooleanOptionalAction, default=None,
                        help="keep flight direction (default: undirected)")
    parser.add_argument("--top", type=int, help="rows per ranking")
    parser.add_argument("--metrics", nargs="+", choices=METRICS,
                        default=["closeness", "betweenness"])
    parser.add_argument("--closeness-distance", choices=[m.value for m in DistanceMode])
    parser.add_argument("--normalized", action="store_true",
                        help="normalize betweenness by (n-1)(n-2)")
    parser.add_argument("--origin", help="origin column name or position")
    parser.add_argument("--destination", help="destination column name or position")
    parser.add_argument("--weight", help="flight count column name or position")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def _column(value):
    if value is None:
        return None
    return int(value) if value.isdigit() else value


def resolve_config(args: argparse.Namespace) -> AnalysisConfig:
    """Environment defaults overridden by command-line flags."""
    overrides = {
        "csv_path": args.csv,
        "directed": args.directed,
        "top_k": args.top,
        "closeness_distance": args.closeness_distance,
        "origin_column": _column(args.origin),
        "destination_column": _column(args.destination),
        "weight_column": _column(args.weight),
    }
    base = AnalysisConfig.from_env()
    merged = base.model_dump()
    merged.update({k: v for k, v in overrides.items() if v is not None})
    return AnalysisConfig(**merged)


def compute(graph: GraphStore, metric: str, config: AnalysisConfig,
            normalized: bool = False) -> dict:
    if metric == "degree":
        return degree_centrality(graph)
    if metric == "closeness":
        return closeness_centrality(graph, config.closeness_distance)
    if metric == "harmonic":
        return harmonic_centrality(graph)
    return betweenness_centrality(graph, normalized=normalized)


def main(argv=None) -> int:
    args = parse_arguments(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        config = resolve_config(args)
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1
    if not config.csv_path:
        print("No CSV given (argument or FLIGHT_GRAPH_CSV)", file=sys.stderr)
        return 1

    try:
        graph, _ = load_graph(config.csv_path, ColumnSpec.from_config(config),
                              directed=config.directed)
    except FileNotFoundError:
        print(f"File not found: {config.csv_path}", file=sys.stderr)
        return 1
    except RecordError as e:
        print(f"Bad records in {config.csv_path}: {e}", file=sys.stderr)
        return 1

    summary = graph_summary(graph)
    print(f"Nodes: {summary['nodes']}, Edges: {summary['edges']}, "
          f"Components: {summary['components']}, "
          f"Largest component: {summary['largest_component']}")

    for metric in args.metrics:
        logger.info(f"Computing {metric} centrality")
        scores = compute(graph, metric, config, normalized=args.normalized)
        ranked = top_k(scores, config.top_k)
        print()
        print("\n".join(format_ranking(f"{metric.capitalize()} centrality (top {config.top_k})",
                                       ranked)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
