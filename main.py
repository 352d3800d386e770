"""
Flight Graph API Service

FastAPI wrapper around the flight graph analysis core.
Loads a flight report on startup when FLIGHT_GRAPH_CSV is set; graphs can
also be loaded or posted at runtime.
"""

import logging
import os
import time
from contextlib import asynccontextmanager
from typing import Optional, Union

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from flight_graph.core.config import AnalysisConfig
from flight_graph.graph.store import GraphStore, UnknownNodeError, build
from flight_graph.graph.traversal import hop_distance, weighted_distance, is_reachable
from flight_graph.graph.components import connected_components, largest_component
from flight_graph.metrics.centrality import (
    DistanceMode, degree_centrality, closeness_centrality,
    harmonic_centrality, betweenness_centrality,
)
from flight_graph.ingest.records import ColumnSpec, RecordError, load_graph
from flight_graph.report.ranking import top_k, graph_summary

logger = logging.getLogger("flight_graph.service")


# ============================================================
# Global State
# ============================================================

graph: Optional[GraphStore] = None
config: Optional[AnalysisConfig] = None
loaded_from: Optional[str] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the configured flight report on startup."""
    global graph, config, loaded_from

    config = AnalysisConfig.from_env()
    if config.csv_path:
        try:
            started = time.time()
            graph, _ = load_graph(config.csv_path, ColumnSpec.from_config(config),
                                  directed=config.directed)
            loaded_from = config.csv_path
            logger.info(f"Loaded {config.csv_path} in {time.time() - started:.1f}s")
        except (OSError, RecordError) as e:
            logger.error(f"Startup load of {config.csv_path} failed: {e}")
    else:
        logger.info("No FLIGHT_GRAPH_CSV set; waiting for /graph/load")

    if graph is not None:
        logger.info(f"Graph: {graph.node_count} nodes, {graph.edge_count} edges")
    yield
    logger.info("Flight Graph shutting down")


app = FastAPI(
    title="Flight Graph",
    description="Centrality and connectivity analysis over flight networks",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================
# Request/Response Models
# ============================================================

class GraphLoad(BaseModel):
    path: str
    directed: bool = False
    columns: ColumnSpec = Field(default_factory=ColumnSpec)

class EdgeIn(BaseModel):
    origin: str
    destination: str
    weight: int = Field(1, ge=0)

class EdgesPost(BaseModel):
    edges: list[EdgeIn]
    directed: bool = False


def _require_graph() -> GraphStore:
    if graph is None:
        raise HTTPException(409, "No graph loaded")
    return graph


def _json_distance(distance) -> Optional[Union[int, float]]:
    return distance if is_reachable(distance) else None


# ============================================================
# Graph Loading
# ============================================================

@app.get("/health")
async def health():
    return {
        "status": "ok",
        "graph_loaded": graph is not None,
        "source": loaded_from,
    }


@app.post("/graph/load")
async def load_graph_endpoint(req: GraphLoad):
    global graph, loaded_from
    try:
        new_graph, _ = load_graph(req.path, req.columns, directed=req.directed)
    except FileNotFoundError:
        raise HTTPException(404, f"File not found: {req.path}")
    except RecordError as e:
        raise HTTPException(400, str(e))
    graph, loaded_from = new_graph, req.path
    return graph_summary(graph)


@app.post("/graph/edges")
async def post_edges(req: EdgesPost):
    global graph, loaded_from
    graph = build(((e.origin, e.destination, e.weight) for e in req.edges),
                  directed=req.directed)
    loaded_from = "request"
    return graph_summary(graph)


@app.get("/graph/stats")
async def graph_stats():
    return graph_summary(_require_graph())


# ============================================================
# Distances
# ============================================================

@app.get("/distance/{node}")
def distances(node: str, mode: DistanceMode = DistanceMode.HOP):
    g = _require_graph()
    try:
        if mode is DistanceMode.HOP:
            result = hop_distance(g, node)
        else:
            result = weighted_distance(g, node)
    except UnknownNodeError:
        raise HTTPException(404, f"Unknown node: {node}")
    return {
        "start": node,
        "mode": mode.value,
        "distances": {n: _json_distance(d) for n, d in result.items()},
    }


# ============================================================
# Centrality
# ============================================================

METRICS = ("degree", "closeness", "harmonic", "betweenness")


@app.get("/centrality/{metric}")
def centrality(metric: str, top: Optional[int] = None,
               normalized: bool = False,
               distance: Optional[DistanceMode] = None):
    g = _require_graph()
    if metric == "degree":
        scores = degree_centrality(g)
    elif metric == "closeness":
        default = config.closeness_distance if config else DistanceMode.WEIGHTED
        scores = closeness_centrality(g, distance or default)
    elif metric == "harmonic":
        scores = harmonic_centrality(g)
    elif metric == "betweenness":
        scores = betweenness_centrality(g, normalized=normalized)
    else:
        raise HTTPException(404, f"Unknown metric: {metric} (expected one of {', '.join(METRICS)})")

    ranked = top_k(scores, top if top is not None else len(scores))
    return {
        "metric": metric,
        "count": len(scores),
        "scores": [{"node": n, "score": s} for n, s in ranked],
    }


# ============================================================
# Components
# ============================================================

@app.get("/components")
def components():
    comps = connected_components(_require_graph())
    return {
        "count": len(comps),
        "components": [{"size": len(c), "nodes": sorted(c)} for c in comps],
    }


@app.get("/components/largest")
def components_largest():
    comp = largest_component(_require_graph())
    return {"size": len(comp), "nodes": sorted(comp)}


# ============================================================
# Run
# ============================================================

if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8080))
    uvicorn.run("main:app", host="0.0.0.0", port=port, reload=False)
