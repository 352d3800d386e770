"""
Flight Graph Record Ingest

Turns a delimited flight report into (origin, destination, weight)
triples for the graph store.

Column selection, weight coercion and the default-on-parse-failure
policy all live here, not in the graph core:
  - rows missing an origin or destination are dropped (logged)
  - an unparseable flight count becomes default_weight (1)
  - a negative flight count is rejected with RecordError
"""

import logging
from typing import Hashable, Iterable, Iterator, Optional, Union

import numpy as np
import pandas as pd
from pydantic import BaseModel, Field

from flight_graph.core.config import (
    AnalysisConfig, DEFAULT_ORIGIN_COLUMN, DEFAULT_DESTINATION_COLUMN, DEFAULT_WEIGHT_COLUMN,
)
from flight_graph.graph.store import GraphStore, build

logger = logging.getLogger("flight_graph.ingest")

Record = tuple[str, str, int]


class RecordError(ValueError):
    """A record source that cannot be turned into valid edges."""


class ColumnSpec(BaseModel):
    """Which columns hold origin, destination and weight.

    Each is a header name or a zero-based position. weight=None gives
    every record default_weight.
    """
    origin: Union[int, str] = DEFAULT_ORIGIN_COLUMN
    destination: Union[int, str] = DEFAULT_DESTINATION_COLUMN
    weight: Optional[Union[int, str]] = DEFAULT_WEIGHT_COLUMN
    default_weight: int = Field(1, ge=0)

    @classmethod
    def from_config(cls, config: AnalysisConfig) -> "ColumnSpec":
        return cls(
            origin=config.origin_column,
            destination=config.destination_column,
            weight=config.weight_column,
            default_weight=config.default_weight,
        )


def _resolve_column(frame: pd.DataFrame, column: Union[int, str], role: str) -> str:
    if isinstance(column, int):
        if not 0 <= column < len(frame.columns):
            raise RecordError(f"Missing {role} column at position {column} "
                              f"({len(frame.columns)} columns)")
        return frame.columns[column]
    if column not in frame.columns:
        raise RecordError(f"Missing {role} column {column!r}")
    return column


def read_records(source, columns: Optional[ColumnSpec] = None) -> Iterator[Record]:
    """Read (origin, destination, weight) triples from a CSV path or buffer.

    Raises RecordError before any triple is produced.
    """
    columns = columns or ColumnSpec()
    try:
        frame = pd.read_csv(source, dtype=str, skipinitialspace=True)
    except (pd.errors.EmptyDataError, pd.errors.ParserError) as e:
        raise RecordError(f"Unreadable records in {getattr(source, 'name', source)}: {e}") from e

    origin_col = _resolve_column(frame, columns.origin, "origin")
    destination_col = _resolve_column(frame, columns.destination, "destination")

    origins = frame[origin_col].str.strip()
    destinations = frame[destination_col].str.strip()
    keep = origins.notna() & destinations.notna() & (origins != "") & (destinations != "")
    dropped = int((~keep).sum())
    if dropped:
        logger.warning(f"Dropped {dropped} of {len(frame)} records missing origin or destination")

    if columns.weight is None:
        weights = pd.Series(columns.default_weight, index=frame.index)
    else:
        weight_col = _resolve_column(frame, columns.weight, "weight")
        weights = pd.to_numeric(frame[weight_col], errors="coerce")
        # only finite whole numbers count as flight counts
        weights = weights.where(np.isfinite(weights) & (weights == weights.round()))
        defaulted = int((weights.isna() & keep).sum())
        if defaulted:
            logger.info(f"Defaulted {defaulted} unparseable weights to {columns.default_weight}")
        weights = weights.fillna(columns.default_weight)

    origins, destinations, weights = origins[keep], destinations[keep], weights[keep]
    negative = weights < 0
    if negative.any():
        first = negative.idxmax()
        raise RecordError(f"Negative weight {weights[first]} in record {first} "
                          f"({origins[first]} -> {destinations[first]})")

    logger.info(f"Read {len(origins)} records from {getattr(source, 'name', source)}")
    return ((o, d, int(w)) for o, d, w in zip(origins, destinations, weights))


class NodeIndex:
    """Bidirectional label <-> dense integer index map.

    Indexes are handed out in first-appearance order starting at 0.
    """

    def __init__(self):
        self._index: dict[Hashable, int] = {}
        self._labels: list[Hashable] = []

    def index_of(self, label: Hashable) -> int:
        """Index for label, assigning the next one on first sight."""
        index = self._index.get(label)
        if index is None:
            index = len(self._labels)
            self._index[label] = index
            self._labels.append(label)
        return index

    def label_of(self, index: int) -> Hashable:
        return self._labels[index]

    def encode(self, records: Iterable[Record]) -> Iterator[tuple[int, int, int]]:
        for origin, destination, weight in records:
            yield self.index_of(origin), self.index_of(destination), weight

    def decode(self, mapping: dict) -> dict:
        """Re-key an index-keyed result map by label."""
        return {self._labels[index]: value for index, value in mapping.items()}

    def __len__(self) -> int:
        return len(self._labels)

    def __contains__(self, label: Hashable) -> bool:
        return label in self._index


def load_graph(source, columns: Optional[ColumnSpec] = None,
               directed: bool = False,
               use_index: bool = False) -> tuple[GraphStore, Optional[NodeIndex]]:
    """Read a flight report and build its graph.

    With use_index=True the graph is keyed by dense integers and the
    NodeIndex needed to translate results back is returned alongside.
    """
    records = read_records(source, columns)
    index = None
    if use_index:
        index = NodeIndex()
        records = index.encode(records)
    graph = build(records, directed=directed)
    logger.info(f"Loaded {'directed' if directed else 'undirected'} graph: "
                f"{graph.node_count} nodes, {graph.edge_count} edges")
    return graph, index
