"""
Flight Graph Configuration

Settings come from environment variables with defaults, validated by
pydantic. The service and the CLI both start from AnalysisConfig.
"""

import os
from typing import Optional, Union

from pydantic import BaseModel, Field

from flight_graph.metrics.centrality import DistanceMode


# Column layout of International_Report_Departures.csv
DEFAULT_ORIGIN_COLUMN = "usg_apt"
DEFAULT_DESTINATION_COLUMN = "fg_apt"
DEFAULT_WEIGHT_COLUMN = "Total"


def _column(value: Optional[str], default: str) -> Union[str, int]:
    """Column names that are all digits are positions."""
    if value is None or value == "":
        return default
    return int(value) if value.isdigit() else value


class AnalysisConfig(BaseModel):
    csv_path: Optional[str] = None
    directed: bool = False
    top_k: int = Field(10, ge=1)
    closeness_distance: DistanceMode = DistanceMode.WEIGHTED
    origin_column: Union[int, str] = DEFAULT_ORIGIN_COLUMN
    destination_column: Union[int, str] = DEFAULT_DESTINATION_COLUMN
    weight_column: Union[int, str] = DEFAULT_WEIGHT_COLUMN
    default_weight: int = Field(1, ge=0)
    port: int = 8080

    @classmethod
    def from_env(cls, environ: Optional[dict] = None) -> "AnalysisConfig":
        """Read FLIGHT_GRAPH_* variables (and PORT)."""
        env = os.environ if environ is None else environ
        return cls(
            csv_path=env.get("FLIGHT_GRAPH_CSV") or None,
            directed=env.get("FLIGHT_GRAPH_DIRECTED", "false"),
            top_k=env.get("FLIGHT_GRAPH_TOP_K", "10"),
            closeness_distance=env.get("FLIGHT_GRAPH_CLOSENESS_DISTANCE", "weighted"),
            origin_column=_column(env.get("FLIGHT_GRAPH_ORIGIN_COLUMN"),
                                  DEFAULT_ORIGIN_COLUMN),
            destination_column=_column(env.get("FLIGHT_GRAPH_DESTINATION_COLUMN"),
                                       DEFAULT_DESTINATION_COLUMN),
            weight_column=_column(env.get("FLIGHT_GRAPH_WEIGHT_COLUMN"),
                                  DEFAULT_WEIGHT_COLUMN),
            default_weight=env.get("FLIGHT_GRAPH_DEFAULT_WEIGHT", "1"),
            port=env.get("PORT", "8080"),
        )
