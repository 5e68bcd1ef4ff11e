"""Flow algorithms over the railway network."""

from railflow.algorithms.max_flow import calc_max_flow, calc_max_flow_cost
from railflow.algorithms.paths import (
    find_augmenting_path,
    find_cheapest_augmenting_path,
    trace_path,
)
from railflow.algorithms.super_source import (
    calc_max_inflow,
    super_source,
    terminal_stations,
)
from railflow.algorithms.types import AffectedStation, FlowCost, MaxFlowPairs

__all__ = [
    "AffectedStation",
    "FlowCost",
    "MaxFlowPairs",
    "calc_max_flow",
    "calc_max_flow_cost",
    "calc_max_inflow",
    "find_augmenting_path",
    "find_cheapest_augmenting_path",
    "super_source",
    "terminal_stations",
    "trace_path",
]
