"""Capacity-planning analyses built on the flow engines."""

from railflow.analysis.budget import (
    capacity_by_region,
    rank_by_capacity,
    top_districts,
    top_municipalities,
)
from railflow.analysis.context import AnalysisContext, analyze
from railflow.analysis.network_max import max_flow_pairs
from railflow.analysis.sensitivity import (
    calc_max_flow_reduced,
    rank_affected_by_segment,
    segment_inflow_drop,
    segment_neighborhood,
)

__all__ = [
    "AnalysisContext",
    "analyze",
    "calc_max_flow_reduced",
    "capacity_by_region",
    "max_flow_pairs",
    "rank_affected_by_segment",
    "rank_by_capacity",
    "segment_inflow_drop",
    "segment_neighborhood",
    "top_districts",
    "top_municipalities",
]
