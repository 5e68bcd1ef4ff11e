"""Budget allocation: regions ranked by the track capacity they host."""

from __future__ import annotations

from typing import Dict, List, Tuple

from railflow.config import FLOW_CONFIG
from railflow.model.network import Network

REGION_ATTRIBUTES = ("district", "municipality", "township")


def capacity_by_region(network: Network, attr: str) -> Dict[str, int]:
    """Total segment capacity per region.

    A segment inside one region counts once for it; a segment joining two
    regions counts in full for both. Regions without segments report 0.

    Args:
        network: Network to scan.
        attr: Station attribute naming the region, one of
            ``district``, ``municipality`` or ``township``.

    Raises:
        ValueError: If ``attr`` is not a region attribute.
    """
    if attr not in REGION_ATTRIBUTES:
        raise ValueError(
            f"Unknown region attribute '{attr}'; expected one of {REGION_ATTRIBUTES}."
        )

    totals: Dict[str, int] = {}
    for station in network.stations.values():
        if station.id != FLOW_CONFIG.super_source_id:
            totals.setdefault(getattr(station, attr), 0)

    for segment in network.segments():
        src, dst = segment.endpoints
        if FLOW_CONFIG.super_source_id in (src, dst):
            continue
        regions = {
            getattr(network.stations[src], attr),
            getattr(network.stations[dst], attr),
        }
        for region in regions:
            totals[region] += segment.capacity
    return totals


def rank_by_capacity(network: Network, attr: str, k: int) -> List[Tuple[str, int]]:
    """Top ``k`` regions by hosted capacity, largest first (ties by name)."""
    if k < 0:
        raise ValueError(f"k must be >= 0, got {k}.")
    totals = capacity_by_region(network, attr)
    ranked = sorted(totals.items(), key=lambda item: (-item[1], item[0]))
    return ranked[:k]


def top_municipalities(network: Network, k: int) -> List[Tuple[str, int]]:
    return rank_by_capacity(network, "municipality", k)


def top_districts(network: Network, k: int) -> List[Tuple[str, int]]:
    return rank_by_capacity(network, "district", k)
