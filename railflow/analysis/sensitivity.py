"""Failure forecasting: segment sensitivity and reduced-connectivity flow.

``rank_affected_by_segment`` measures, for every station around a segment, how
many fewer trains can arrive there once the segment is down.
``calc_max_flow_reduced`` answers a point-to-point max flow on a network with
some stations and segments taken out.
"""

from __future__ import annotations

from collections import deque
from typing import Iterable, List, Optional, Set

from railflow.algorithms.max_flow import calc_max_flow
from railflow.algorithms.super_source import calc_max_inflow
from railflow.algorithms.types import AffectedStation
from railflow.config import FLOW_CONFIG
from railflow.exceptions import FlowInvariantError
from railflow.logging import get_logger
from railflow.model.network import Network, Segment, Station, StationKey

LOGGER = get_logger(__name__)


def segment_neighborhood(network: Network, segment: Segment) -> List[Station]:
    """Stations reachable from either endpoint of ``segment``, in id order.

    Reachability follows enabled links between enabled stations and ignores
    capacities and flows.
    """
    seen: Set[int] = set()
    queue = deque()
    for station_id in segment.endpoints:
        station = network.stations[station_id]
        if station.enabled and station_id not in seen:
            seen.add(station_id)
            queue.append(station)

    while queue:
        station = queue.popleft()
        for link_id in station.links:
            link = network.links[link_id]
            neighbor = network.stations[link.dst]
            if link.enabled and neighbor.enabled and neighbor.id not in seen:
                seen.add(neighbor.id)
                queue.append(neighbor)

    seen.discard(FLOW_CONFIG.super_source_id)
    return [network.stations[station_id] for station_id in sorted(seen)]


def _checked(affected: AffectedStation) -> AffectedStation:
    if affected.drop < 0:
        raise FlowInvariantError(
            f"Inflow to station {affected.station_id} rose from {affected.before} "
            f"to {affected.after} after a segment failure."
        )
    return affected


def segment_inflow_drop(network: Network, segment: Segment, sink: Station) -> int:
    """Trains per period lost at ``sink`` when ``segment`` goes down."""
    before = calc_max_inflow(network, sink)
    with network.segment_disabled(segment):
        after = calc_max_inflow(network, sink)
    return _checked(AffectedStation(sink.id, before, after)).drop


def rank_affected_by_segment(
    network: Network, segment: Segment, k: int
) -> List[AffectedStation]:
    """Stations losing the most inbound capacity when ``segment`` fails.

    For every station in the segment's neighborhood the max inflow is computed
    with the segment up and again with both of its halves disabled. The
    segment is restored before returning, also when a computation raises.

    Args:
        network: Network to analyze.
        segment: Segment whose failure is simulated.
        k: Maximum number of stations to report.

    Returns:
        Up to ``k`` stations with a positive drop, largest drop first (ties by
        station id).

    Raises:
        ValueError: If ``k`` is negative.
        FlowInvariantError: If a station gains inflow from the failure.
    """
    if k < 0:
        raise ValueError(f"k must be >= 0, got {k}.")

    candidates = segment_neighborhood(network, segment)
    before = {station.id: calc_max_inflow(network, station) for station in candidates}
    with network.segment_disabled(segment):
        after = {
            station.id: calc_max_inflow(network, station) for station in candidates
        }

    affected = [
        _checked(AffectedStation(station.id, before[station.id], after[station.id]))
        for station in candidates
    ]
    ranked = sorted(
        (item for item in affected if item.drop > 0),
        key=lambda item: (-item.drop, item.station_id),
    )
    src, dst = segment.endpoints
    LOGGER.debug(
        "Segment %s-%s: %d of %d neighborhood stations affected",
        network.stations[src].name,
        network.stations[dst].name,
        len(ranked),
        len(candidates),
    )
    return ranked[:k]


def calc_max_flow_reduced(
    network: Network,
    src: Station,
    dst: Station,
    removed_stations: Iterable[StationKey] = (),
    removed_segments: Iterable[Segment] = (),
    *,
    disable_incident_segments: Optional[bool] = None,
) -> int:
    """Max flow from src to dst with stations and segments taken out.

    Removed stations are never entered by the path search. When
    ``disable_incident_segments`` is True (default from
    ``FLOW_CONFIG.disable_incident_segments``) their incident segments are
    disabled as well. Every toggle is reverted before returning.

    Raises:
        StationNotFoundError: If a removed station does not exist.
    """
    if disable_incident_segments is None:
        disable_incident_segments = FLOW_CONFIG.disable_incident_segments

    stations = [network.get_station(key) for key in removed_stations]
    segments = list(removed_segments)
    if disable_incident_segments:
        for station in stations:
            segments.extend(network.incident_segments(station))

    with network.elements_disabled(stations, segments):
        flow = calc_max_flow(network, src, dst)
    LOGGER.debug(
        "Reduced flow %s -> %s without %d station(s), %d segment(s): %d",
        src.name,
        dst.name,
        len(stations),
        len(segments),
        flow,
    )
    return flow
