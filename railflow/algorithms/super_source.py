"""Super-source aggregation for multi-source max flow.

The number of trains that can arrive at a station from every entry point of
the network is a single-source max flow once a synthetic station feeds all the
entry points. Entry points are the terminal stations: those touched by exactly
one segment.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterable, Iterator, List, Optional

from railflow.algorithms.max_flow import calc_max_flow
from railflow.config import FLOW_CONFIG
from railflow.exceptions import InvalidMutationStateError
from railflow.logging import get_logger
from railflow.model.network import Network, ServiceClass, Station

LOGGER = get_logger(__name__)


def terminal_stations(
    network: Network, exclude: Optional[Station] = None
) -> List[Station]:
    """Stations touched by exactly one segment, in id order.

    The degree counts every segment whether or not it is enabled, so a segment
    failure does not turn its neighbors into new entry points.

    Args:
        network: Network to scan.
        exclude: Station left out of the result (typically the sink).
    """
    return [
        station
        for station in sorted(network.stations.values(), key=lambda s: s.id)
        if len(station.links) == 1
        and station is not exclude
        and station.id != FLOW_CONFIG.super_source_id
    ]


@contextmanager
def super_source(network: Network, sources: Iterable[Station]) -> Iterator[Station]:
    """Temporarily add a synthetic station feeding every station in ``sources``.

    Each fan-out segment is STANDARD with ``FLOW_CONFIG.super_source_capacity``.
    On exit the synthetic station, its links and their reverse twins are
    removed from the link index, from every neighbor's adjacency list and from
    the station indexes, even if the block raises.

    Raises:
        InvalidMutationStateError: If a super-source is already present.
    """
    if network.find_station(FLOW_CONFIG.super_source_id) is not None:
        raise InvalidMutationStateError("A super-source is already present.")
    if network.find_station(FLOW_CONFIG.super_source_name) is not None:
        raise InvalidMutationStateError(
            f"Station name '{FLOW_CONFIG.super_source_name}' is reserved."
        )

    station = Station(FLOW_CONFIG.super_source_id, FLOW_CONFIG.super_source_name)
    network._register_station(station)
    try:
        for source in sources:
            network.add_link(
                station.id,
                source.id,
                FLOW_CONFIG.super_source_capacity,
                ServiceClass.STANDARD,
            )
        yield station
    finally:
        network.remove_station(station.id)


def calc_max_inflow(network: Network, sink: Station) -> int:
    """Maximum number of trains that can arrive at ``sink`` simultaneously.

    Every terminal station other than the sink acts as a source.

    Returns:
        The max flow into ``sink``; 0 when the network has no other terminal.
    """
    sources = terminal_stations(network, exclude=sink)
    if not sources:
        LOGGER.debug("No terminal stations feed '%s'", sink.name)
        return 0
    with super_source(network, sources) as source:
        flow = calc_max_flow(network, source, sink)
    LOGGER.debug(
        "Inflow to '%s' from %d terminals: %d", sink.name, len(sources), flow
    )
    return flow
