"""Network-wide search for the station pairs with the largest max flow."""

from __future__ import annotations

from typing import List, Tuple

from railflow.algorithms.max_flow import calc_max_flow
from railflow.algorithms.types import MaxFlowPairs
from railflow.logging import get_logger
from railflow.model.network import Network, Station

LOGGER = get_logger(__name__)


def _ordered_by_bound(network: Network) -> List[Tuple[int, Station]]:
    """Stations with their flow upper bound, most promising first."""
    bounded = [
        (network.max_possible_flow(station), station)
        for station in network.stations.values()
        if station.enabled
    ]
    bounded.sort(key=lambda item: (-item[0], item[1].id))
    return bounded


def max_flow_pairs(network: Network) -> MaxFlowPairs:
    """Find every station pair achieving the network's largest max flow.

    Stations are visited in descending order of ``max_possible_flow``, an upper
    bound on any flow through them. A pair is only evaluated while both bounds
    are at least the best flow found so far; because the order is descending,
    the first bound to fall short ends the corresponding loop. Ties are kept,
    and the list restarts on a strict improvement. Pairs carrying no flow are
    never reported.

    Returns:
        MaxFlowPairs with the best flow and its pairs as ``(id, id)`` tuples.
    """
    ordered = _ordered_by_bound(network)
    best = 0
    pairs: List[Tuple[int, int]] = []
    evaluated = 0

    for i, (bound_i, station_i) in enumerate(ordered):
        if bound_i < best or bound_i == 0:
            break
        for bound_j, station_j in ordered[i + 1 :]:
            if bound_j < best or bound_j == 0:
                break
            flow = calc_max_flow(network, station_i, station_j)
            evaluated += 1
            if flow > best:
                best = flow
                pairs = [(station_i.id, station_j.id)]
            elif flow == best and flow > 0:
                pairs.append((station_i.id, station_j.id))

    LOGGER.debug(
        "Network max flow %d over %d pair(s); %d pair(s) evaluated",
        best,
        len(pairs),
        evaluated,
    )
    return MaxFlowPairs(best, pairs)
