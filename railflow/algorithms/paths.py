"""Augmenting-path searches over the residual railway graph.

Both searches walk only enabled stations and enabled links, and only hops with
positive residual capacity:

- a forward hop follows a link leaving the current station while
  ``capacity - flow > 0``;
- a cancellation hop walks back along a link entering the current station
  while that link carries ``flow > 0``. The links entering a station are
  exactly the reverse twins of the links leaving it.

The path found is encoded in the stations themselves: every discovered station
records in ``discovered_by`` the hop that reached it.
"""

from __future__ import annotations

from collections import deque
from heapq import heappop, heappush
from typing import Iterator, List, Tuple

from railflow.exceptions import FlowInvariantError
from railflow.model.network import Hop, Network, Station, service_cost


def _residual_hops(network: Network, station: Station) -> Iterator[Tuple[Hop, Station]]:
    """Yield usable hops out of ``station`` with the station each one reaches.

    Forward hops come first, in adjacency insertion order, followed by the
    cancellation hops in the same order.
    """
    links = network.links
    stations = network.stations
    for link_id in station.links:
        link = links[link_id]
        if link.enabled and link.capacity - link.flow > 0:
            yield Hop(link.id, True), stations[link.dst]
    for link_id in station.links:
        incoming = links[links[link_id].reverse]
        if incoming.enabled and incoming.flow > 0:
            yield Hop(incoming.id, False), stations[incoming.src]


def find_augmenting_path(network: Network, src: Station, dst: Station) -> bool:
    """Breadth-first search for an augmenting path from ``src`` to ``dst``.

    Args:
        network: Network holding the current flow.
        src: Source station.
        dst: Destination station.

    Returns:
        True if ``dst`` was reached; the path is then recorded in the
        ``discovered_by`` fields of the stations on it.
    """
    network.reset_search_state()
    if not (src.enabled and dst.enabled):
        return False

    src.visited = True
    queue = deque([src])
    while queue and not dst.visited:
        station = queue.popleft()
        for hop, neighbor in _residual_hops(network, station):
            if neighbor.visited or not neighbor.enabled:
                continue
            neighbor.visited = True
            neighbor.discovered_by = hop
            if neighbor is dst:
                break
            queue.append(neighbor)
    return dst.visited


def find_cheapest_augmenting_path(
    network: Network, src: Station, dst: Station
) -> bool:
    """Priority-first search for the cheapest augmenting path.

    Dijkstra restricted to the residual graph: the key of a station is the
    cumulative per-unit service cost of reaching it. A station is finalized the
    first time it is popped. Forward hops add the cost of their link's service
    class; cancellation hops add nothing so that keys never decrease.

    Returns:
        True if ``dst`` was reached.
    """
    network.reset_search_state()
    if not (src.enabled and dst.enabled):
        return False

    links = network.links
    src.priority_key = 0
    # Entries carry the station id as a tiebreaker; Station objects do not order
    heap: List[Tuple[float, int, Station]] = [(0, src.id, src)]
    while heap:
        key, _, station = heappop(heap)
        if station.visited:
            continue
        station.visited = True
        if station is dst:
            break
        for hop, neighbor in _residual_hops(network, station):
            if neighbor.visited or not neighbor.enabled:
                continue
            step = service_cost(links[hop.link].service) if hop.forward else 0
            candidate = key + step
            if candidate < neighbor.priority_key:
                neighbor.priority_key = candidate
                neighbor.discovered_by = hop
                heappush(heap, (candidate, neighbor.id, neighbor))
    return dst.visited


def trace_path(network: Network, src: Station, dst: Station) -> List[Hop]:
    """Return the hops of the last search's path, ordered from ``src`` to ``dst``.

    Raises:
        FlowInvariantError: If the predecessor chain does not end at ``src``.
    """
    hops: List[Hop] = []
    station = dst
    # A simple path never has more hops than there are stations
    for _ in range(len(network.stations)):
        if station is src:
            hops.reverse()
            return hops
        hop = station.discovered_by
        if hop is None:
            break
        hops.append(hop)
        link = network.links[hop.link]
        station = network.stations[link.src if hop.forward else link.dst]
    if station is src:
        hops.reverse()
        return hops
    raise FlowInvariantError(
        f"Augmenting path to '{dst.name}' does not lead back to '{src.name}'."
    )
