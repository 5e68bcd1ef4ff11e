"""NetworkX export of a railway network.

Example:
    >>> import networkx as nx
    >>> from railflow.lib.nx import to_networkx
    >>>
    >>> G = to_networkx(network)
    >>> nx.maximum_flow_value(G, "Porto Campanha", "Lisboa Oriente")
"""

from __future__ import annotations

import networkx as nx

from railflow.config import FLOW_CONFIG
from railflow.model.network import Network, service_cost


def to_networkx(network: Network, *, include_disabled: bool = False) -> nx.DiGraph:
    """Convert a network to a ``networkx.DiGraph`` keyed by station name.

    Parallel links between the same ordered pair are merged: ``capacity`` is
    their sum, ``service`` and ``cost`` describe the cheapest of them. Station
    metadata is copied to node attributes. The super-source, if present, is
    left out.

    Args:
        network: Network to convert.
        include_disabled: Keep disabled stations and links.

    Returns:
        A directed graph with one edge per ordered station pair.
    """
    G = nx.DiGraph()
    for station in network.stations.values():
        if station.id == FLOW_CONFIG.super_source_id:
            continue
        if not (station.enabled or include_disabled):
            continue
        G.add_node(
            station.name,
            id=station.id,
            district=station.district,
            municipality=station.municipality,
            township=station.township,
        )

    for link in network.links.values():
        if not (link.enabled or include_disabled):
            continue
        src = network.stations[link.src].name
        dst = network.stations[link.dst].name
        if src not in G or dst not in G:
            continue
        cost = service_cost(link.service)
        if G.has_edge(src, dst):
            data = G[src][dst]
            data["capacity"] += link.capacity
            if cost < data["cost"]:
                data["cost"] = cost
                data["service"] = link.service.value
        else:
            G.add_edge(
                src, dst, capacity=link.capacity, cost=cost, service=link.service.value
            )
    return G


def connected_groups(network: Network) -> list[list[str]]:
    """Groups of station names joined by enabled segments, largest first."""
    G = to_networkx(network).to_undirected()
    groups = [sorted(group) for group in nx.connected_components(G)]
    groups.sort(key=lambda group: (-len(group), group[0]))
    return groups
