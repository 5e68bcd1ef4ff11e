"""Maximum-flow computation via iterative augmenting paths.

``calc_max_flow`` is Edmonds-Karp: BFS augmenting paths until none remains.
``calc_max_flow_cost`` runs the same loop over cost-prioritized paths and
accumulates the per-unit service cost of every link the flow travels.
"""

from __future__ import annotations

from time import perf_counter
from typing import Callable, List, Optional

from railflow.algorithms.paths import (
    find_augmenting_path,
    find_cheapest_augmenting_path,
    trace_path,
)
from railflow.algorithms.types import FlowCost
from railflow.config import FLOW_CONFIG
from railflow.exceptions import FlowInvariantError, SearchDeadlineExceeded
from railflow.logging import get_logger
from railflow.model.network import Hop, Network, Station, service_cost

LOGGER = get_logger(__name__)

PathFinder = Callable[[Network, Station, Station], bool]


def path_bottleneck(network: Network, hops: List[Hop]) -> int:
    """Minimum residual capacity along a path.

    Forward hops offer ``capacity - flow``; cancellation hops offer the flow
    they can cancel.
    """
    if not hops:
        raise FlowInvariantError("Cannot compute the bottleneck of an empty path.")
    residuals = []
    for hop in hops:
        link = network.links[hop.link]
        residuals.append(link.capacity - link.flow if hop.forward else link.flow)
    return min(residuals)


def augment(network: Network, hops: List[Hop], amount: int) -> int:
    """Push ``amount`` trains along a path and return the cost change.

    Forward hops raise the link's flow and charge its service cost;
    cancellation hops lower it and refund the same cost, so the running total
    always equals ``sum(flow * cost)`` over all links.
    """
    cost = 0
    for hop in hops:
        link = network.links[hop.link]
        unit = service_cost(link.service)
        if hop.forward:
            link.flow += amount
            cost += unit * amount
        else:
            link.flow -= amount
            cost -= unit * amount
        if not 0 <= link.flow <= link.capacity:
            raise FlowInvariantError(
                f"Link {link.id} flow {link.flow} outside [0, {link.capacity}]."
            )
    return cost


def _run_augmentation(
    network: Network,
    src: Station,
    dst: Station,
    find_path: PathFinder,
    deadline: Optional[float],
) -> FlowCost:
    network.reset_flows()
    if src is dst:
        # Conservation forces the net surplus at a single vertex to zero
        return FlowCost(0, 0)

    started = perf_counter()
    total_flow = 0
    total_cost = 0
    augmentations = 0
    while find_path(network, src, dst):
        hops = trace_path(network, src, dst)
        amount = path_bottleneck(network, hops)
        if amount <= 0:
            raise FlowInvariantError(
                f"Augmenting path {src.name} -> {dst.name} has no residual capacity."
            )
        total_cost += augment(network, hops, amount)
        total_flow += amount
        augmentations += 1
        if deadline is not None and perf_counter() - started > deadline:
            raise SearchDeadlineExceeded(
                f"Flow {src.name} -> {dst.name} exceeded {deadline}s "
                f"after {augmentations} augmentations."
            )

    LOGGER.debug(
        "Flow %s -> %s: %d trains, cost %d, %d augmentations",
        src.name,
        dst.name,
        total_flow,
        total_cost,
        augmentations,
    )
    return FlowCost(total_flow, total_cost)


def calc_max_flow(
    network: Network,
    src: Station,
    dst: Station,
    *,
    deadline: Optional[float] = None,
) -> int:
    """Maximum number of trains that can travel simultaneously from src to dst.

    All link flows are reset first; on return they hold one maximum flow.

    Args:
        network: Network to analyze.
        src: Source station.
        dst: Destination station.
        deadline: Wall-clock budget in seconds; defaults to
            ``FLOW_CONFIG.search_deadline``.

    Returns:
        The max-flow value; 0 when ``src is dst`` or either end is disabled.

    Raises:
        SearchDeadlineExceeded: If the deadline is exceeded.

    Examples:
        >>> net = Network()
        >>> net.add_station(Station(0, "A"))
        True
        >>> net.add_station(Station(1, "B"))
        True
        >>> _ = net.add_link("A", "B", 5)
        >>> calc_max_flow(net, net.get_station("A"), net.get_station("B"))
        5
    """
    if deadline is None:
        deadline = FLOW_CONFIG.search_deadline
    return _run_augmentation(network, src, dst, find_augmenting_path, deadline).flow


def calc_max_flow_cost(
    network: Network,
    src: Station,
    dst: Station,
    *,
    deadline: Optional[float] = None,
) -> FlowCost:
    """Maximum flow from src to dst routed over the cheapest paths first.

    Each augmentation follows the cheapest residual path and charges every
    link it travels at that link's own service rate, so a path mixing service
    classes is not billed at a single path-level price.

    Returns:
        FlowCost with the total flow and its total cost.
    """
    if deadline is None:
        deadline = FLOW_CONFIG.search_deadline
    return _run_augmentation(
        network, src, dst, find_cheapest_augmenting_path, deadline
    )
