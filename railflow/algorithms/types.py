"""Result containers returned by the flow engines and analyses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, NamedTuple, Tuple


class FlowCost(NamedTuple):
    """Total flow of a cost-aware computation and what it costs."""

    flow: int
    cost: int


@dataclass(frozen=True)
class MaxFlowPairs:
    """Best station pairs of the network-wide search.

    Attributes:
        flow: Largest max-flow value found between any two stations.
        pairs: Every ``(station_id, station_id)`` pair achieving ``flow``, in
            search order.
    """

    flow: int
    pairs: List[Tuple[int, int]] = field(default_factory=list)


@dataclass(frozen=True)
class AffectedStation:
    """Inbound capacity lost by one station when a segment goes down.

    Attributes:
        station_id: Id of the affected station.
        before: Max inflow with the segment up.
        after: Max inflow with the segment down.
    """

    station_id: int
    before: int
    after: int

    @property
    def drop(self) -> int:
        return self.before - self.after
