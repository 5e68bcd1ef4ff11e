"""AnalysisContext: the query API for railway capacity planning.

The flow engines keep their working state (flows, search marks, temporary
super-sources and enable/disable toggles) inside the Network itself, so two
queries running at once against one Network would corrupt each other. The
context serializes every query on a per-network lock and resolves station
names or ids at the boundary.

Usage:
    from railflow import analyze

    ctx = analyze(network)
    ctx.max_flow("Porto Campanha", "Lisboa Oriente")
    ctx.rank_affected_by_segment("Entroncamento", "Santarem", k=5)
"""

from __future__ import annotations

import threading
import weakref
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from railflow.algorithms.max_flow import calc_max_flow, calc_max_flow_cost
from railflow.algorithms.super_source import calc_max_inflow
from railflow.algorithms.types import AffectedStation, FlowCost, MaxFlowPairs
from railflow.analysis.budget import rank_by_capacity
from railflow.analysis.network_max import max_flow_pairs
from railflow.analysis.sensitivity import (
    calc_max_flow_reduced,
    rank_affected_by_segment,
    segment_inflow_drop,
)
from railflow.model.network import Network, Segment, ServiceClass, StationKey

SegmentKey = Tuple[StationKey, StationKey]

_LOCKS: "weakref.WeakKeyDictionary[Network, threading.RLock]" = (
    weakref.WeakKeyDictionary()
)
_LOCKS_GUARD = threading.Lock()


def network_lock(network: Network) -> threading.RLock:
    """Return the lock that serializes queries against ``network``."""
    with _LOCKS_GUARD:
        lock = _LOCKS.get(network)
        if lock is None:
            lock = threading.RLock()
            _LOCKS[network] = lock
        return lock


@dataclass
class AnalysisContext:
    """Serialized, name-based access to every capacity query.

    Stations may be given by name or id. Unknown stations raise
    ``StationNotFoundError`` and unknown segments ``LinkNotFoundError``, both
    before the network is touched, so an interactive caller can re-prompt.

    Attributes:
        network: The analyzed network.
    """

    network: Network
    _lock: threading.RLock = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._lock = network_lock(self.network)

    def _segment(
        self, segment: SegmentKey, service: Optional[ServiceClass] = None
    ) -> Segment:
        return self.network.get_segment(segment[0], segment[1], service)

    def max_flow(self, source: StationKey, sink: StationKey) -> int:
        """Max trains travelling simultaneously between two stations."""
        with self._lock:
            src = self.network.get_station(source)
            dst = self.network.get_station(sink)
            return calc_max_flow(self.network, src, dst)

    def max_flow_cost(self, source: StationKey, sink: StationKey) -> FlowCost:
        """Max trains between two stations and the cost of carrying them."""
        with self._lock:
            src = self.network.get_station(source)
            dst = self.network.get_station(sink)
            return calc_max_flow_cost(self.network, src, dst)

    def max_inflow(self, sink: StationKey) -> int:
        """Max trains arriving at a station from every terminal station."""
        with self._lock:
            return calc_max_inflow(self.network, self.network.get_station(sink))

    def max_flow_pairs(self) -> MaxFlowPairs:
        """Station pairs that need the most trains."""
        with self._lock:
            return max_flow_pairs(self.network)

    def max_flow_pair_names(self) -> Tuple[int, List[Tuple[str, str]]]:
        """Like ``max_flow_pairs`` with station names instead of ids."""
        with self._lock:
            result = max_flow_pairs(self.network)
            stations = self.network.stations
            return result.flow, [
                (stations[a].name, stations[b].name) for a, b in result.pairs
            ]

    def top_regions(self, attr: str, k: int) -> List[Tuple[str, int]]:
        """Top ``k`` regions (district, municipality, township) by capacity."""
        with self._lock:
            return rank_by_capacity(self.network, attr, k)

    def reduced_max_flow(
        self,
        source: StationKey,
        sink: StationKey,
        removed_stations: Iterable[StationKey] = (),
        removed_segments: Sequence[SegmentKey] = (),
        *,
        disable_incident_segments: Optional[bool] = None,
    ) -> int:
        """Max trains between two stations with parts of the network out."""
        with self._lock:
            src = self.network.get_station(source)
            dst = self.network.get_station(sink)
            stations = [self.network.get_station(key) for key in removed_stations]
            segments = [self._segment(key) for key in removed_segments]
            return calc_max_flow_reduced(
                self.network,
                src,
                dst,
                stations,
                segments,
                disable_incident_segments=disable_incident_segments,
            )

    def rank_affected_by_segment(
        self,
        station_a: StationKey,
        station_b: StationKey,
        k: int,
        service: Optional[ServiceClass] = None,
    ) -> List[AffectedStation]:
        """Top ``k`` stations losing inbound capacity if a segment fails."""
        with self._lock:
            segment = self._segment((station_a, station_b), service)
            return rank_affected_by_segment(self.network, segment, k)

    def segment_inflow_drop(
        self,
        station_a: StationKey,
        station_b: StationKey,
        sink: StationKey,
        service: Optional[ServiceClass] = None,
    ) -> int:
        """Inbound capacity lost at one station if a segment fails."""
        with self._lock:
            segment = self._segment((station_a, station_b), service)
            dst = self.network.get_station(sink)
            return segment_inflow_drop(self.network, segment, dst)


def analyze(network: Network) -> AnalysisContext:
    """Create an analysis context for a network.

    Examples:
        >>> ctx = analyze(network)
        >>> ctx.max_inflow("Lisboa Oriente")
    """
    return AnalysisContext(network)
