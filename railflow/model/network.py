"""Railway topology model: ServiceClass, Station, Link, Segment and Network.

The Network is an arena: stations are addressed by their integer id, links by
a monotonically increasing integer id, and adjacency is stored as lists of
link ids. Every physical segment materializes as two directed links that
reference each other through ``reverse``; callers toggle and inspect them as
one unit through ``Segment``.
"""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, Iterator, List, NamedTuple, Optional, Union

from railflow.config import FLOW_CONFIG
from railflow.exceptions import LinkNotFoundError, StationNotFoundError
from railflow.logging import get_logger

LOGGER = get_logger(__name__)

StationKey = Union[int, str, "Station"]


class ServiceClass(Enum):
    """Category of a track segment."""

    STANDARD = "STANDARD"
    PENDULAR = "PENDULAR"

    @classmethod
    def parse(cls, value: Union[str, "ServiceClass"]) -> "ServiceClass":
        """Return the member named by ``value`` (case-insensitive).

        Raises:
            ValueError: If ``value`` names no service class.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls[str(value).strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown service class '{value}'.") from None


_SERVICE_COSTS: Dict[ServiceClass, int] = {
    ServiceClass.STANDARD: 2,
    ServiceClass.PENDULAR: 4,
}


def service_cost(service: ServiceClass) -> int:
    """Per-unit cost of carrying one train over a segment of ``service``."""
    return _SERVICE_COSTS[service]


class Hop(NamedTuple):
    """One step of an augmenting path.

    ``forward`` is True when the step follows ``link`` from its source to its
    destination and False when it cancels flow on ``link``, moving from its
    destination back to its source.
    """

    link: int
    forward: bool


@dataclass
class Station:
    """A railway station.

    Attributes:
        id: Unique non-negative id; ``FLOW_CONFIG.super_source_id`` is reserved.
        name: Unique name used for lookups.
        district: Administrative metadata.
        municipality: Administrative metadata.
        township: Administrative metadata.
        enabled: Disabled stations are never entered by a path search.
        links: Ids of the links leaving this station, in creation order.
        visited: Search scratch flag.
        discovered_by: Hop that reached this station in the current search.
        priority_key: Cumulative cost-to-reach for the cost-prioritized search.
    """

    id: int
    name: str
    district: str = ""
    municipality: str = ""
    township: str = ""
    enabled: bool = True
    links: List[int] = field(default_factory=list, repr=False)
    visited: bool = field(default=False, repr=False, compare=False)
    discovered_by: Optional[Hop] = field(default=None, repr=False, compare=False)
    priority_key: float = field(default=float("inf"), repr=False, compare=False)


@dataclass
class Link:
    """One direction of a track segment.

    Attributes:
        id: Arena id, never reused after removal.
        src: Id of the source station.
        dst: Id of the destination station.
        capacity: Maximum number of trains (>= 0).
        service: Service class of the segment.
        flow: Trains currently routed ``src -> dst`` (scratch state).
        enabled: Disabled links are ignored by path searches.
        reverse: Id of the twin link ``dst -> src``.
    """

    id: int
    src: int
    dst: int
    capacity: int
    service: ServiceClass = ServiceClass.STANDARD
    flow: int = 0
    enabled: bool = True
    reverse: int = -1

    @property
    def residual(self) -> int:
        return self.capacity - self.flow


@dataclass(frozen=True)
class Segment:
    """Both directed halves of one physical segment.

    ``forward`` runs from the first station given to ``Network.add_link`` to
    the second one; ``backward`` is its reverse twin.
    """

    forward: Link
    backward: Link

    @property
    def endpoints(self) -> tuple[int, int]:
        return self.forward.src, self.forward.dst

    @property
    def capacity(self) -> int:
        return self.forward.capacity

    @property
    def service(self) -> ServiceClass:
        return self.forward.service

    @property
    def enabled(self) -> bool:
        return self.forward.enabled and self.backward.enabled

    def set_enabled(self, enabled: bool) -> None:
        self.forward.enabled = enabled
        self.backward.enabled = enabled

    def reset_flow(self) -> None:
        self.forward.flow = 0
        self.backward.flow = 0

    def halves(self) -> tuple[Link, Link]:
        return self.forward, self.backward


@dataclass(eq=False)
class Network:
    """Container for stations and the links between them.

    Stations are indexed by id and by name; both must be unique. Links are
    indexed by id. Flow and search fields on stations and links are scratch
    state owned by the flow engines and carry no meaning between queries.

    Attributes:
        stations: Mapping from station id -> Station.
        links: Mapping from link id -> Link (both halves of every segment).
    """

    stations: Dict[int, Station] = field(default_factory=dict)
    links: Dict[int, Link] = field(default_factory=dict)
    _by_name: Dict[str, int] = field(default_factory=dict, init=False, repr=False)
    _next_link_id: int = field(default=0, init=False, repr=False)

    @property
    def station_count(self) -> int:
        return len(self.stations)

    @property
    def link_count(self) -> int:
        return len(self.links)

    #
    # Stations
    #
    def add_station(self, station: Station) -> bool:
        """Add a station to the network.

        Args:
            station: Station to add.

        Returns:
            True if the station was added, False if its id or name is already
            present (the network is left unchanged).

        Raises:
            ValueError: If the id is negative or the name is the one reserved
                for the super-source.
        """
        if station.id < 0:
            raise ValueError(f"Station id must be >= 0, got {station.id}.")
        if station.name == FLOW_CONFIG.super_source_name:
            raise ValueError(f"Station name '{station.name}' is reserved.")
        return self._register_station(station)

    def _register_station(self, station: Station) -> bool:
        if station.id in self.stations:
            LOGGER.debug("Duplicate station id %s ignored", station.id)
            return False
        if station.name in self._by_name:
            LOGGER.debug("Duplicate station name '%s' ignored", station.name)
            return False
        self.stations[station.id] = station
        self._by_name[station.name] = station.id
        return True

    def find_station(self, key: StationKey) -> Optional[Station]:
        """Return the station with id or name ``key``, or None."""
        if isinstance(key, Station):
            key = key.id
        if isinstance(key, str):
            station_id = self._by_name.get(key)
            if station_id is None:
                return None
            return self.stations[station_id]
        return self.stations.get(key)

    def get_station(self, key: StationKey) -> Station:
        """Return the station with id or name ``key``.

        Raises:
            StationNotFoundError: If no such station exists.
        """
        station = self.find_station(key)
        if station is None:
            raise StationNotFoundError(key)
        return station

    def disable_station(self, key: StationKey) -> None:
        self.get_station(key).enabled = False

    def enable_station(self, key: StationKey) -> None:
        self.get_station(key).enabled = True

    def remove_station(self, station_id: int) -> None:
        """Remove a station together with every segment touching it.

        For each link leaving the station, its reverse twin is dropped from the
        neighbor's adjacency list and both halves leave the link index.

        Raises:
            StationNotFoundError: If the station does not exist.
        """
        station = self.get_station(station_id)
        for link_id in list(station.links):
            link = self.links.pop(link_id)
            twin = self.links.pop(link.reverse, None)
            if twin is not None:
                neighbor = self.stations[twin.src]
                neighbor.links = [lid for lid in neighbor.links if lid != twin.id]
        station.links.clear()
        del self.stations[station.id]
        del self._by_name[station.name]

    #
    # Links and segments
    #
    def add_link(
        self,
        station_a: StationKey,
        station_b: StationKey,
        capacity: int,
        service: Union[ServiceClass, str] = ServiceClass.STANDARD,
    ) -> Optional[Segment]:
        """Create the forward/reverse link pair for one segment.

        Args:
            station_a: Id or name of one endpoint (source of the forward half).
            station_b: Id or name of the other endpoint.
            capacity: Number of trains the segment can carry (>= 0).
            service: Service class of the segment.

        Returns:
            The new Segment, or None if a link ``a -> b`` of the same service
            class already exists (the network is left unchanged).

        Raises:
            StationNotFoundError: If either station does not exist.
            ValueError: If the stations are the same, ``capacity`` is not a
                non-negative integer or ``service`` is unknown.
        """
        src = self.get_station(station_a)
        dst = self.get_station(station_b)
        if src is dst:
            raise ValueError(f"Segment endpoints must differ, got '{src.name}' twice.")
        service = ServiceClass.parse(service)
        if isinstance(capacity, float) and capacity.is_integer():
            capacity = int(capacity)
        if isinstance(capacity, bool) or not isinstance(capacity, int):
            raise ValueError(f"Link capacity must be an integer, got {capacity!r}.")
        if capacity < 0:
            raise ValueError(f"Link capacity must be >= 0, got {capacity}.")
        if self._link_exists(src, dst, service):
            LOGGER.debug(
                "Duplicate %s link %s -> %s ignored", service.value, src.name, dst.name
            )
            return None

        forward = Link(self._new_link_id(), src.id, dst.id, capacity, service)
        backward = Link(self._new_link_id(), dst.id, src.id, capacity, service)
        forward.reverse = backward.id
        backward.reverse = forward.id

        self.links[forward.id] = forward
        self.links[backward.id] = backward
        src.links.append(forward.id)
        dst.links.append(backward.id)
        return Segment(forward, backward)

    def _new_link_id(self) -> int:
        link_id = self._next_link_id
        self._next_link_id += 1
        return link_id

    def _link_exists(self, src: Station, dst: Station, service: ServiceClass) -> bool:
        for link_id in src.links:
            link = self.links[link_id]
            if link.dst == dst.id and link.service is service:
                return True
        return False

    def segment_of(self, link: Union[Link, int]) -> Segment:
        """Return the segment a link belongs to, oriented from that link."""
        if isinstance(link, int):
            link = self.links[link]
        return Segment(link, self.links[link.reverse])

    def get_segment(
        self,
        station_a: StationKey,
        station_b: StationKey,
        service: Union[ServiceClass, str, None] = None,
    ) -> Segment:
        """Return the segment joining two stations, oriented ``a -> b``.

        Args:
            station_a: Id or name of one endpoint.
            station_b: Id or name of the other endpoint.
            service: Restrict the match to one service class. When None and
                several parallel segments exist, the first created wins.

        Raises:
            StationNotFoundError: If either station does not exist.
            LinkNotFoundError: If no matching segment exists.
        """
        src = self.get_station(station_a)
        dst = self.get_station(station_b)
        wanted = ServiceClass.parse(service) if service is not None else None
        for link_id in src.links:
            link = self.links[link_id]
            if link.dst == dst.id and (wanted is None or link.service is wanted):
                return self.segment_of(link)
        raise LinkNotFoundError(station_a, station_b)

    def segments(self) -> Iterator[Segment]:
        """Yield every segment once, oriented as it was created."""
        for link in self.links.values():
            if link.id < link.reverse:
                yield Segment(link, self.links[link.reverse])

    def incident_segments(self, key: StationKey) -> List[Segment]:
        station = self.get_station(key)
        return [self.segment_of(link_id) for link_id in station.links]

    def disable_segment(self, segment: Segment) -> None:
        segment.set_enabled(False)

    def enable_segment(self, segment: Segment) -> None:
        segment.set_enabled(True)

    @contextmanager
    def segment_disabled(self, segment: Segment) -> Iterator[Segment]:
        """Take a segment down for the duration of the ``with`` block.

        The previous enabled state of both halves is restored on exit, even if
        the block raises.
        """
        previous = (segment.forward.enabled, segment.backward.enabled)
        segment.set_enabled(False)
        try:
            yield segment
        finally:
            segment.forward.enabled, segment.backward.enabled = previous

    @contextmanager
    def elements_disabled(
        self,
        stations: Iterable[StationKey] = (),
        segments: Iterable[Segment] = (),
    ) -> Iterator[None]:
        """Disable stations and segments for the duration of the ``with`` block.

        Every touched station and link gets its previous enabled flag back on
        exit, even if the block raises.

        Raises:
            StationNotFoundError: If a station does not exist (nothing is
                disabled in that case).
        """
        targets = [self.get_station(key) for key in stations]
        halves = [half for segment in segments for half in segment.halves()]
        saved_stations = [(station, station.enabled) for station in targets]
        saved_links = [(link, link.enabled) for link in halves]
        for station in targets:
            station.enabled = False
        for link in halves:
            link.enabled = False
        try:
            yield
        finally:
            for link, enabled in reversed(saved_links):
                link.enabled = enabled
            for station, enabled in reversed(saved_stations):
                station.enabled = enabled

    #
    # Scratch state
    #
    def reset_flows(self) -> None:
        for link in self.links.values():
            link.flow = 0

    def reset_search_state(self) -> None:
        for station in self.stations.values():
            station.visited = False
            station.discovered_by = None
            station.priority_key = float("inf")

    def is_clean(self) -> bool:
        """True when no link carries flow."""
        return all(link.flow == 0 for link in self.links.values())

    def max_possible_flow(self, key: StationKey) -> int:
        """Upper bound on any flow through a station.

        This is the sum of the capacities of its enabled outgoing links; every
        segment has one outgoing half per endpoint, so this equals the total
        incident capacity.
        """
        station = self.get_station(key)
        return sum(
            self.links[link_id].capacity
            for link_id in station.links
            if self.links[link_id].enabled
        )

    def degree(self, key: StationKey) -> int:
        """Number of segments touching a station, enabled or not."""
        return len(self.get_station(key).links)
