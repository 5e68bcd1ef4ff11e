"""Network construction from station/link records and YAML files.

A network file is a YAML mapping with two lists::

    stations:
      - name: Porto Campanha
        district: Porto
        municipality: Porto
        township: Campanha
    links:
      - source: Porto Campanha
        target: Vila Nova de Gaia-Devesas
        capacity: 8
        service: STANDARD

Station ids are assigned 0..n-1 in file order.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Union

import yaml

from railflow.exceptions import DuplicateEntityError
from railflow.logging import get_logger
from railflow.model.network import Network, ServiceClass, Station

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class StationRecord:
    name: str
    district: str = ""
    municipality: str = ""
    township: str = ""


@dataclass(frozen=True)
class LinkRecord:
    source: str
    target: str
    capacity: int
    service: str = ServiceClass.STANDARD.value


def build_network(
    stations: Iterable[StationRecord], links: Iterable[LinkRecord]
) -> Network:
    """Build a Network from records.

    Args:
        stations: Station records; names must be unique.
        links: Link records referring to stations by name.

    Returns:
        The populated network.

    Raises:
        DuplicateEntityError: If two station records share a name.
        StationNotFoundError: If a link names an unknown station.
        ValueError: If a station uses the reserved super-source name, or a link
            joins a station to itself, has a capacity that is not a
            non-negative integer or names an unknown service.
    """
    network = Network()
    for station_id, record in enumerate(stations):
        station = Station(
            id=station_id,
            name=record.name,
            district=record.district,
            municipality=record.municipality,
            township=record.township,
        )
        if not network.add_station(station):
            raise DuplicateEntityError(f"Station '{record.name}' is declared twice.")

    skipped = 0
    for record in links:
        if network.add_link(
            record.source, record.target, record.capacity, record.service
        ) is None:
            skipped += 1
            LOGGER.warning(
                "Skipping duplicate %s link %s -> %s",
                record.service,
                record.source,
                record.target,
            )

    LOGGER.debug(
        "Built network: %d stations, %d links (%d duplicates skipped)",
        network.station_count,
        network.link_count,
        skipped,
    )
    return network


def _require_list(data: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    section = data.get(key, [])
    if section is None:
        return []
    if not isinstance(section, list):
        raise ValueError(f"'{key}' must be a list")
    for entry in section:
        if not isinstance(entry, dict):
            raise ValueError(f"Each entry of '{key}' must be a mapping")
    return section


def load_network_yaml(yaml_str: str) -> Network:
    """Parse a network YAML document and build the network.

    Raises:
        ValueError: If the document is not shaped as described in the module
            docstring.
    """
    data = yaml.safe_load(yaml_str)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError("The provided YAML must map to a dictionary at top-level.")
    unknown = set(data) - {"stations", "links"}
    if unknown:
        raise ValueError(f"Unrecognized top-level key(s): {sorted(unknown)}")

    station_records = []
    for entry in _require_list(data, "stations"):
        if "name" not in entry:
            raise ValueError("Each station must include 'name'")
        station_records.append(
            StationRecord(
                name=str(entry["name"]),
                district=str(entry.get("district", "")),
                municipality=str(entry.get("municipality", "")),
                township=str(entry.get("township", "")),
            )
        )

    link_records = []
    for entry in _require_list(data, "links"):
        missing = [k for k in ("source", "target", "capacity") if k not in entry]
        if missing:
            raise ValueError(f"Link definition missing {missing}: {entry}")
        link_records.append(
            LinkRecord(
                source=str(entry["source"]),
                target=str(entry["target"]),
                capacity=entry["capacity"],
                service=str(entry.get("service", ServiceClass.STANDARD.value)),
            )
        )

    return build_network(station_records, link_records)


def load_network_file(path: Union[str, Path]) -> Network:
    """Read and build a network from a YAML file."""
    return load_network_yaml(Path(path).read_text(encoding="utf-8"))
