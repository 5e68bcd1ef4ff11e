"""Shared fixtures: small railway networks with known flow values.

Station ids follow declaration order (A=0, B=1, ...). Every segment is created
with ``Network.add_link``, so link ids come in forward/reverse pairs in
declaration order.
"""

from __future__ import annotations

import random
from typing import Callable, Iterable, Optional, Sequence

import pytest

from railflow.loader import load_network_yaml
from railflow.model.network import Network, ServiceClass, Station

REGIONAL_YAML = """
stations:
  - {name: Porto Campanha, district: Porto, municipality: Porto, township: Campanha}
  - {name: Porto Sao Bento, district: Porto, municipality: Porto, township: Se}
  - {name: Gaia Devesas, district: Porto, municipality: Gaia, township: Mafamude}
  - {name: Lisboa Oriente, district: Lisboa, municipality: Lisboa, township: Olivais}
  - {name: Santa Apolonia, district: Lisboa, municipality: Lisboa, township: Sao Vicente}
  - {name: Faro, district: Faro, municipality: Faro, township: Se}
links:
  - {source: Porto Campanha, target: Porto Sao Bento, capacity: 2}
  - {source: Porto Campanha, target: Gaia Devesas, capacity: 5}
  - {source: Lisboa Oriente, target: Santa Apolonia, capacity: 2}
  - {source: Gaia Devesas, target: Lisboa Oriente, capacity: 1, service: PENDULAR}
"""


def make_network(
    edges: Iterable[Sequence],
    stations: Optional[Iterable[str]] = None,
) -> Network:
    """Build a network from ``(a, b, capacity[, service])`` tuples.

    Stations are created in the order given by ``stations`` or, when omitted,
    in order of first appearance in ``edges``.
    """
    edges = list(edges)
    names = list(stations) if stations is not None else []
    for edge in edges:
        for name in edge[:2]:
            if name not in names:
                names.append(name)

    net = Network()
    for station_id, name in enumerate(names):
        net.add_station(Station(station_id, name))
    for edge in edges:
        service = edge[3] if len(edge) > 3 else ServiceClass.STANDARD
        net.add_link(edge[0], edge[1], edge[2], service)
    return net


def random_network(seed: int, size: int = 7, density: float = 0.45) -> Network:
    """Random network with mixed service classes; may be disconnected."""
    rng = random.Random(seed)
    names = [f"S{i}" for i in range(size)]
    edges = []
    for i in range(size):
        for j in range(i + 1, size):
            if rng.random() < density:
                service = rng.choice(["STANDARD", "PENDULAR"])
                edges.append((names[i], names[j], rng.randint(1, 9), service))
    return make_network(edges, stations=names)


@pytest.fixture
def network_factory() -> Callable[..., Network]:
    return make_network


@pytest.fixture
def random_network_factory() -> Callable[..., Network]:
    return random_network


@pytest.fixture
def line4() -> Network:
    #  A ---5--- B ---5--- C ---5--- D
    return make_network([("A", "B", 5), ("B", "C", 5), ("C", "D", 5)])


@pytest.fixture
def diamond() -> Network:
    #        B
    #   [3] / \ [4]
    #      A   D
    #   [2] \ / [4]
    #        C
    return make_network([("A", "B", 3), ("A", "C", 2), ("B", "D", 4), ("C", "D", 4)])


@pytest.fixture
def parallel_service() -> Network:
    #  A ==STANDARD[3]== B
    #  A ==PENDULAR[3]== B
    return make_network([("A", "B", 3, "STANDARD"), ("A", "B", 3, "PENDULAR")])


@pytest.fixture
def ring_with_spurs() -> Network:
    #        E
    #        | [10]
    #   D -- A -- B          ring segments: [5]
    #   |         |
    #   +--- C ---+
    #        | [10]
    #        F
    return make_network(
        [
            ("A", "B", 5),
            ("B", "C", 5),
            ("C", "D", 5),
            ("D", "A", 5),
            ("E", "A", 10),
            ("F", "C", 10),
        ],
        stations=["A", "B", "C", "D", "E", "F"],
    )


@pytest.fixture
def star() -> Network:
    #  L1 --2-- H --3-- L2
    #           |
    #           4
    #           |
    #           L3
    return make_network([("H", "L1", 2), ("H", "L2", 3), ("H", "L3", 4)])


@pytest.fixture
def regional() -> Network:
    #  Sao Bento --2-- Campanha --5-- Devesas ==1== Oriente --2-- Santa Apolonia
    #  (Faro has no segments; Devesas-Oriente is PENDULAR)
    return load_network_yaml(REGIONAL_YAML)


@pytest.fixture
def regional_file(tmp_path):
    path = tmp_path / "regional.yaml"
    path.write_text(REGIONAL_YAML, encoding="utf-8")
    return path
