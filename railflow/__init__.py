"""railflow: capacity planning for railway networks.

Stations are nodes and track segments are capacitated, typed edges. The
package answers max-flow style questions: how many trains can run between two
stations, at what cost, how many can reach a station from every terminal, and
which stations lose capacity when a segment fails.

Primary API:
    analyze() - Create a serialized, name-based analysis context
    AnalysisContext - Query API over one network
    Network, Station, Link, Segment, ServiceClass - Network model
    build_network(), load_network_yaml(), load_network_file() - Construction

Example:
    from railflow import Network, Station, analyze

    net = Network()
    net.add_station(Station(0, "A"))
    net.add_station(Station(1, "B"))
    net.add_link("A", "B", capacity=5, service="STANDARD")

    analyze(net).max_flow("A", "B")
"""

from __future__ import annotations

from railflow import cli, logging
from railflow._version import __version__
from railflow.algorithms.types import AffectedStation, FlowCost, MaxFlowPairs
from railflow.analysis import AnalysisContext, analyze
from railflow.config import FLOW_CONFIG, FlowConfig
from railflow.exceptions import (
    DuplicateEntityError,
    FlowInvariantError,
    InvalidMutationStateError,
    LinkNotFoundError,
    SearchDeadlineExceeded,
    StationNotFoundError,
)
from railflow.lib.nx import to_networkx
from railflow.loader import (
    LinkRecord,
    StationRecord,
    build_network,
    load_network_file,
    load_network_yaml,
)
from railflow.model.network import (
    Link,
    Network,
    Segment,
    ServiceClass,
    Station,
    service_cost,
)

__all__ = [
    # Version
    "__version__",
    # Model
    "Network",
    "Station",
    "Link",
    "Segment",
    "ServiceClass",
    "service_cost",
    # Construction
    "StationRecord",
    "LinkRecord",
    "build_network",
    "load_network_yaml",
    "load_network_file",
    # Analysis (primary API)
    "analyze",
    "AnalysisContext",
    # Results
    "FlowCost",
    "MaxFlowPairs",
    "AffectedStation",
    # Configuration
    "FlowConfig",
    "FLOW_CONFIG",
    # Errors
    "StationNotFoundError",
    "LinkNotFoundError",
    "DuplicateEntityError",
    "InvalidMutationStateError",
    "FlowInvariantError",
    "SearchDeadlineExceeded",
    # Library integrations (NetworkX)
    "to_networkx",
    # Utilities
    "cli",
    "logging",
]
