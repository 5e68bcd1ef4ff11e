"""Configuration classes for railflow components."""

import logging
from dataclasses import dataclass
from typing import Optional


@dataclass
class FlowConfig:
    """Tunables shared by the flow engines and the analysis helpers."""

    # Reserved id and name of the synthetic super-source station
    super_source_id: int = -1
    super_source_name: str = "__super_source__"

    # Capacity of every super-source fan-out link; effectively unbounded
    super_source_capacity: int = 10_000_000

    # Wall-clock budget in seconds for one flow computation; None disables it
    search_deadline: Optional[float] = None

    # Whether a station removed in a reduced-network query also takes its
    # incident segments down
    disable_incident_segments: bool = True

    # Level and record format of the "railflow" logger handler
    log_level: int = logging.INFO
    log_format: str = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


# Global configuration instance
FLOW_CONFIG = FlowConfig()
