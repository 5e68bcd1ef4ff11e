"""Railway network model."""

from railflow.model.network import (
    Hop,
    Link,
    Network,
    Segment,
    ServiceClass,
    Station,
    service_cost,
)

__all__ = [
    "Hop",
    "Link",
    "Network",
    "Segment",
    "ServiceClass",
    "Station",
    "service_cost",
]
