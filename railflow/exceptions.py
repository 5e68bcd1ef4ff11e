"""Exception types raised by railflow."""

from __future__ import annotations


class StationNotFoundError(KeyError):
    """A station id or name lookup failed."""

    def __init__(self, key: object) -> None:
        super().__init__(f"Station '{key}' not found in network.")
        self.key = key


class LinkNotFoundError(KeyError):
    """No segment connects the requested pair of stations."""

    def __init__(self, source: object, target: object) -> None:
        super().__init__(f"No segment between '{source}' and '{target}'.")
        self.source = source
        self.target = target


class DuplicateEntityError(ValueError):
    """A station or segment that must be unique was declared twice."""


class InvalidMutationStateError(RuntimeError):
    """The network is not in the clean state the operation expects."""


class FlowInvariantError(AssertionError):
    """Internal bookkeeping of the flow engine is inconsistent."""


class SearchDeadlineExceeded(TimeoutError):
    """A flow computation ran past ``FlowConfig.search_deadline``."""
