from __future__ import annotations


class PathsearchError(Exception):
    """Base class for routing failures that callers translate into user messages."""


class UnknownNodeError(PathsearchError, ValueError):
    """Raised when a coordinate is used as a node but is not part of the graph."""


class GeodataUnavailable(PathsearchError):
    """Raised when the road data could not be fetched or decoded, so no graph exists."""


class SearchAborted(PathsearchError):
    """Raised when a shortest-path search is cancelled between iterations."""


class NoNearbyPoint(PathsearchError):
    """Raised when a query coordinate cannot be snapped onto the road graph."""
