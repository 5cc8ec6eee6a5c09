"""Errors raised while talking to the backend."""

from world.errors import TrafficViewError


class TopologyFetchError(TrafficViewError):
    """The static layout could not be retrieved or was not JSON."""


class FeedFormatError(TrafficViewError):
    """A streamed message could not be decoded against the topology."""
