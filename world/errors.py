"""Exception types shared by the world model and the feed layer."""


class TrafficViewError(Exception):
    """Base class for every error raised by this project."""


class TopologyError(TrafficViewError):
    """The static road network is inconsistent or was loaded twice."""


class StateError(TrafficViewError):
    """A dynamic update cannot be applied: it arrived before the topology
    was available, or it names a signal fixture the topology lacks.
    """
