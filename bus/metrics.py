"""
FeedMetrics: Tracks simple statistics for the feed message flow.
"""

import threading


class FeedMetrics:
    """
    Counters shared by the transport thread and the render thread.

    Attributes:
        received (int): Raw messages delivered by the transport.
        malformed (int): Messages discarded because they could not be decoded.
        published (int): Messages accepted onto the bus.
        dropped (int): Messages dropped by the simulated lossy link.
        applied (int): Messages applied to the state stores.
    """

    def __init__(self):
        """Initialize all counters to zero."""
        self._lock = threading.Lock()
        self.received = 0
        self.malformed = 0
        self.published = 0
        self.dropped = 0
        self.applied = 0

    def incr(self, name: str, amount: int = 1) -> None:
        """
        Increase counter *name* by *amount*.

        Args:
            name (str): One of the counter attribute names.
            amount (int): Increment, defaults to 1.
        """
        with self._lock:
            setattr(self, name, getattr(self, name) + amount)

    def report(self) -> dict:
        """
        Return a snapshot of current metrics.

        Returns:
            dict: Dictionary with 'received', 'malformed', 'published', 'dropped' and 'applied'.
        """
        with self._lock:
            return {
                "received": self.received,
                "malformed": self.malformed,
                "published": self.published,
                "dropped": self.dropped,
                "applied": self.applied,
            }
