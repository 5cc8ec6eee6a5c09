"""
feed/baseline_refresher.py
==========================
Optional background thread that re-reads the authoritative signal phases.

Every ``interval_s`` it fetches the layout again, extracts the fixture
phases and publishes them on the ``feed.baseline`` topic. The topology
already in use is never replaced.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional

from bus.feed_bus import BASELINE_TOPIC, FeedBus
from world.network import Topology

from .decode import decode_baseline
from .topology_client import TopologyClient

log = logging.getLogger(__name__)


class BaselineRefresher:
    """Periodic re-fetch of fixture phases.

    Parameters
    ----------
    client : TopologyClient
        Used for :meth:`~TopologyClient.fetch_document`.
    topology : Topology
        The session topology; phases for unknown fixtures are dropped.
    bus : FeedBus
        Destination for refreshed baselines.
    interval_s : float
        Seconds between fetches.
    """

    def __init__(
        self,
        client: TopologyClient,
        topology: Topology,
        bus: FeedBus,
        interval_s: float,
    ) -> None:
        self.client = client
        self.topology = topology
        self.bus = bus
        self.interval_s = interval_s
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def refresh_once(self) -> bool:
        """Fetch and publish one baseline. Failures are logged, not raised."""
        try:
            phases = decode_baseline(self.client.fetch_document(), self.topology)
        except Exception:
            log.exception("baseline refresh failed")
            return False
        return self.bus.publish(BASELINE_TOPIC, "baseline", phases) is not None

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(
            target=self._loop, daemon=True, name="BaselineRefresher"
        )
        self._thread.start()
        log.info("baseline refresh every %.1f s", self.interval_s)

    def stop(self) -> None:
        self._stop.set()
        if self._thread:
            self._thread.join(timeout=2.0)

    def _loop(self) -> None:
        while not self._stop.wait(self.interval_s):
            self.refresh_once()
