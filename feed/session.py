"""
feed/session.py
===============
Top-level session controller tying the topology fetch, the Feed Client,
the :class:`~bus.feed_bus.FeedBus` and :class:`~world.app_state.AppState`
together. The UI calls :meth:`SessionController.pump` once per frame and
then renders :meth:`SessionController.snapshot`.

Public API consumed by :mod:`ui.pygame_view`
--------------------------------------------
* ``start()``             → ``bool``
* ``pump()``              → ``int``
* ``snapshot()``          → ``WorldSnapshot``
* ``status()``            → ``dict``
* ``stop()``              → ``None``
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from bus.feed_bus import BASELINE_TOPIC, FEED_TOPIC, FeedBus
from config import ViewerSettings
from world.app_state import AppState, WorldSnapshot
from world.errors import TrafficViewError
from world.network import Topology
from world.signal_inference import InferenceMode

from .baseline_refresher import BaselineRefresher
from .feed_client import ConnectionState, FeedClient
from .topology_client import TopologyClient

log = logging.getLogger(__name__)

FeedFactory = Callable[[str, Topology, FeedBus], Any]


class SessionController:
    """Owns the application state for one viewer session.

    Parameters
    ----------
    settings : ViewerSettings
        Endpoints, inference mode, refresh interval, drop rate.
    topology_client : TopologyClient or None
        Injected fetcher; built from *settings* otherwise.
    feed_factory : callable or None
        ``(url, topology, bus) -> client`` with ``start()``/``stop()`` and a
        ``state`` attribute; defaults to :class:`FeedClient`.
    bus : FeedBus or None
        Injected channel; built from *settings* otherwise.
    """

    def __init__(
        self,
        settings: ViewerSettings,
        topology_client: Optional[TopologyClient] = None,
        feed_factory: Optional[FeedFactory] = None,
        bus: Optional[FeedBus] = None,
    ) -> None:
        self.settings = settings
        self.state = AppState(InferenceMode.parse(settings.inference_mode))
        self.bus = bus or FeedBus(drop_rate=settings.drop_rate)
        self.topology_client = topology_client or TopologyClient(
            settings.topology_url, timeout_s=settings.http_timeout_s,
        )
        self._feed_factory: FeedFactory = feed_factory or FeedClient
        self.feed: Optional[Any] = None
        self.refresher: Optional[BaselineRefresher] = None
        self.startup_error: Optional[str] = None

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    def start(self) -> bool:
        """Load the topology, then open the feed.

        Returns *False* (and leaves the feed closed) when the topology
        cannot be loaded.
        """
        try:
            topology = self.state.install_topology(self.topology_client.fetch)
        except TrafficViewError as exc:
            self.startup_error = str(exc)
            log.error("topology load failed, feed will not be opened: %s", exc)
            return False

        self.feed = self._feed_factory(self.settings.feed_url, topology, self.bus)
        self.feed.start()

        if self.settings.baseline_refresh_s > 0:
            self.refresher = BaselineRefresher(
                self.topology_client, topology, self.bus,
                self.settings.baseline_refresh_s,
            )
            self.refresher.start()
        return True

    def stop(self) -> None:
        if self.refresher is not None:
            self.refresher.stop()
        if self.feed is not None:
            self.feed.stop()
        self.topology_client.close()
        log.info("session stopped")

    # ── Render-thread update path ─────────────────────────────────────────────

    def pump(self) -> int:
        """Apply every message waiting on the bus, oldest first.

        Returns the number of messages applied. Messages that cannot be
        applied are logged and skipped; the previous state stays in place.
        """
        applied = 0
        for msg in self.bus.poll(BASELINE_TOPIC):
            try:
                self.state.apply_baseline(msg.payload)
                applied += 1
            except TrafficViewError as exc:
                log.warning("baseline %s rejected: %s", msg.id, exc)

        for msg in self.bus.poll(FEED_TOPIC):
            try:
                self.state.apply_update(msg.payload)
                applied += 1
            except TrafficViewError as exc:
                log.warning("feed update %s rejected: %s", msg.id, exc)

        if applied:
            self.bus.metrics.incr("applied", applied)
        return applied

    # ── Read path ─────────────────────────────────────────────────────────────

    def snapshot(self) -> WorldSnapshot:
        return self.state.snapshot()

    @property
    def connection_state(self) -> ConnectionState:
        if self.feed is None:
            return ConnectionState.IDLE
        return self.feed.state

    def status(self) -> Dict[str, Any]:
        """Summary used by the HUD."""
        metrics = self.bus.metrics.report()
        return {
            "connection": self.connection_state.value,
            "startup_error": self.startup_error,
            "vehicles": len(self.state.dynamic.vehicles),
            "malformed": metrics["malformed"],
            "dropped": metrics["dropped"],
            "applied": metrics["applied"],
        }
