"""
feed/feed_client.py
===================
Streaming connection to the simulation feed.

The client owns exactly one WebSocket, driven by ``websocket-client`` in a
daemon thread. Its callbacks only decode messages and publish the result
on the :class:`~bus.feed_bus.FeedBus`; the state stores are updated by the
render thread when it drains the bus.

Connection lifecycle::

    IDLE ──► CONNECTING ──► OPEN ──► CLOSED
                  │           │
                  └───────────┴────► ERRORED

``CLOSED`` and ``ERRORED`` are terminal; there is no reconnect.
"""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Optional, Union

import websocket

from bus.feed_bus import FEED_TOPIC, FeedBus
from world.network import Topology

from .decode import decode_feed_message
from .errors import FeedFormatError

log = logging.getLogger(__name__)


class ConnectionState(str, Enum):
    IDLE = "IDLE"
    CONNECTING = "CONNECTING"
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    ERRORED = "ERRORED"

    @property
    def terminal(self) -> bool:
        return self in (ConnectionState.CLOSED, ConnectionState.ERRORED)


_TRANSITIONS: Dict[ConnectionState, FrozenSet[ConnectionState]] = {
    ConnectionState.IDLE: frozenset({ConnectionState.CONNECTING}),
    ConnectionState.CONNECTING: frozenset({
        ConnectionState.OPEN, ConnectionState.CLOSED, ConnectionState.ERRORED,
    }),
    ConnectionState.OPEN: frozenset({ConnectionState.CLOSED, ConnectionState.ERRORED}),
    ConnectionState.CLOSED: frozenset(),
    ConnectionState.ERRORED: frozenset(),
}


class FeedClient:
    """Single streaming connection feeding decoded batches onto *bus*.

    Parameters
    ----------
    url : str
        WebSocket endpoint, e.g. ``ws://localhost:8082/ws/simulation``.
    topology : Topology
        Loaded topology used to resolve intersection references.
    bus : FeedBus
        Channel consumed by the session controller.
    app_factory : callable
        Builds the WebSocket application; defaults to
        :class:`websocket.WebSocketApp`.
    """

    def __init__(
        self,
        url: str,
        topology: Topology,
        bus: FeedBus,
        app_factory: Callable[..., Any] = websocket.WebSocketApp,
    ) -> None:
        self.url = url
        self.topology = topology
        self.bus = bus
        self._app_factory = app_factory

        self._lock = threading.Lock()
        self._state = ConnectionState.IDLE
        self._app: Any = None
        self._thread: Optional[threading.Thread] = None
        self.last_error: Optional[str] = None

    # ── state machine ─────────────────────────────────────────────────────

    @property
    def state(self) -> ConnectionState:
        with self._lock:
            return self._state

    def _transition(self, new: ConnectionState) -> bool:
        with self._lock:
            old = self._state
            if new not in _TRANSITIONS[old]:
                log.debug("ignoring transition %s -> %s", old.value, new.value)
                return False
            self._state = new
        log.info("feed %s -> %s", old.value, new.value)
        return True

    # ── lifecycle ─────────────────────────────────────────────────────────

    def start(self) -> None:
        """Open the connection in a background thread (once)."""
        if not self._transition(ConnectionState.CONNECTING):
            raise RuntimeError(f"feed client cannot start from {self.state.value}")
        self._app = self._app_factory(
            self.url,
            on_open=self._on_open,
            on_message=self._on_message,
            on_error=self._on_error,
            on_close=self._on_close,
        )
        self._thread = threading.Thread(
            target=self._run, daemon=True, name="FeedClient"
        )
        self._thread.start()

    def stop(self, timeout_s: float = 2.0) -> None:
        """Close the socket and wait for the thread to finish."""
        if self._app is not None:
            self._app.close()
        if self._thread:
            self._thread.join(timeout=timeout_s)
        self._transition(ConnectionState.CLOSED)

    def _run(self) -> None:
        try:
            self._app.run_forever()
        except Exception as exc:
            log.exception("feed transport crashed")
            self._on_error(self._app, exc)
        # run_forever can return without a close callback (e.g. refused early).
        self._transition(ConnectionState.CLOSED)

    # ── message path ──────────────────────────────────────────────────────

    def handle_message(self, raw: Union[str, bytes]) -> bool:
        """Decode *raw* and publish it; malformed messages are discarded.

        Returns *True* when a batch was handed to the bus.
        """
        self.bus.metrics.incr("received")
        try:
            batch = decode_feed_message(raw, self.topology)
        except FeedFormatError as exc:
            self.bus.metrics.incr("malformed")
            log.warning("discarding malformed feed message: %s", exc)
            return False
        return self.bus.publish(FEED_TOPIC, "feed", batch) is not None

    # ── websocket callbacks ───────────────────────────────────────────────

    def _on_open(self, ws: Any) -> None:
        self._transition(ConnectionState.OPEN)

    def _on_message(self, ws: Any, message: Union[str, bytes]) -> None:
        if self.state is not ConnectionState.OPEN:
            log.debug("message received while %s, ignored", self.state.value)
            return
        self.handle_message(message)

    def _on_error(self, ws: Any, error: Any) -> None:
        self.last_error = str(error)
        log.error("feed connection error: %s", error)
        self._transition(ConnectionState.ERRORED)

    def _on_close(self, ws: Any, status_code: Any = None, reason: Any = None) -> None:
        log.info("feed connection closed (status=%s reason=%s)", status_code, reason)
        self._transition(ConnectionState.CLOSED)
