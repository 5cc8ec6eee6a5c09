"""
feed — Backend communication
============================

Modules
-------
schemas
    Pydantic wire models for the layout and the streamed ticks.
decode
    Wire records → :mod:`world` objects.
topology_client
    :class:`TopologyClient` one-shot layout fetch over HTTP.
feed_client
    :class:`FeedClient` WebSocket connection and its state machine.
baseline_refresher
    :class:`BaselineRefresher` optional periodic phase refresh.
session
    :class:`SessionController` orchestrating a viewer session.
"""

from .errors import FeedFormatError, TopologyFetchError
from .decode import decode_baseline, decode_feed_message, decode_topology
from .topology_client import TopologyClient
from .feed_client import ConnectionState, FeedClient
from .baseline_refresher import BaselineRefresher
from .session import SessionController

__all__ = [
    "FeedFormatError",
    "TopologyFetchError",
    "decode_baseline",
    "decode_feed_message",
    "decode_topology",
    "TopologyClient",
    "ConnectionState",
    "FeedClient",
    "BaselineRefresher",
    "SessionController",
]
