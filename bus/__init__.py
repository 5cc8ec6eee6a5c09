"""
bus — In-memory feed channel
=============================

Provides a lightweight, lock-protected pub/sub channel that carries decoded
feed messages from background threads to the render loop, with optional
packet-loss simulation.

Modules
-------
message
    :class:`BusMessage` dataclass.
feed_bus
    :class:`FeedBus` publish / poll transport.
metrics
    :class:`FeedMetrics` counter snapshot.
utils
    ID generation, fault injection.
"""

from .message import BusMessage
from .feed_bus import FeedBus, FEED_TOPIC, BASELINE_TOPIC
from .metrics import FeedMetrics
from .utils   import new_msg_id, maybe_drop

__all__ = [
    "BusMessage",
    "FeedBus",
    "FEED_TOPIC",
    "BASELINE_TOPIC",
    "FeedMetrics",
    "new_msg_id",
    "maybe_drop",
]
