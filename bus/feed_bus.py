"""
FeedBus: In-memory topic channel between producer threads and the render loop.

Supports:
    - Topic-based messaging
    - Thread-safe publish from the transport / refresh threads
    - Optional packet drop simulation for a lossy link
    - Logging of events

Intended usage:
    - The Feed Client publishes decoded batches to 'feed.update'
    - The baseline refresher publishes fixture phases to 'feed.baseline'
    - The session controller polls both topics once per frame
"""

import time
import random
import logging
import threading
from typing import Any, Dict, List, Optional

from .message import BusMessage
from .metrics import FeedMetrics
from .utils import new_msg_id, maybe_drop

log = logging.getLogger(__name__)

FEED_TOPIC = "feed.update"
BASELINE_TOPIC = "feed.baseline"


class FeedBus:
    """
    Transport layer between background producers and the render thread.

    Attributes:
        drop_rate (float): Probability of randomly dropping a message.
        metrics (FeedMetrics): Shared counters.
    """

    def __init__(self, drop_rate: float = 0.0, seed: Optional[int] = None):
        """
        Initialize a FeedBus instance.

        Args:
            drop_rate (float): Chance of randomly dropping a message (0.0 to 1.0).
            seed (int): Optional seed for the drop simulation.
        """
        self._topics: Dict[str, List[BusMessage]] = {}
        self._lock = threading.Lock()
        self._rng = random.Random(seed)
        self.drop_rate = drop_rate
        self.metrics = FeedMetrics()

    def publish(self, topic: str, sender: str, payload: Any) -> Optional[str]:
        """
        Publish a message to a specific topic.

        Args:
            topic (str): The topic name (e.g., 'feed.update').
            sender (str): ID of the producer.
            payload (Any): Decoded message contents.

        Returns:
            Optional[str]: The unique message ID if published, or None if dropped.
        """
        if maybe_drop(self.drop_rate, self._rng):
            self.metrics.incr("dropped")
            log.warning("packet_dropped topic=%s sender=%s", topic, sender)
            return None

        msg = BusMessage(
            id=new_msg_id(),
            topic=topic,
            sender=sender,
            payload=payload,
            ts=time.time(),
        )
        with self._lock:
            self._topics.setdefault(topic, []).append(msg)
        self.metrics.incr("published")

        log.debug("publish topic=%s sender=%s id=%s", topic, sender, msg.id)
        return msg.id

    def poll(self, topic: str) -> List[BusMessage]:
        """
        Retrieve and clear all messages from a given topic.

        Args:
            topic (str): The topic name to poll messages from.

        Returns:
            List[BusMessage]: Messages published to the topic since the last poll, oldest first.
        """
        with self._lock:
            msgs = self._topics.get(topic, [])
            self._topics[topic] = []
        return msgs

    def pending(self, topic: str) -> int:
        """
        Number of messages waiting on *topic*.

        Args:
            topic (str): The topic name.

        Returns:
            int: Queue length.
        """
        with self._lock:
            return len(self._topics.get(topic, []))
