"""
BusMessage: Data structure representing one item carried by the FeedBus.
"""

from dataclasses import dataclass
from typing import Any


@dataclass
class BusMessage:
    """
    Represents a single message handed from a producer thread to the render thread.

    Attributes:
        id (str): Unique identifier for the message.
        topic (str): The topic of the message (e.g., 'feed.update', 'feed.baseline').
        sender (str): ID of the producer (e.g., 'feed', 'baseline').
        payload (Any): Decoded contents (a VehicleBatch or a phase mapping).
        ts (float): Timestamp (in seconds) when the message was published.
    """
    id: str
    topic: str
    sender: str
    payload: Any
    ts: float
