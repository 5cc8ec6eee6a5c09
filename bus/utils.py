"""
Utility functions for FeedBus:
    - ID generation
    - fault injection (packet drop)
"""

import uuid
import random
import logging

log = logging.getLogger(__name__)

# ---------- ID Helpers ----------
def new_msg_id() -> str:
    """
    Generate a globally unique message ID.

    Returns:
        str: UUID string for a new message.
    """
    return str(uuid.uuid4())

# ---------- Fault / Packet Helpers ----------
def maybe_drop(drop_rate: float, rng: random.Random = None) -> bool:
    """
    Decide whether to randomly drop a packet based on the drop rate.

    Args:
        drop_rate (float): Probability (0.0–1.0) that the packet will be dropped.
        rng (random.Random): Optional generator, for reproducible runs.

    Returns:
        bool: True if the packet should be dropped, False otherwise.
    """
    if drop_rate <= 0.0:
        return False
    result = (rng or random).random() < drop_rate
    if result:
        log.debug("Packet dropped by utils.maybe_drop")
    return result
