"""Holder for the one-time static topology snapshot."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from .errors import TopologyError
from .network import Topology

log = logging.getLogger(__name__)


class TopologyStore:
    """Loads the :class:`Topology` exactly once and keeps it for the session."""

    def __init__(self) -> None:
        self._topology: Optional[Topology] = None

    @property
    def topology(self) -> Optional[Topology]:
        return self._topology

    @property
    def loaded(self) -> bool:
        return self._topology is not None

    def load(self, source: Callable[[], Topology]) -> Topology:
        """Call *source* once and keep its result.

        Errors raised by *source* propagate unchanged and leave the store
        empty. A second call raises :class:`TopologyError`.
        """
        if self._topology is not None:
            raise TopologyError("topology is already loaded")
        topology = source()
        if not isinstance(topology, Topology):
            raise TopologyError(f"topology source returned {type(topology).__name__}")
        self._topology = topology
        log.info("topology loaded %r", topology)
        return topology
