"""
world/dynamic_state.py
======================
Per-tick dynamic entities and the store that holds the latest snapshot.

:class:`DynamicStateStore` never merges: each :meth:`~DynamicStateStore.replace`
builds a fresh immutable :class:`DynamicState` and swaps the reference, so
a reader always sees one complete snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple

from .network import Intersection, IntersectionId, Phase


# ── Vehicle ───────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Vehicle:
    """One vehicle as reported by the feed.

    Parameters
    ----------
    id : int
        Backend identifier (falls back to the position in the batch).
    x, y : float
        Current position in world coordinates.
    path : tuple of Intersection
        Ordered waypoints the vehicle will traverse.
    path_index : int
        Index of the current target inside *path*.
    approaching : Intersection or None
        The intersection the vehicle is heading to.
    approaching_has_signal : bool
        Signal flag carried by the feed for *approaching*.
    """

    id: int
    x: float
    y: float
    path: Tuple[Intersection, ...] = ()
    path_index: int = 0
    approaching: Optional[Intersection] = None
    approaching_has_signal: bool = False

    @property
    def previous_waypoint(self) -> Optional[Intersection]:
        """The waypoint before the current target, if the path has one."""
        prev = self.path_index - 1
        if prev < 0 or prev >= len(self.path):
            return None
        return self.path[prev]


@dataclass(frozen=True)
class VehicleBatch:
    """A decoded feed message.

    ``signals`` is *None* when the feed carried vehicles only; otherwise it
    holds the phases the backend transmitted directly.
    """

    vehicles: Tuple[Vehicle, ...]
    signals: Optional[Mapping[IntersectionId, Phase]] = None


# ── Snapshot ──────────────────────────────────────────────────────────────────

def _frozen(phases: Mapping[IntersectionId, Phase]) -> Mapping[IntersectionId, Phase]:
    return MappingProxyType(dict(phases))


@dataclass(frozen=True)
class DynamicState:
    vehicles: Tuple[Vehicle, ...] = ()
    phases: Mapping[IntersectionId, Phase] = field(
        default_factory=lambda: MappingProxyType({})
    )
    revision: int = 0


class DynamicStateStore:
    """Latest dynamic snapshot, replaced wholesale on every update."""

    def __init__(self) -> None:
        self._state = DynamicState()

    @property
    def current(self) -> DynamicState:
        return self._state

    def replace(
        self,
        vehicles: Iterable[Vehicle],
        phases: Mapping[IntersectionId, Phase],
    ) -> DynamicState:
        """Swap in a new snapshot built from *vehicles* and *phases*."""
        state = DynamicState(
            vehicles=tuple(vehicles),
            phases=_frozen(phases),
            revision=self._state.revision + 1,
        )
        self._state = state
        return state
