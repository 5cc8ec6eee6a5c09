"""
world/network.py
================
Static road-network model received once from the backend.

Defines :class:`Intersection`, :class:`Road`, :class:`SignalFixture` and
the immutable :class:`Topology` that ties them together, plus the
:class:`Phase` / :class:`Axis` enums describing signal right-of-way.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from .errors import TopologyError

IntersectionId = int


# ── Right-of-way ──────────────────────────────────────────────────────────────

class Axis(str, Enum):
    """Travel axis through an intersection."""

    HORIZONTAL = "EW"
    VERTICAL = "NS"

    @property
    def opposite(self) -> "Axis":
        return Axis.VERTICAL if self is Axis.HORIZONTAL else Axis.HORIZONTAL


class Phase(str, Enum):
    """Signal phase. Red is implied on the axis that is not green."""

    EW_GREEN = "EW_GREEN"
    NS_GREEN = "NS_GREEN"

    @property
    def green_axis(self) -> Axis:
        return Axis.HORIZONTAL if self is Phase.EW_GREEN else Axis.VERTICAL

    @classmethod
    def for_axis(cls, axis: Axis) -> "Phase":
        return cls.EW_GREEN if axis is Axis.HORIZONTAL else cls.NS_GREEN


# ── Intersection node ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Intersection:
    """A single node of the road network.

    Parameters
    ----------
    id : int
        Backend identifier, unique within one topology.
    x, y : float
        Position in world coordinates (identical to screen pixels).
    has_signal : bool
        *True* when a :class:`SignalFixture` is attached.
    """

    id: IntersectionId
    x: float
    y: float
    has_signal: bool = False


def classify_axis(origin: Intersection, target: Intersection) -> Axis:
    """Dominant axis of travel from *origin* to *target*.

    Equal absolute deltas fall through to :attr:`Axis.VERTICAL`.
    """
    dx = abs(target.x - origin.x)
    dy = abs(target.y - origin.y)
    return Axis.HORIZONTAL if dx > dy else Axis.VERTICAL


def distance(a: Intersection, b: Intersection) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


# ── Road segment ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Road:
    """An undirected road drawn between two intersections."""

    start: Intersection
    end: Intersection


# ── Signal fixture ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SignalFixture:
    """Traffic light mounted on one intersection, with its authoritative phase."""

    intersection: Intersection
    phase: Phase


# ── Topology ──────────────────────────────────────────────────────────────────

class Topology:
    """Immutable road network: intersections, roads and signal fixtures.

    Construction validates the invariants the rest of the viewer relies
    on and raises :class:`~world.errors.TopologyError` when one fails:

    * every road endpoint is one of *intersections*;
    * intersection ids are unique;
    * each fixture sits on a known, signal-bearing intersection and no
      intersection carries two fixtures.
    """

    def __init__(
        self,
        intersections: Iterable[Intersection],
        roads: Iterable[Road] = (),
        fixtures: Iterable[SignalFixture] = (),
    ) -> None:
        nodes: Dict[IntersectionId, Intersection] = {}
        for node in intersections:
            if node.id in nodes:
                raise TopologyError(f"duplicate intersection id {node.id}")
            nodes[node.id] = node

        road_list = tuple(roads)
        for road in road_list:
            for end in (road.start, road.end):
                if nodes.get(end.id) != end:
                    raise TopologyError(
                        f"road endpoint {end.id} is not part of the topology"
                    )

        lights: Dict[IntersectionId, SignalFixture] = {}
        for fixture in fixtures:
            node = fixture.intersection
            if nodes.get(node.id) != node:
                raise TopologyError(
                    f"signal fixture on unknown intersection {node.id}"
                )
            if not node.has_signal:
                raise TopologyError(
                    f"intersection {node.id} has a fixture but no signal flag"
                )
            if node.id in lights:
                raise TopologyError(f"intersection {node.id} has two fixtures")
            lights[node.id] = fixture

        self._intersections: Mapping[IntersectionId, Intersection] = MappingProxyType(nodes)
        self._roads: Tuple[Road, ...] = road_list
        self._fixtures: Mapping[IntersectionId, SignalFixture] = MappingProxyType(lights)

        # Adjacency lookup, both directions (roads carry no travel direction).
        adjacency: Dict[IntersectionId, List[Intersection]] = {i: [] for i in nodes}
        for road in road_list:
            adjacency[road.start.id].append(road.end)
            adjacency[road.end.id].append(road.start)
        self._adjacency = {i: tuple(n) for i, n in adjacency.items()}

    # ── queries ───────────────────────────────────────────────────────────

    @property
    def intersections(self) -> Mapping[IntersectionId, Intersection]:
        return self._intersections

    @property
    def roads(self) -> Tuple[Road, ...]:
        return self._roads

    @property
    def fixtures(self) -> Mapping[IntersectionId, SignalFixture]:
        return self._fixtures

    def intersection(self, int_id: IntersectionId) -> Optional[Intersection]:
        return self._intersections.get(int_id)

    def fixture_for(self, int_id: IntersectionId) -> Optional[SignalFixture]:
        return self._fixtures.get(int_id)

    def neighbours(self, int_id: IntersectionId) -> Tuple[Intersection, ...]:
        """Intersections reachable from *int_id* over a single road."""
        return self._adjacency.get(int_id, ())

    def baseline_phases(self) -> Dict[IntersectionId, Phase]:
        """Authoritative phase per fixture, keyed by intersection id."""
        return {int_id: f.phase for int_id, f in self._fixtures.items()}

    def __repr__(self) -> str:
        return (
            f"Topology(intersections={len(self._intersections)}, "
            f"roads={len(self._roads)}, fixtures={len(self._fixtures)})"
        )
