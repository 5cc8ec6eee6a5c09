"""
world/signal_inference.py
=========================
Reconstructs per-intersection signal phases from vehicle trajectories
when the feed carries vehicles only.

Evidence is a vehicle whose current target bears a signal fixture. Its
direction of travel is the segment from the previous path waypoint to
that target, classified by :func:`~world.network.classify_axis`.

Two modes are available:

``OBSERVED``
    Classifies every piece of evidence but assigns the fixture's baseline
    phase regardless of the axis, so the result always equals the
    baseline.
``EVIDENCE``
    Gives green to the axis that has strictly more approaching vehicles.
    Intersections without a majority keep their previous phase.
"""

from __future__ import annotations

import logging
from collections import Counter
from enum import Enum
from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple

from .dynamic_state import Vehicle
from .network import Axis, IntersectionId, Phase, Topology, classify_axis

log = logging.getLogger(__name__)


class InferenceMode(str, Enum):
    OBSERVED = "observed"
    EVIDENCE = "evidence"

    @classmethod
    def parse(cls, value: str) -> "InferenceMode":
        try:
            return cls(value.strip().lower())
        except ValueError:
            raise ValueError(
                f"unknown inference mode {value!r}; "
                f"expected one of {[m.value for m in cls]}"
            ) from None


class SignalPhaseInference:
    """Phase inference engine bound to one :class:`Topology`.

    Parameters
    ----------
    topology : Topology
        Static network; fixtures define which intersections are eligible.
    mode : InferenceMode
        See the module docstring.
    """

    def __init__(
        self,
        topology: Topology,
        mode: InferenceMode = InferenceMode.OBSERVED,
    ) -> None:
        self.topology = topology
        self.mode = mode

    # ── evidence ──────────────────────────────────────────────────────────

    def evidence(
        self, vehicles: Iterable[Vehicle],
    ) -> Iterator[Tuple[IntersectionId, Axis]]:
        """Yield ``(intersection_id, axis)`` for each usable vehicle."""
        for vehicle in vehicles:
            target = vehicle.approaching
            if target is None or not vehicle.approaching_has_signal:
                continue
            if self.topology.fixture_for(target.id) is None:
                continue
            origin = vehicle.previous_waypoint
            if origin is None:
                log.debug("vehicle %s has no previous waypoint, skipped", vehicle.id)
                continue
            yield target.id, classify_axis(origin, target)

    # ── inference ─────────────────────────────────────────────────────────

    def infer(
        self,
        vehicles: Iterable[Vehicle],
        baseline: Mapping[IntersectionId, Phase],
        previous: Optional[Mapping[IntersectionId, Phase]] = None,
    ) -> Dict[IntersectionId, Phase]:
        """Return the working phase mapping for one vehicle batch."""
        if self.mode is InferenceMode.EVIDENCE:
            return self._infer_from_votes(vehicles, baseline, previous)

        working = dict(baseline)
        for int_id, _axis in self.evidence(vehicles):
            # The fixture's known phase is reused whichever axis was seen.
            working[int_id] = baseline.get(
                int_id, self.topology.fixtures[int_id].phase
            )
        return working

    def _infer_from_votes(
        self,
        vehicles: Iterable[Vehicle],
        baseline: Mapping[IntersectionId, Phase],
        previous: Optional[Mapping[IntersectionId, Phase]],
    ) -> Dict[IntersectionId, Phase]:
        working = dict(baseline)
        if previous:
            working.update(
                (int_id, phase) for int_id, phase in previous.items()
                if int_id in working
            )

        votes: Dict[IntersectionId, Counter] = {}
        for int_id, axis in self.evidence(vehicles):
            votes.setdefault(int_id, Counter())[axis] += 1

        for int_id, tally in votes.items():
            horizontal = tally[Axis.HORIZONTAL]
            vertical = tally[Axis.VERTICAL]
            if horizontal == vertical:
                continue
            winner = Axis.HORIZONTAL if horizontal > vertical else Axis.VERTICAL
            working[int_id] = Phase.for_axis(winner)
        return working
