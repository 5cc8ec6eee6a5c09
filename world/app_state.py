"""
world/app_state.py
==================
Explicit application state owned by the session controller.

:class:`AppState` groups the Topology Store, the Dynamic State Store, the
authoritative phase baseline and the inference engine. Every mutation
goes through its methods, which are called from the render thread only.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional, Tuple

from .dynamic_state import DynamicState, DynamicStateStore, Vehicle, VehicleBatch
from .errors import StateError
from .network import IntersectionId, Phase, Topology
from .signal_inference import InferenceMode, SignalPhaseInference
from .topology_store import TopologyStore

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorldSnapshot:
    """Everything the renderer needs for one frame."""

    topology: Optional[Topology] = None
    vehicles: Tuple[Vehicle, ...] = ()
    phases: Mapping[IntersectionId, Phase] = field(
        default_factory=lambda: MappingProxyType({})
    )


class AppState:
    """Topology + dynamic state + phase baseline for one viewer session."""

    def __init__(self, inference_mode: InferenceMode = InferenceMode.OBSERVED) -> None:
        self.inference_mode = inference_mode
        self.topology_store = TopologyStore()
        self.dynamic_store = DynamicStateStore()
        self._baseline: Dict[IntersectionId, Phase] = {}
        self._inference: Optional[SignalPhaseInference] = None

    # ── properties ────────────────────────────────────────────────────────

    @property
    def topology(self) -> Optional[Topology]:
        return self.topology_store.topology

    @property
    def baseline(self) -> Mapping[IntersectionId, Phase]:
        return MappingProxyType(self._baseline)

    @property
    def dynamic(self) -> DynamicState:
        return self.dynamic_store.current

    # ── mutations ─────────────────────────────────────────────────────────

    def install_topology(self, source: Callable[[], Topology]) -> Topology:
        """Load the topology and seed the phase mapping with its baseline."""
        topology = self.topology_store.load(source)
        self._baseline = topology.baseline_phases()
        self._inference = SignalPhaseInference(topology, self.inference_mode)
        self.dynamic_store.replace((), self._baseline)
        return topology

    def apply_update(self, batch: VehicleBatch) -> DynamicState:
        """Replace the dynamic state with *batch*."""
        topology = self._require_topology()
        previous = self.dynamic_store.current.phases

        if batch.signals is not None:
            for int_id in batch.signals:
                if topology.fixture_for(int_id) is None:
                    raise StateError(f"signal state for unknown fixture {int_id}")
            # Transmitted phases are authoritative: they become the baseline.
            self._baseline.update(batch.signals)
            phases = dict(previous)
            phases.update(batch.signals)
        else:
            phases = self._inference.infer(
                batch.vehicles, self._baseline, previous,
            )

        return self.dynamic_store.replace(batch.vehicles, phases)

    def apply_baseline(self, phases: Mapping[IntersectionId, Phase]) -> DynamicState:
        """Adopt a refreshed authoritative baseline.

        Entries for intersections without a fixture are ignored. The phase
        mapping is overwritten for every refreshed fixture; vehicles are
        carried over unchanged.
        """
        topology = self._require_topology()
        fresh = {
            int_id: phase for int_id, phase in phases.items()
            if topology.fixture_for(int_id) is not None
        }
        ignored = len(phases) - len(fresh)
        if ignored:
            log.warning("baseline refresh ignored %d unknown fixture(s)", ignored)

        self._baseline.update(fresh)
        current = self.dynamic_store.current
        merged = dict(current.phases)
        merged.update(fresh)
        return self.dynamic_store.replace(current.vehicles, merged)

    # ── read path ─────────────────────────────────────────────────────────

    def snapshot(self) -> WorldSnapshot:
        current = self.dynamic_store.current
        return WorldSnapshot(
            topology=self.topology_store.topology,
            vehicles=current.vehicles,
            phases=current.phases,
        )

    def _require_topology(self) -> Topology:
        topology = self.topology_store.topology
        if topology is None or self._inference is None:
            raise StateError("dynamic update received before topology was loaded")
        return topology
