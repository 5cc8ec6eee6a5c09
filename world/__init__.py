"""
world — Viewer state model
==========================

Modules
-------
network
    :class:`Topology`, :class:`Intersection`, :class:`Road`,
    :class:`SignalFixture`, :class:`Phase`, :class:`Axis`.
topology_store
    :class:`TopologyStore` one-shot holder.
dynamic_state
    :class:`Vehicle`, :class:`VehicleBatch`, :class:`DynamicStateStore`.
signal_inference
    :class:`SignalPhaseInference` phase reconstruction from trajectories.
app_state
    :class:`AppState` and :class:`WorldSnapshot`.
"""

from .errors import StateError, TopologyError, TrafficViewError
from .network import (
    Axis, Intersection, IntersectionId, Phase, Road, SignalFixture, Topology,
    classify_axis,
)
from .topology_store import TopologyStore
from .dynamic_state import DynamicState, DynamicStateStore, Vehicle, VehicleBatch
from .signal_inference import InferenceMode, SignalPhaseInference
from .app_state import AppState, WorldSnapshot

__all__ = [
    "TrafficViewError",
    "TopologyError",
    "StateError",
    "Axis",
    "Intersection",
    "IntersectionId",
    "Phase",
    "Road",
    "SignalFixture",
    "Topology",
    "classify_axis",
    "TopologyStore",
    "DynamicState",
    "DynamicStateStore",
    "Vehicle",
    "VehicleBatch",
    "InferenceMode",
    "SignalPhaseInference",
    "AppState",
    "WorldSnapshot",
]
