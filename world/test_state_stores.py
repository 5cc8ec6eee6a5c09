#!/usr/bin/env python3
"""
Tests for topology validation, the one-shot topology store, wholesale
dynamic-state replacement and the application state object.
"""

from __future__ import annotations

import unittest

from world.app_state import AppState
from world.dynamic_state import DynamicStateStore, Vehicle, VehicleBatch
from world.errors import StateError, TopologyError
from world.network import Intersection, Phase, Road, SignalFixture, Topology
from world.signal_inference import InferenceMode
from world.topology_store import TopologyStore

A = Intersection(id=1, x=0.0, y=0.0)
B = Intersection(id=2, x=100.0, y=0.0, has_signal=True)


def _topology() -> Topology:
    return Topology([A, B], [Road(A, B)], [SignalFixture(B, Phase.EW_GREEN)])


def _vehicle(vid: int, x: float = 0.0, y: float = 0.0) -> Vehicle:
    return Vehicle(id=vid, x=x, y=y, path=(A, B), path_index=1,
                   approaching=B, approaching_has_signal=True)


class TopologyValidationTests(unittest.TestCase):
    def test_dangling_road_endpoint_rejected(self) -> None:
        stray = Intersection(id=9, x=5.0, y=5.0)
        with self.assertRaises(TopologyError):
            Topology([A, B], [Road(A, stray)])

    def test_endpoint_with_same_id_but_other_position_rejected(self) -> None:
        moved = Intersection(id=2, x=50.0, y=50.0, has_signal=True)
        with self.assertRaises(TopologyError):
            Topology([A, B], [Road(A, moved)])

    def test_duplicate_fixture_rejected(self) -> None:
        with self.assertRaises(TopologyError):
            Topology([A, B], [], [
                SignalFixture(B, Phase.EW_GREEN),
                SignalFixture(B, Phase.NS_GREEN),
            ])

    def test_fixture_on_unflagged_intersection_rejected(self) -> None:
        with self.assertRaises(TopologyError):
            Topology([A, B], [], [SignalFixture(A, Phase.EW_GREEN)])

    def test_duplicate_intersection_id_rejected(self) -> None:
        with self.assertRaises(TopologyError):
            Topology([A, Intersection(id=1, x=1.0, y=1.0)])

    def test_neighbours_are_bidirectional(self) -> None:
        topology = _topology()
        self.assertEqual(topology.neighbours(A.id), (B,))
        self.assertEqual(topology.neighbours(B.id), (A,))
        self.assertEqual(topology.baseline_phases(), {B.id: Phase.EW_GREEN})


class TopologyStoreTests(unittest.TestCase):
    def test_loads_exactly_once(self) -> None:
        store = TopologyStore()
        self.assertFalse(store.loaded)
        topology = store.load(_topology)
        self.assertIs(store.topology, topology)
        with self.assertRaises(TopologyError):
            store.load(_topology)

    def test_failed_source_leaves_store_empty(self) -> None:
        store = TopologyStore()

        def broken() -> Topology:
            raise TopologyError("nope")

        with self.assertRaises(TopologyError):
            store.load(broken)
        self.assertIsNone(store.topology)


class DynamicStateStoreTests(unittest.TestCase):
    def test_replacement_is_wholesale(self) -> None:
        store = DynamicStateStore()
        store.replace([_vehicle(1), _vehicle(2)], {})
        store.replace([_vehicle(3)], {})
        self.assertEqual([v.id for v in store.current.vehicles], [3])

    def test_empty_batch_empties_vehicle_set(self) -> None:
        store = DynamicStateStore()
        store.replace([_vehicle(1)], {})
        store.replace([], {})
        self.assertEqual(store.current.vehicles, ())

    def test_old_snapshot_is_untouched_by_replacement(self) -> None:
        store = DynamicStateStore()
        first = store.replace([_vehicle(1)], {B.id: Phase.EW_GREEN})
        second = store.replace([_vehicle(2)], {B.id: Phase.NS_GREEN})
        self.assertEqual(first.vehicles[0].id, 1)
        self.assertEqual(first.phases[B.id], Phase.EW_GREEN)
        self.assertEqual(second.revision, first.revision + 1)
        with self.assertRaises(TypeError):
            second.phases[B.id] = Phase.EW_GREEN  # type: ignore[index]


class AppStateTests(unittest.TestCase):
    def test_update_before_topology_is_rejected(self) -> None:
        state = AppState()
        with self.assertRaises(StateError):
            state.apply_update(VehicleBatch(vehicles=()))
        self.assertIsNone(state.snapshot().topology)

    def test_install_seeds_baseline(self) -> None:
        state = AppState()
        state.install_topology(_topology)
        self.assertEqual(dict(state.snapshot().phases), {B.id: Phase.EW_GREEN})

    def test_nth_batch_wins(self) -> None:
        state = AppState()
        state.install_topology(_topology)
        for n in range(1, 4):
            state.apply_update(VehicleBatch(
                vehicles=tuple(_vehicle(n * 10 + i) for i in range(n))
            ))
        self.assertEqual([v.id for v in state.snapshot().vehicles], [30, 31, 32])

    def test_direct_signals_override_phase(self) -> None:
        state = AppState()
        state.install_topology(_topology)
        state.apply_update(VehicleBatch(vehicles=(), signals={B.id: Phase.NS_GREEN}))
        self.assertEqual(state.snapshot().phases[B.id], Phase.NS_GREEN)

    def test_direct_signals_survive_vehicle_only_batches(self) -> None:
        state = AppState()
        state.install_topology(_topology)
        state.apply_update(VehicleBatch(vehicles=(), signals={B.id: Phase.NS_GREEN}))
        state.apply_update(VehicleBatch(vehicles=()))
        self.assertEqual(state.snapshot().phases[B.id], Phase.NS_GREEN)
        state.apply_update(VehicleBatch(vehicles=(_vehicle(4),)))
        self.assertEqual(state.snapshot().phases[B.id], Phase.NS_GREEN)
        self.assertEqual(state.baseline[B.id], Phase.NS_GREEN)

    def test_direct_signals_for_unknown_fixture_rejected(self) -> None:
        state = AppState()
        state.install_topology(_topology)
        with self.assertRaises(StateError):
            state.apply_update(VehicleBatch(vehicles=(), signals={A.id: Phase.NS_GREEN}))
        self.assertEqual(state.snapshot().phases[B.id], Phase.EW_GREEN)

    def test_baseline_refresh_overwrites_phase_and_keeps_vehicles(self) -> None:
        state = AppState()
        state.install_topology(_topology)
        state.apply_update(VehicleBatch(vehicles=(_vehicle(7),)))
        state.apply_baseline({B.id: Phase.NS_GREEN, A.id: Phase.EW_GREEN})
        snap = state.snapshot()
        self.assertEqual(dict(snap.phases), {B.id: Phase.NS_GREEN})
        self.assertEqual([v.id for v in snap.vehicles], [7])
        self.assertEqual(state.baseline[B.id], Phase.NS_GREEN)

    def test_evidence_mode_persists_phase_across_empty_batches(self) -> None:
        # Vertical approach into B: previous waypoint directly above it.
        above = Intersection(id=3, x=100.0, y=-100.0)
        topo = Topology([A, B, above], [Road(A, B), Road(above, B)],
                        [SignalFixture(B, Phase.EW_GREEN)])
        state = AppState(InferenceMode.EVIDENCE)
        state.install_topology(lambda: topo)
        state.apply_update(VehicleBatch(vehicles=(Vehicle(
            id=1, x=100.0, y=-50.0, path=(above, B), path_index=1,
            approaching=B, approaching_has_signal=True,
        ),)))
        self.assertEqual(state.snapshot().phases[B.id], Phase.NS_GREEN)
        state.apply_update(VehicleBatch(vehicles=()))
        self.assertEqual(state.snapshot().phases[B.id], Phase.NS_GREEN)


if __name__ == "__main__":
    unittest.main()
