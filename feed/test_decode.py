#!/usr/bin/env python3
"""
Tests for decoding the layout document and streamed feed messages.
"""

from __future__ import annotations

import json
import unittest

from feed.decode import decode_baseline, decode_feed_message, decode_topology
from feed.errors import FeedFormatError
from world.errors import TopologyError
from world.network import Phase

NODE_A = {"id": 1, "xcoordinate": 0, "ycoordinate": 0, "hasTrafficLight": False}
NODE_B = {"id": 2, "xcoordinate": 100, "ycoordinate": 0, "hasTrafficLight": True}


def layout_document(state: str = "EW_GREEN") -> dict:
    return {
        "intersections": [NODE_A, NODE_B],
        "roads": [{"id": 10, "startIntersection": NODE_A, "endIntersection": NODE_B}],
        "trafficLights": [{"id": 20, "intersection": NODE_B, "currentState": state}],
    }


def scenario_message() -> str:
    return json.dumps([{
        "id": 0,
        "x": 50.0,
        "y": 0.0,
        "path": [NODE_A, NODE_B],
        "currentPathIndex": 1,
        "currentTargetIntersection": NODE_B,
        "destination": NODE_B,
    }])


class DecodeTopologyTests(unittest.TestCase):
    def test_scenario_layout(self) -> None:
        topology = decode_topology(layout_document())
        self.assertEqual(set(topology.intersections), {1, 2})
        self.assertFalse(topology.intersections[1].has_signal)
        self.assertTrue(topology.intersections[2].has_signal)
        self.assertEqual(len(topology.roads), 1)
        self.assertEqual(topology.baseline_phases(), {2: Phase.EW_GREEN})

    def test_bare_id_references(self) -> None:
        doc = {
            "intersections": [
                {"id": 1, "xcoordinate": 0, "ycoordinate": 0},
                {"id": 2, "xcoordinate": 100, "ycoordinate": 0},
            ],
            "roads": [{"startIntersection": 1, "endIntersection": 2}],
            "trafficLights": [{"intersection": 2, "currentState": "NS_GREEN"}],
        }
        topology = decode_topology(doc)
        # A traffic light marks its intersection as signal-bearing.
        self.assertTrue(topology.intersections[2].has_signal)
        self.assertEqual(topology.roads[0].end.x, 100.0)
        self.assertEqual(topology.baseline_phases(), {2: Phase.NS_GREEN})

    def test_dangling_road_reference(self) -> None:
        doc = layout_document()
        doc["roads"].append({"startIntersection": 1, "endIntersection": 99})
        with self.assertRaises(TopologyError):
            decode_topology(doc)

    def test_unknown_phase_value(self) -> None:
        with self.assertRaises(TopologyError):
            decode_topology(layout_document(state="YELLOW"))

    def test_missing_intersections(self) -> None:
        with self.assertRaises(TopologyError):
            decode_topology({"roads": []})

    def test_baseline_from_refetched_layout(self) -> None:
        topology = decode_topology(layout_document())
        phases = decode_baseline(layout_document(state="NS_GREEN"), topology)
        self.assertEqual(phases, {2: Phase.NS_GREEN})


class DecodeFeedMessageTests(unittest.TestCase):
    def setUp(self) -> None:
        self.topology = decode_topology(layout_document())

    def test_scenario_vehicle(self) -> None:
        batch = decode_feed_message(scenario_message(), self.topology)
        self.assertIsNone(batch.signals)
        (vehicle,) = batch.vehicles
        self.assertEqual((vehicle.x, vehicle.y), (50.0, 0.0))
        self.assertEqual(vehicle.approaching, self.topology.intersections[2])
        self.assertTrue(vehicle.approaching_has_signal)
        self.assertEqual(vehicle.previous_waypoint, self.topology.intersections[1])

    def test_empty_array(self) -> None:
        self.assertEqual(decode_feed_message("[]", self.topology).vehicles, ())

    def test_null_target_and_missing_id(self) -> None:
        raw = json.dumps([{"x": 1, "y": 2, "path": [1, 2],
                           "currentPathIndex": 2, "currentTargetIntersection": None}])
        (vehicle,) = decode_feed_message(raw, self.topology).vehicles
        self.assertEqual(vehicle.id, 0)
        self.assertIsNone(vehicle.approaching)
        self.assertFalse(vehicle.approaching_has_signal)

    def test_embedded_flag_is_copied(self) -> None:
        target = dict(NODE_B, hasTrafficLight=False)
        raw = json.dumps([{"x": 1, "y": 0, "path": [1, 2],
                           "currentPathIndex": 1, "currentTargetIntersection": target}])
        (vehicle,) = decode_feed_message(raw, self.topology).vehicles
        self.assertFalse(vehicle.approaching_has_signal)

    def test_bare_target_falls_back_to_topology_flag(self) -> None:
        raw = json.dumps([{"x": 1, "y": 0, "path": [1, 2],
                           "currentPathIndex": 1, "currentTargetIntersection": 2}])
        (vehicle,) = decode_feed_message(raw, self.topology).vehicles
        self.assertTrue(vehicle.approaching_has_signal)

    def test_direct_signal_frame(self) -> None:
        raw = json.dumps({
            "cars": [],
            "trafficLights": [{"intersection": 2, "currentState": "NS_GREEN"}],
        })
        batch = decode_feed_message(raw, self.topology)
        self.assertEqual(dict(batch.signals), {2: Phase.NS_GREEN})

    def test_malformed_messages(self) -> None:
        bad = [
            "{not json",
            '{"cars": []}',
            '[{"x": "fast", "y": 0}]',
            json.dumps([{"x": 1, "y": 1, "path": [1, 77], "currentPathIndex": 1}]),
            json.dumps([{"x": 1, "y": 1, "path": [True, 2], "currentPathIndex": 1}]),
            json.dumps([{"x": 1, "y": 1, "path": [1, 2], "currentPathIndex": 1,
                         "currentTargetIntersection": False}]),
            json.dumps({"cars": [], "trafficLights": [
                {"intersection": 1, "currentState": "EW_GREEN"}]}),
        ]
        for raw in bad:
            with self.subTest(raw=raw):
                with self.assertRaises(FeedFormatError):
                    decode_feed_message(raw, self.topology)


if __name__ == "__main__":
    unittest.main()
