#!/usr/bin/env python3
"""
Off-screen rendering tests. Frames are drawn to plain surfaces under the
SDL dummy video driver and inspected through ``pygame.surfarray``.
"""

from __future__ import annotations

import os
import unittest
from types import MappingProxyType

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import numpy as np  # noqa: E402
import pygame  # noqa: E402

from feed.decode import decode_feed_message, decode_topology  # noqa: E402
from feed.test_decode import layout_document, scenario_message  # noqa: E402
from ui.pygame_view import FeedView  # noqa: E402
from ui.types import ColorRGB, Viewport  # noqa: E402
from world.app_state import WorldSnapshot  # noqa: E402
from world.network import Intersection, Phase, Road, SignalFixture, Topology  # noqa: E402

WEST = Intersection(id=1, x=100.0, y=200.0)
CENTRE = Intersection(id=2, x=200.0, y=200.0, has_signal=True)


def frame_pixels(surface: pygame.Surface) -> np.ndarray:
    """Copy *surface* into a ``(width, height, 3)`` RGB array."""
    return pygame.surfarray.array3d(surface)


def color_mask(surface: pygame.Surface, color: ColorRGB) -> np.ndarray:
    """Boolean ``(width, height)`` mask of pixels exactly equal to *color*."""
    return np.all(frame_pixels(surface) == np.array(color, dtype=np.uint8), axis=-1)


def _signal_topology() -> Topology:
    return Topology([WEST, CENTRE], [Road(WEST, CENTRE)],
                    [SignalFixture(CENTRE, Phase.EW_GREEN)])


class RendererTests(unittest.TestCase):
    def setUp(self) -> None:
        self.view = FeedView(session=None, width=400, height=300)

    def _pixel(self, surface: pygame.Surface, x: int, y: int) -> tuple:
        return tuple(int(c) for c in frame_pixels(surface)[x, y])

    def test_no_topology_renders_background_only(self) -> None:
        surface = self.view.render_frame(WorldSnapshot())
        self.assertTrue(color_mask(surface, self.view.BG_COLOR).all())

    def test_empty_vehicle_set_draws_no_vehicles(self) -> None:
        topology = decode_topology(layout_document())
        snapshot = WorldSnapshot(topology=topology, vehicles=(),
                                 phases=MappingProxyType(topology.baseline_phases()))
        surface = self.view.render_frame(snapshot)
        self.assertFalse(color_mask(surface, self.view.VEHICLE_COLOR).any())
        self.assertTrue(color_mask(surface, self.view.ROAD_COLOR).any())

    def test_scenario_vehicle_drawn_at_reported_position(self) -> None:
        topology = decode_topology(layout_document())
        batch = decode_feed_message(scenario_message(), topology)
        snapshot = WorldSnapshot(topology=topology, vehicles=batch.vehicles,
                                 phases=MappingProxyType(topology.baseline_phases()))
        surface = self.view.render_frame(snapshot)
        self.assertEqual(self._pixel(surface, 50, 1), self.view.VEHICLE_COLOR)

    def test_green_axis_heads(self) -> None:
        topology = _signal_topology()
        snapshot = WorldSnapshot(topology=topology,
                                 phases=MappingProxyType({2: Phase.EW_GREEN}))
        surface = self.view.render_frame(snapshot)
        green, red = self.view.LIGHT_GREEN, self.view.LIGHT_RED
        self.assertEqual(self._pixel(surface, 190, 200), green)  # west
        self.assertEqual(self._pixel(surface, 210, 200), green)  # east
        self.assertEqual(self._pixel(surface, 200, 190), red)    # north
        self.assertEqual(self._pixel(surface, 200, 210), red)    # south

    def test_ns_green_flips_heads(self) -> None:
        snapshot = WorldSnapshot(topology=_signal_topology(),
                                 phases=MappingProxyType({2: Phase.NS_GREEN}))
        surface = self.view.render_frame(snapshot)
        self.assertEqual(self._pixel(surface, 190, 200), self.view.LIGHT_RED)
        self.assertEqual(self._pixel(surface, 200, 190), self.view.LIGHT_GREEN)

    def test_fixture_without_phase_is_plain_node(self) -> None:
        snapshot = WorldSnapshot(topology=_signal_topology())
        surface = self.view.render_frame(snapshot)
        self.assertFalse(color_mask(surface, self.view.LIGHT_GREEN).any())
        self.assertFalse(color_mask(surface, self.view.LIGHT_RED).any())
        self.assertEqual(self._pixel(surface, 200, 200), self.view.INTERSECTION_COLOR)

    def test_render_is_a_function_of_the_snapshot(self) -> None:
        snapshot = WorldSnapshot(topology=_signal_topology(),
                                 phases=MappingProxyType({2: Phase.EW_GREEN}))
        first = frame_pixels(self.view.render_frame(snapshot))
        self.view.render_frame(WorldSnapshot())
        second = frame_pixels(self.view.render_frame(snapshot))
        self.assertTrue(np.array_equal(first, second))

    def test_hud_text(self) -> None:
        self.assertIn("TOPOLOGY UNAVAILABLE",
                      self.view.hud_text({"startup_error": "timed out"}))
        text = self.view.hud_text({"connection": "OPEN", "vehicles": 3})
        self.assertIn("FEED OPEN", text)
        self.assertIn("VEHICLES 3", text)


class FailingSession:
    """Session whose update step always raises."""

    def __init__(self, snapshot: WorldSnapshot) -> None:
        self._snapshot = snapshot
        self.pumps = 0

    def pump(self) -> int:
        self.pumps += 1
        raise RuntimeError("bus exploded")

    def snapshot(self) -> WorldSnapshot:
        return self._snapshot


class PumpFailureTests(unittest.TestCase):
    def test_failed_update_is_logged_and_last_snapshot_still_renders(self) -> None:
        snapshot = WorldSnapshot(topology=_signal_topology(),
                                 phases=MappingProxyType({2: Phase.EW_GREEN}))
        session = FailingSession(snapshot)
        view = FeedView(session=session, width=400, height=300)

        with self.assertLogs("ui.pygame_view", level="ERROR") as logs:
            view._pump_session()
            view._pump_session()
        self.assertEqual(session.pumps, 2)
        self.assertEqual(str(logs.records[0].exc_info[1]), "bus exploded")

        surface = view.render_frame(session.snapshot())
        pixel = tuple(int(c) for c in frame_pixels(surface)[190, 200])
        self.assertEqual(pixel, view.LIGHT_GREEN)


class ViewportTests(unittest.TestCase):
    def test_resize_clamps_to_minimum(self) -> None:
        viewport = Viewport(800, 600)
        self.assertEqual(viewport.resize(50, 900), (200, 900))
        self.assertEqual(viewport.size, (200, 900))


if __name__ == "__main__":
    unittest.main()
