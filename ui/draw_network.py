#!/usr/bin/env python3
"""Road network rendering: roads, intersection nodes and signal heads (mixin)."""

from __future__ import annotations

from typing import Dict, Mapping, Tuple

import pygame

from world.network import Axis, IntersectionId, Phase, Topology

# Offsets (in LIGHT_SIZE units) of each signal head's top-left corner.
_HEAD_OFFSETS: Dict[str, Tuple[float, float]] = {
    "N": (-0.5, -1.5),
    "S": (-0.5, 0.5),
    "W": (-1.5, -0.5),
    "E": (0.5, -0.5),
}

_HEAD_AXIS: Dict[str, Axis] = {
    "N": Axis.VERTICAL,
    "S": Axis.VERTICAL,
    "W": Axis.HORIZONTAL,
    "E": Axis.HORIZONTAL,
}


class NetworkRenderer:
    """Mixin that draws the static topology and its signal phases."""

    def draw_roads(self, surface: pygame.Surface, topology: Topology) -> None:
        for road in topology.roads:
            pygame.draw.line(
                surface,
                self.ROAD_COLOR,
                self._screen_point(road.start.x, road.start.y),
                self._screen_point(road.end.x, road.end.y),
                self.ROAD_WIDTH,
            )

    def draw_intersections(self, surface: pygame.Surface, topology: Topology) -> None:
        radius = self.INTERSECTION_DIAMETER // 2
        for node in topology.intersections.values():
            pygame.draw.circle(
                surface, self.INTERSECTION_COLOR,
                self._screen_point(node.x, node.y), radius,
            )

    def draw_signal_heads(
        self,
        surface: pygame.Surface,
        topology: Topology,
        phases: Mapping[IntersectionId, Phase],
    ) -> None:
        """Four heads per fixture: green on the green axis, red across it.

        Fixtures without a phase entry are left as plain nodes.
        """
        size = self.LIGHT_SIZE
        for int_id, fixture in topology.fixtures.items():
            phase = phases.get(int_id)
            if phase is None:
                continue
            node = fixture.intersection
            for head, (ox, oy) in _HEAD_OFFSETS.items():
                color = (
                    self.LIGHT_GREEN if _HEAD_AXIS[head] is phase.green_axis
                    else self.LIGHT_RED
                )
                left, top = self._screen_point(node.x + ox * size, node.y + oy * size)
                pygame.draw.rect(surface, color, pygame.Rect(left, top, size, size))
