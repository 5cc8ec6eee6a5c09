#!/usr/bin/env python3
"""Vehicle marker rendering (mixin)."""

from __future__ import annotations

from typing import Sequence

import pygame

from world.dynamic_state import Vehicle


class VehicleRenderer:
    """Mixin that draws one dot per vehicle at its reported position."""

    def draw_vehicles(self, surface: pygame.Surface, vehicles: Sequence[Vehicle]) -> None:
        radius = self.VEHICLE_DIAMETER // 2
        for vehicle in vehicles:
            pygame.draw.circle(
                surface, self.VEHICLE_COLOR,
                self._screen_point(vehicle.x, vehicle.y), radius,
            )
