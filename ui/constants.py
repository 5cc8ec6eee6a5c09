#!/usr/bin/env python3
"""Visual constants shared across all renderers."""

from __future__ import annotations

from .types import ColorRGB


class ViewConstants:
    """Mixin providing every visual / layout constant."""

    BG_COLOR: ColorRGB = (240, 240, 240)
    ROAD_COLOR: ColorRGB = (150, 150, 150)
    INTERSECTION_COLOR: ColorRGB = (100, 150, 255)
    LIGHT_GREEN: ColorRGB = (0, 255, 0)
    LIGHT_RED: ColorRGB = (255, 0, 0)
    VEHICLE_COLOR: ColorRGB = (220, 20, 60)
    HUD_TEXT_COLOR: ColorRGB = (40, 40, 40)
    HUD_WARNING_COLOR: ColorRGB = (200, 30, 30)

    ROAD_WIDTH = 4
    INTERSECTION_DIAMETER = 10
    LIGHT_SIZE = 10
    VEHICLE_DIAMETER = 8

    WINDOW_TITLE = "TRAFFIC FEED VIEWER"
