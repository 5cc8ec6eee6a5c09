#!/usr/bin/env python3

from .types import ColorRGB, Viewport
from .constants import ViewConstants
from .helpers import ViewHelpers, render_text
from .draw_network import NetworkRenderer
from .draw_vehicles import VehicleRenderer
from .hud import HudRenderer
from .pygame_view import FeedView, run_feed_view

__all__ = [
    "ColorRGB",
    "Viewport",
    "ViewConstants",
    "ViewHelpers",
    "render_text",
    "NetworkRenderer",
    "VehicleRenderer",
    "HudRenderer",
    "FeedView",
    "run_feed_view",
]
