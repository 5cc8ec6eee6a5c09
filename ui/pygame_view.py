#!/usr/bin/env python3
"""
Main view class — combines all UI mixins into one runnable Pygame window.

Module layout
─────────────
    ui/
    ├── types.py           – ColorRGB, Viewport
    ├── constants.py       – ViewConstants mixin (all class-level constants)
    ├── helpers.py         – ViewHelpers mixin  (fonts, text, pixel access)
    ├── draw_network.py    – NetworkRenderer mixin (roads, nodes, signal heads)
    ├── draw_vehicles.py   – VehicleRenderer mixin (vehicle markers)
    ├── hud.py             – HudRenderer mixin  (status line)
    └── pygame_view.py     – FeedView (this file – main loop)
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import pygame

from world.app_state import WorldSnapshot

from .constants import ViewConstants
from .draw_network import NetworkRenderer
from .draw_vehicles import VehicleRenderer
from .helpers import ViewHelpers
from .hud import HudRenderer
from .types import Viewport

log = logging.getLogger(__name__)


class FeedView(
    ViewConstants,
    ViewHelpers,
    NetworkRenderer,
    VehicleRenderer,
    HudRenderer,
):
    """Live traffic-feed visualiser powered by Pygame.

    Rendering is a pure function of the snapshot handed to
    :meth:`render`; only the :class:`Viewport` survives between frames.
    """

    def __init__(self, session: Any, width: int = 1000, height: int = 700, fps: int = 60):
        self.session = session
        self.viewport = Viewport(width, height)
        self.fps = fps

        self.screen: Optional[pygame.Surface] = None
        self.clock: Optional[pygame.time.Clock] = None
        self.font_small: Optional[pygame.font.Font] = None

    # ------------------------------------------------------------------ #
    #  Frame                                                               #
    # ------------------------------------------------------------------ #
    def render(self, surface: pygame.Surface, snapshot: WorldSnapshot) -> None:
        """Paint one frame of *snapshot* onto *surface*."""
        surface.fill(self.BG_COLOR)
        topology = snapshot.topology
        if topology is None:
            return
        self.draw_roads(surface, topology)
        self.draw_intersections(surface, topology)
        self.draw_signal_heads(surface, topology, snapshot.phases)
        self.draw_vehicles(surface, snapshot.vehicles)

    def render_frame(self, snapshot: WorldSnapshot) -> pygame.Surface:
        """Render *snapshot* onto a new off-screen surface of viewport size."""
        surface = pygame.Surface(self.viewport.size)
        self.render(surface, snapshot)
        return surface

    # ------------------------------------------------------------------ #
    #  Resize                                                              #
    # ------------------------------------------------------------------ #
    def _handle_resize(self, new_w: int, new_h: int) -> None:
        size = self.viewport.resize(new_w, new_h)
        self.screen = pygame.display.set_mode(size, pygame.RESIZABLE)

    # ------------------------------------------------------------------ #
    #  State update                                                        #
    # ------------------------------------------------------------------ #
    def _pump_session(self) -> None:
        try:
            self.session.pump()
        except Exception:
            log.exception("state update failed; keeping last snapshot")

    # ------------------------------------------------------------------ #
    #  Main loop                                                           #
    # ------------------------------------------------------------------ #
    def run(self) -> None:
        pygame.init()
        pygame.display.set_caption(self.WINDOW_TITLE)
        self.screen = pygame.display.set_mode(self.viewport.size, pygame.RESIZABLE)
        self.clock = pygame.time.Clock()
        self.font_small = self._load_font(13, bold=False)

        running = True
        while running:
            self.clock.tick(self.fps)

            # ---- events ------------------------------------------------- #
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.VIDEORESIZE:
                    self._handle_resize(event.w, event.h)

            # ---- state -------------------------------------------------- #
            self._pump_session()

            # ---- render ------------------------------------------------- #
            self.render(self.screen, self.session.snapshot())
            self.draw_hud(self.screen, self.session.status())

            pygame.display.flip()

        pygame.quit()


# ---------------------------------------------------------------------- #
#  Convenience entry point                                                 #
# ---------------------------------------------------------------------- #
def run_feed_view(
    session: Any, width: int = 1000, height: int = 700, fps: int = 60
) -> None:
    view = FeedView(session=session, width=width, height=height, fps=fps)
    view.run()


if __name__ == "__main__":
    raise SystemExit(
        "pygame_view.py needs a session object. Run `python main.py` "
        "or call run_feed_view(your_session)."
    )
