#!/usr/bin/env python3
"""
main.py
=======
Viewer entry point: configure logging, load settings from the
environment, start the session and open the Pygame window.

If the topology cannot be loaded the window still opens and shows the
failure in the status line; the feed is never connected.
"""

import logging
from typing import Optional

from config import ViewerSettings
from logging_setup import setup_logging
from feed.session import SessionController
from ui.pygame_view import run_feed_view


def main(settings: Optional[ViewerSettings] = None) -> int:
    settings = settings or ViewerSettings.from_env()
    setup_logging(settings.log_level_value)
    log = logging.getLogger("main")
    log.info("Starting viewer (layout=%s feed=%s mode=%s)",
             settings.topology_url, settings.feed_url, settings.inference_mode)

    session = SessionController(settings)
    session.start()

    try:
        run_feed_view(session, width=settings.width, height=settings.height,
                      fps=settings.fps)
    except KeyboardInterrupt:
        log.info("Shutting down...")
    finally:
        session.stop()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
