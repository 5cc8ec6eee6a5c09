#!/usr/bin/env python3
"""
Quick demo — runs the demo backend in-process and opens the viewer on it,
so you can see the UI without the real simulation backend.

Usage:
    python3 demo.py

Environment overrides (``TRAFFIC_VIEW_*``) still apply, except that both
endpoints are pointed at the local demo server.
"""

import dataclasses
import logging
import threading
import time

import uvicorn

from backend.api import create_app
from config import DEMO_HOST, DEMO_PORT, ViewerSettings
from main import main


def start_demo_server(host: str = DEMO_HOST, port: int = DEMO_PORT) -> uvicorn.Server:
    """Run uvicorn in a daemon thread and wait until it accepts connections."""
    server = uvicorn.Server(
        uvicorn.Config(create_app(), host=host, port=port, log_level="warning")
    )
    thread = threading.Thread(target=server.run, daemon=True, name="DemoBackend")
    thread.start()
    deadline = time.time() + 10.0
    while not server.started:
        if time.time() > deadline or not thread.is_alive():
            raise SystemExit(f"demo backend did not start on {host}:{port}")
        time.sleep(0.05)
    return server


if __name__ == "__main__":
    server = start_demo_server()
    settings = dataclasses.replace(
        ViewerSettings.from_env(),
        topology_url=f"http://{DEMO_HOST}:{DEMO_PORT}/api/map/layout",
        feed_url=f"ws://{DEMO_HOST}:{DEMO_PORT}/ws/simulation",
    )
    try:
        main(settings)
    finally:
        server.should_exit = True
        logging.getLogger("demo").info("demo backend stopping")
