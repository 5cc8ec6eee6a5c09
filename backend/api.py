"""
backend/api.py
==============
FastAPI demo backend speaking the same protocol as the real simulation.

Endpoints::

    GET /api/map/layout     → layout document (intersections, roads, lights)
    WS  /ws/simulation      → one JSON array of cars per tick

Start the server::

    python -m backend.api          # → http://127.0.0.1:8082

.. note::

   This server is **not** the authoritative simulation. It exists so the
   viewer can be run and tested without the real backend.
"""

from __future__ import annotations

import asyncio
import json
import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, WebSocket, WebSocketDisconnect

from config import DEMO_HOST, DEMO_PORT

from .demo_network import DemoSimulation, demo_topology

log = logging.getLogger(__name__)

DEFAULT_TICK_S = 0.033


async def _stop_sender(task: "asyncio.Task[None]") -> None:
    """Cancel the per-connection sender and collect how it ended."""
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass
    except Exception:
        log.exception("feed sender failed")


def create_app(
    simulation: Optional[DemoSimulation] = None,
    tick_s: float = DEFAULT_TICK_S,
) -> FastAPI:
    """Build the demo application around *simulation*."""
    simulation = simulation or DemoSimulation(demo_topology())

    async def _advance() -> None:
        while True:
            simulation.step()
            await asyncio.sleep(tick_s)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        task = asyncio.create_task(_advance())
        log.info("demo simulation started (tick %.3f s)", tick_s)
        try:
            yield
        finally:
            task.cancel()
            log.info("demo simulation stopped")

    app = FastAPI(
        title="Traffic Demo Backend",
        description="Serves a demo road network and streams vehicle ticks.",
        version="1.0",
        lifespan=lifespan,
    )
    app.state.simulation = simulation

    @app.get("/api/map/layout")
    def map_layout() -> dict:
        """Static layout with the fixtures' current phases."""
        return simulation.layout_payload()

    @app.websocket("/ws/simulation")
    async def simulation_feed(websocket: WebSocket) -> None:
        await websocket.accept()
        log.info("feed client connected")

        async def _stream() -> None:
            while True:
                await websocket.send_text(json.dumps(simulation.cars_payload()))
                await asyncio.sleep(tick_s)

        sender = asyncio.create_task(_stream())
        try:
            # Incoming messages are ignored; receiving detects the disconnect.
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            log.info("feed client disconnected")
        finally:
            await _stop_sender(sender)

    return app


def serve(host: str = DEMO_HOST, port: int = DEMO_PORT) -> None:
    uvicorn.run(create_app(), host=host, port=port)


# ── Standalone entry point ───────────────────────────────────────────────────

if __name__ == "__main__":
    print(f"Starting demo backend on http://{DEMO_HOST}:{DEMO_PORT} …")
    serve()
