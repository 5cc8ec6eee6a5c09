"""
backend — Demo traffic backend
==============================

Modules
-------
demo_network
    Grid topology, A* routing and :class:`DemoSimulation`.
api
    FastAPI application serving the layout and the vehicle stream.
"""

from .demo_network import DemoSimulation, demo_topology, find_shortest_path
from .api import create_app, serve

__all__ = [
    "DemoSimulation",
    "demo_topology",
    "find_shortest_path",
    "create_app",
    "serve",
]
