"""
backend/demo_network.py
=======================
In-process stand-in for the traffic backend, used by :mod:`demo` and the
tests. It builds a grid :class:`~world.network.Topology`, spawns cars on
A* shortest paths between random intersections and advances them at a
fixed speed. Signal fixtures flip phase on a timer.

The output is produced with the same pydantic models the viewer decodes,
serialised by alias so it matches the backend wire format.
"""

from __future__ import annotations

import heapq
import itertools
import logging
import math
import random
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from feed.schemas import (
    IntersectionRecord, MapLayoutRecord, RoadRecord, TrafficLightRecord,
    VehicleRecord,
)
from world.network import (
    Intersection, IntersectionId, Phase, Road, SignalFixture, Topology, distance,
)

log = logging.getLogger(__name__)


def demo_topology(
    columns: int = 5,
    rows: int = 4,
    spacing: float = 120.0,
    origin: Tuple[float, float] = (80.0, 80.0),
) -> Topology:
    """Grid of ``columns × rows`` intersections joined to their 4-neighbours.

    Every other intersection (checkerboard) carries a signal fixture;
    fixtures start alternately on ``EW_GREEN`` and ``NS_GREEN``.
    """
    nodes: Dict[Tuple[int, int], Intersection] = {}
    ids = itertools.count(1)
    for r in range(rows):
        for c in range(columns):
            nodes[(c, r)] = Intersection(
                id=next(ids),
                x=origin[0] + c * spacing,
                y=origin[1] + r * spacing,
                has_signal=(c + r) % 2 == 0,
            )

    roads: List[Road] = []
    for (c, r), node in nodes.items():
        if (c + 1, r) in nodes:
            roads.append(Road(node, nodes[(c + 1, r)]))
        if (c, r + 1) in nodes:
            roads.append(Road(node, nodes[(c, r + 1)]))

    fixtures = [
        SignalFixture(node, Phase.EW_GREEN if c % 4 == 0 else Phase.NS_GREEN)
        for (c, r), node in nodes.items()
        if node.has_signal
    ]
    return Topology(nodes.values(), roads, fixtures)


def find_shortest_path(
    topology: Topology, start: Intersection, end: Intersection,
) -> List[Intersection]:
    """A* over the road graph with straight-line distance as heuristic.

    Returns ``[]`` when *start* equals *end* or no route exists.
    """
    if start.id == end.id:
        return []
    counter = itertools.count()
    open_set: List[Tuple[float, int, IntersectionId]] = [
        (distance(start, end), next(counter), start.id)
    ]
    g_cost: Dict[IntersectionId, float] = {start.id: 0.0}
    parent: Dict[IntersectionId, IntersectionId] = {}
    closed = set()

    while open_set:
        _, _, current_id = heapq.heappop(open_set)
        if current_id == end.id:
            path = [topology.intersections[current_id]]
            while current_id in parent:
                current_id = parent[current_id]
                path.append(topology.intersections[current_id])
            path.reverse()
            return path
        if current_id in closed:
            continue
        closed.add(current_id)

        current = topology.intersections[current_id]
        for neighbour in topology.neighbours(current_id):
            if neighbour.id in closed:
                continue
            tentative = g_cost[current_id] + distance(current, neighbour)
            if tentative < g_cost.get(neighbour.id, math.inf):
                g_cost[neighbour.id] = tentative
                parent[neighbour.id] = current_id
                heapq.heappush(
                    open_set,
                    (tentative + distance(neighbour, end), next(counter), neighbour.id),
                )
    return []


@dataclass
class DemoCar:
    id: int
    x: float
    y: float
    path: List[Intersection]
    path_index: int = 1

    @property
    def target(self) -> Optional[Intersection]:
        if self.path_index >= len(self.path):
            return None
        return self.path[self.path_index]


def _record(node: Intersection) -> IntersectionRecord:
    return IntersectionRecord(
        id=node.id, x=node.x, y=node.y, has_traffic_light=node.has_signal,
    )


class DemoSimulation:
    """Cars moving along shortest paths over a fixed topology.

    Parameters
    ----------
    topology : Topology
        Network to drive on.
    seed : int or None
        Seed for spawning.
    max_cars : int
        Upper bound on simultaneous cars.
    speed : float
        Distance covered per tick.
    spawn_chance : float
        Probability of spawning one car per tick.
    phase_period_ticks : int
        Ticks between signal phase flips.
    """

    def __init__(
        self,
        topology: Topology,
        seed: Optional[int] = None,
        max_cars: int = 50,
        speed: float = 2.0,
        spawn_chance: float = 0.05,
        phase_period_ticks: int = 150,
    ) -> None:
        self.topology = topology
        self.rng = random.Random(seed)
        self.max_cars = max_cars
        self.speed = speed
        self.spawn_chance = spawn_chance
        self.phase_period_ticks = phase_period_ticks

        self.cars: List[DemoCar] = []
        self.phases: Dict[IntersectionId, Phase] = topology.baseline_phases()
        self.tick_count = 0
        self._ids = itertools.count()

    # ── world update ──────────────────────────────────────────────────────

    def spawn_car(self) -> Optional[DemoCar]:
        nodes = list(self.topology.intersections.values())
        if len(nodes) < 2:
            log.warning("cannot spawn car: need at least two intersections")
            return None
        start, end = self.rng.sample(nodes, 2)
        path = find_shortest_path(self.topology, start, end)
        if len(path) < 2:
            log.debug("no route from %s to %s", start.id, end.id)
            return None
        car = DemoCar(id=next(self._ids), x=start.x, y=start.y, path=path)
        self.cars.append(car)
        return car

    def step(self) -> None:
        self.tick_count += 1
        if len(self.cars) < self.max_cars and self.rng.random() < self.spawn_chance:
            self.spawn_car()

        remaining: List[DemoCar] = []
        for car in self.cars:
            target = car.target
            if target is None:
                continue
            dx = target.x - car.x
            dy = target.y - car.y
            dist = math.hypot(dx, dy)
            if dist < self.speed:
                car.x, car.y = target.x, target.y
                car.path_index += 1
            else:
                car.x += dx / dist * self.speed
                car.y += dy / dist * self.speed
            remaining.append(car)
        self.cars = remaining

        if self.phase_period_ticks > 0 and self.tick_count % self.phase_period_ticks == 0:
            self.phases = {
                int_id: Phase.NS_GREEN if phase is Phase.EW_GREEN else Phase.EW_GREEN
                for int_id, phase in self.phases.items()
            }

    # ── wire output ───────────────────────────────────────────────────────

    def layout_payload(self) -> dict:
        layout = MapLayoutRecord(
            intersections=[_record(n) for n in self.topology.intersections.values()],
            roads=[RoadRecord(start=_record(r.start), end=_record(r.end))
                   for r in self.topology.roads],
            traffic_lights=[
                TrafficLightRecord(
                    intersection=_record(f.intersection),
                    current_state=self.phases[int_id],
                )
                for int_id, f in self.topology.fixtures.items()
            ],
        )
        return layout.model_dump(by_alias=True, mode="json")

    def cars_payload(self) -> List[dict]:
        records = []
        for car in self.cars:
            target = car.target
            records.append(VehicleRecord(
                id=car.id,
                x=car.x,
                y=car.y,
                path=[_record(n) for n in car.path],
                current_path_index=car.path_index,
                current_target=_record(target) if target is not None else None,
            ))
        return [r.model_dump(by_alias=True, mode="json") for r in records]
