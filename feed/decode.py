"""
feed/decode.py
==============
Turns backend JSON into :mod:`world` objects.

* :func:`decode_topology` — layout document → :class:`~world.network.Topology`
* :func:`decode_feed_message` — one streamed message → :class:`~world.dynamic_state.VehicleBatch`

Intersection references are always resolved by id against the topology;
coordinates embedded in references are ignored.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import ValidationError

from world.dynamic_state import Vehicle, VehicleBatch
from world.errors import TopologyError
from world.network import (
    Intersection, IntersectionId, Phase, Road, SignalFixture, Topology,
)

from .errors import FeedFormatError
from .schemas import (
    IntersectionRecord, IntersectionRef, MapLayoutRecord, SimulationFrameRecord,
    TrafficLightRecord, VehicleRecord, feed_payload_adapter,
)


def ref_id(ref: IntersectionRef) -> IntersectionId:
    """Id of an embedded intersection or bare reference."""
    return ref.id if isinstance(ref, IntersectionRecord) else int(ref)


# ── Static layout ─────────────────────────────────────────────────────────────

def parse_layout(document: Any) -> MapLayoutRecord:
    try:
        return MapLayoutRecord.model_validate(document)
    except ValidationError as exc:
        raise TopologyError(f"invalid layout document: {exc}") from exc


def decode_topology(document: Any) -> Topology:
    """Build the immutable :class:`Topology` from a layout document.

    Raises
    ------
    TopologyError
        Schema violations, dangling road or light references, duplicate
        fixtures.
    """
    layout = parse_layout(document)

    lit = {ref_id(light.intersection) for light in layout.traffic_lights}
    nodes: Dict[IntersectionId, Intersection] = {}
    for rec in layout.intersections:
        nodes[rec.id] = Intersection(
            id=rec.id,
            x=rec.x,
            y=rec.y,
            has_signal=bool(rec.has_traffic_light) or rec.id in lit,
        )
    if len(nodes) != len(layout.intersections):
        raise TopologyError("duplicate intersection id in layout")

    def resolve(ref: IntersectionRef, what: str) -> Intersection:
        node = nodes.get(ref_id(ref))
        if node is None:
            raise TopologyError(f"{what} references unknown intersection {ref_id(ref)}")
        return node

    roads = [
        Road(start=resolve(r.start, "road"), end=resolve(r.end, "road"))
        for r in layout.roads
    ]
    fixtures = [
        SignalFixture(
            intersection=resolve(light.intersection, "traffic light"),
            phase=light.current_state,
        )
        for light in layout.traffic_lights
    ]
    return Topology(nodes.values(), roads, fixtures)


def decode_baseline(document: Any, topology: Topology) -> Dict[IntersectionId, Phase]:
    """Fixture phases from a (re-fetched) layout document.

    Only the ``trafficLights`` section is used; the topology itself is not
    rebuilt.
    """
    layout = parse_layout(document)
    phases: Dict[IntersectionId, Phase] = {}
    for light in layout.traffic_lights:
        int_id = ref_id(light.intersection)
        if topology.fixture_for(int_id) is not None:
            phases[int_id] = light.current_state
    return phases


# ── Streaming feed ────────────────────────────────────────────────────────────

def _vehicle(
    rec: VehicleRecord, position: int, topology: Topology,
) -> Vehicle:
    def resolve(ref: IntersectionRef) -> Intersection:
        node = topology.intersection(ref_id(ref))
        if node is None:
            raise FeedFormatError(
                f"vehicle {rec.id if rec.id is not None else position} "
                f"references unknown intersection {ref_id(ref)}"
            )
        return node

    path = tuple(resolve(ref) for ref in rec.path)

    approaching: Optional[Intersection] = None
    has_signal = False
    if rec.current_target is not None:
        approaching = resolve(rec.current_target)
        embedded = (
            rec.current_target.has_traffic_light
            if isinstance(rec.current_target, IntersectionRecord)
            else None
        )
        has_signal = approaching.has_signal if embedded is None else embedded

    return Vehicle(
        id=rec.id if rec.id is not None else position,
        x=rec.x,
        y=rec.y,
        path=path,
        path_index=rec.current_path_index,
        approaching=approaching,
        approaching_has_signal=has_signal,
    )


def _signals(
    lights: List[TrafficLightRecord], topology: Topology,
) -> Dict[IntersectionId, Phase]:
    signals: Dict[IntersectionId, Phase] = {}
    for light in lights:
        int_id = ref_id(light.intersection)
        if topology.fixture_for(int_id) is None:
            raise FeedFormatError(f"signal state for unknown fixture {int_id}")
        signals[int_id] = light.current_state
    return signals


def decode_feed_message(raw: Union[str, bytes], topology: Topology) -> VehicleBatch:
    """Decode one streamed message.

    A JSON array is a vehicles-only tick; an object with ``cars`` and
    ``trafficLights`` carries signal state directly.

    Raises
    ------
    FeedFormatError
        Invalid JSON, schema violations or references outside *topology*.
    """
    try:
        payload = feed_payload_adapter.validate_json(raw)
    except ValidationError as exc:
        raise FeedFormatError(f"invalid feed message: {exc.error_count()} error(s)") from exc

    signals: Optional[Mapping[IntersectionId, Phase]] = None
    if isinstance(payload, SimulationFrameRecord):
        records = payload.cars
        signals = _signals(payload.traffic_lights, topology)
    else:
        records = payload

    vehicles: Tuple[Vehicle, ...] = tuple(
        _vehicle(rec, i, topology) for i, rec in enumerate(records)
    )
    return VehicleBatch(vehicles=vehicles, signals=signals)
