"""
feed/schemas.py
===============
Pydantic models for the backend's JSON documents.

Field names follow the backend's camelCase wire format through aliases;
models accept either the alias or the Python name and ignore unknown
fields, so extra backend properties (``destination``, ``id`` on roads …)
do not break decoding.
"""

from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, TypeAdapter

from world.network import Phase


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# ── Static layout ─────────────────────────────────────────────────────────────


class IntersectionRecord(WireModel):
    """Intersection as serialised by the backend."""
    id: StrictInt
    x: float = Field(alias="xcoordinate")
    y: float = Field(alias="ycoordinate")
    has_traffic_light: Optional[bool] = Field(default=None, alias="hasTrafficLight")


# An embedded intersection object or a bare id. Strict so JSON booleans
# are not read as ids 0 and 1.
IntersectionRef = Union[IntersectionRecord, StrictInt]


class RoadRecord(WireModel):
    start: IntersectionRef = Field(alias="startIntersection")
    end: IntersectionRef = Field(alias="endIntersection")


class TrafficLightRecord(WireModel):
    intersection: IntersectionRef
    current_state: Phase = Field(alias="currentState")


class MapLayoutRecord(WireModel):
    """Response body of the layout endpoint."""
    intersections: List[IntersectionRecord]
    roads: List[RoadRecord] = Field(default_factory=list)
    traffic_lights: List[TrafficLightRecord] = Field(
        default_factory=list, alias="trafficLights",
    )


# ── Streaming feed ────────────────────────────────────────────────────────────


class VehicleRecord(WireModel):
    """One car in a streamed tick."""
    id: Optional[StrictInt] = None
    x: float
    y: float
    path: List[IntersectionRef] = Field(default_factory=list)
    current_path_index: StrictInt = Field(default=0, alias="currentPathIndex")
    current_target: Optional[IntersectionRef] = Field(
        default=None, alias="currentTargetIntersection",
    )


class SimulationFrameRecord(WireModel):
    """Tick that carries signal state alongside the cars."""
    cars: List[VehicleRecord]
    traffic_lights: List[TrafficLightRecord] = Field(alias="trafficLights")


FeedPayload = Union[List[VehicleRecord], SimulationFrameRecord]

feed_payload_adapter: TypeAdapter = TypeAdapter(FeedPayload)
