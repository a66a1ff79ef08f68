# path: route_planner/models/route_models.py

from __future__ import annotations

from typing import List, Literal, Optional, Tuple
from pydantic import BaseModel, Field, model_validator


SelectionKind = Literal["added", "loop_closed"]


class Waypoint(BaseModel):
    id: int = Field(ge=0)
    lat: float
    lng: float
    name: str
    # Only read on the first waypoint of a route.
    is_loop_closed: bool = False


class SelectionOutcome(BaseModel):
    kind: SelectionKind
    waypoint: Optional[Waypoint] = None

    @model_validator(mode="after")
    def validate_waypoint(self):
        if self.kind == "added" and self.waypoint is None:
            raise ValueError("added outcome must carry the new waypoint")
        if self.kind == "loop_closed" and self.waypoint is not None:
            raise ValueError("loop_closed outcome does not carry a waypoint")
        return self

    @classmethod
    def added(cls, waypoint: Waypoint) -> "SelectionOutcome":
        return cls(kind="added", waypoint=waypoint)

    @classmethod
    def loop_closed(cls) -> "SelectionOutcome":
        return cls(kind="loop_closed")


class RouteGeometry(BaseModel):
    path: List[Tuple[float, float]] = Field(default_factory=list)  # (lat, lng)
    closing_segment: Optional[Tuple[Tuple[float, float], Tuple[float, float]]] = None


class DistanceSummary(BaseModel):
    km: float = Field(ge=0)
    miles: float = Field(ge=0)
    is_loop_closed: bool = False
    segments_km: List[float] = Field(default_factory=list)


class MarkerView(BaseModel):
    waypoint_id: int
    index: int = Field(ge=0)
    lat: float
    lng: float
    is_first: bool
    # None on the first marker: clicking it closes the loop instead of opening a popup.
    popup: Optional[str] = None


class PointListItem(BaseModel):
    index: int = Field(ge=0)
    waypoint_id: int
    name: str
    lat: float
    lng: float


class RenderFrame(BaseModel):
    markers: List[MarkerView] = Field(default_factory=list)
    geometry: RouteGeometry = Field(default_factory=RouteGeometry)
    points: List[PointListItem] = Field(default_factory=list)
    distance: DistanceSummary = Field(default_factory=lambda: DistanceSummary(km=0.0, miles=0.0))
    distance_text: str = "0.00 km / 0.00 miles"


class SelectPointRequest(BaseModel):
    lat: float
    lng: float


class GeocodeCandidate(BaseModel):
    lat: float
    lon: float
    display_name: str
