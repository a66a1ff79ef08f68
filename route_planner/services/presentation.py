# path: route_planner/services/presentation.py

from __future__ import annotations

from typing import List, Optional, Protocol, Tuple

from route_planner.models.route_models import (
    DistanceSummary,
    MarkerView,
    PointListItem,
    RenderFrame,
    RouteGeometry,
    Waypoint,
)
from route_planner.utils.geo import km_to_miles


LatLng = Tuple[float, float]


class Presenter(Protocol):
    """Side-effecting render surface driven by the route session."""

    def place_marker(self, waypoint: Waypoint, index: int, is_first: bool) -> None: ...

    def draw_path(
        self, coordinates: List[LatLng], closing_segment: Optional[Tuple[LatLng, LatLng]] = None
    ) -> None: ...

    def clear_all_markers(self) -> None: ...

    def render_list(self, waypoints: List[Waypoint]) -> None: ...

    def render_distance(
        self, km: float, is_loop_closed: bool, segments_km: Optional[List[float]] = None
    ) -> None: ...


def marker_popup(waypoint: Waypoint) -> str:
    return f"{waypoint.name}\nLat: {waypoint.lat:.6f}\nLng: {waypoint.lng:.6f}"


def distance_text(km: float, is_loop_closed: bool) -> str:
    text = f"{km:.2f} km / {km_to_miles(km):.2f} miles"
    if is_loop_closed:
        text += " (Loop Closed)"
    return text


class FramePresenter:
    """
    Records render calls into a RenderFrame the browser map replays.

    Marker and list indexes are captured when the frame is drawn, so a client
    removing "index 2" refers to the list it was shown.
    """

    def __init__(self):
        self.frame = RenderFrame()

    def place_marker(self, waypoint: Waypoint, index: int, is_first: bool) -> None:
        self.frame.markers.append(
            MarkerView(
                waypoint_id=waypoint.id,
                index=index,
                lat=waypoint.lat,
                lng=waypoint.lng,
                is_first=is_first,
                popup=None if is_first else marker_popup(waypoint),
            )
        )

    def draw_path(
        self, coordinates: List[LatLng], closing_segment: Optional[Tuple[LatLng, LatLng]] = None
    ) -> None:
        self.frame.geometry = RouteGeometry(path=list(coordinates), closing_segment=closing_segment)

    def clear_all_markers(self) -> None:
        self.frame.markers = []

    def render_list(self, waypoints: List[Waypoint]) -> None:
        self.frame.points = [
            PointListItem(index=i, waypoint_id=w.id, name=w.name, lat=w.lat, lng=w.lng)
            for i, w in enumerate(waypoints)
        ]

    def render_distance(
        self, km: float, is_loop_closed: bool, segments_km: Optional[List[float]] = None
    ) -> None:
        self.frame.distance = DistanceSummary(
            km=km,
            miles=km_to_miles(km),
            is_loop_closed=is_loop_closed,
            segments_km=list(segments_km or []),
        )
        self.frame.distance_text = distance_text(km, is_loop_closed)
