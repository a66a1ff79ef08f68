# path: route_planner/services/route_model.py

from __future__ import annotations

from typing import List
import itertools
import logging

from route_planner.models.route_models import (
    RouteGeometry,
    SelectionOutcome,
    Waypoint,
)
from route_planner.utils.geo import (
    haversine_km,
    is_valid_coordinate,
    polyline_length_km,
    segment_lengths_km,
)


logger = logging.getLogger(__name__)

DEFAULT_CLOSURE_THRESHOLD_KM = 0.001
MIN_LOOP_POINTS = 3


class InvalidCoordinate(ValueError):
    """Raised for non-finite or out-of-range lat/lng."""


class IndexOutOfRange(IndexError):
    """Raised when removing a waypoint position that does not exist."""


def point_label(position: int) -> str:
    return f"Point {position}"


class Route:
    """
    Ordered waypoints plus loop-closure state.

    The loop-closed flag lives on the first waypoint, so it follows that
    waypoint's identity rather than index 0. It only takes effect while the
    route has at least three points.
    """

    def __init__(self, closure_threshold_km: float = DEFAULT_CLOSURE_THRESHOLD_KM):
        self.closure_threshold_km = closure_threshold_km
        self._waypoints: List[Waypoint] = []
        self._ids = itertools.count(1)

    def __len__(self) -> int:
        return len(self._waypoints)

    @property
    def waypoints(self) -> List[Waypoint]:
        # Copies, so callers cannot relabel points or flip the loop flag.
        return [w.model_copy() for w in self._waypoints]

    @property
    def is_loop_closed(self) -> bool:
        return len(self._waypoints) >= MIN_LOOP_POINTS and self._waypoints[0].is_loop_closed

    # ----------------
    # mutations
    # ----------------
    def add(self, lat: float, lng: float) -> Waypoint:
        _check_coordinate(lat, lng)
        waypoint = Waypoint(
            id=next(self._ids),
            lat=float(lat),
            lng=float(lng),
            name=point_label(len(self._waypoints) + 1),
        )
        self._waypoints.append(waypoint)
        logger.debug("Added %s at (%.6f, %.6f)", waypoint.name, waypoint.lat, waypoint.lng)
        return waypoint

    def handle_selection(self, lat: float, lng: float) -> SelectionOutcome:
        _check_coordinate(lat, lng)

        # Closure check must run before insertion: re-picking the first pin finishes the loop.
        if len(self._waypoints) >= MIN_LOOP_POINTS:
            first = self._waypoints[0]
            if haversine_km(lat, lng, first.lat, first.lng) < self.closure_threshold_km:
                self.close_loop()
                return SelectionOutcome.loop_closed()

        return SelectionOutcome.added(self.add(lat, lng))

    def close_loop(self) -> bool:
        if len(self._waypoints) < MIN_LOOP_POINTS:
            return False
        self._waypoints[0].is_loop_closed = True
        logger.debug("Loop closed over %d points", len(self._waypoints))
        return True

    def remove(self, index: int) -> None:
        if not (0 <= index < len(self._waypoints)):
            raise IndexOutOfRange(
                f"waypoint index {index} out of range [0,{len(self._waypoints)})"
            )
        if len(self._waypoints) <= 1:
            self.clear()
            return

        removed = self._waypoints.pop(index)
        for i, waypoint in enumerate(self._waypoints):
            waypoint.name = point_label(i + 1)

        if index == 0:
            self._waypoints[0].is_loop_closed = False
        logger.debug("Removed waypoint %d (was at index %d)", removed.id, index)

    def clear(self) -> None:
        self._waypoints = []
        logger.debug("Route cleared")

    # ----------------
    # derived views
    # ----------------
    def _distance_path(self) -> List[tuple]:
        coords = [(w.lat, w.lng) for w in self._waypoints]
        if self.is_loop_closed:
            coords.append(coords[0])
        return coords

    def segment_distances(self) -> List[float]:
        return segment_lengths_km(self._distance_path())

    def total_distance(self) -> float:
        """Path length in km, including the last->first leg when the loop is closed."""
        if len(self._waypoints) < 2:
            return 0.0
        return polyline_length_km(self._distance_path())

    def render_geometry(self) -> RouteGeometry:
        path = [(w.lat, w.lng) for w in self._waypoints]
        closing = (path[-1], path[0]) if self.is_loop_closed else None
        return RouteGeometry(path=path, closing_segment=closing)


def _check_coordinate(lat: float, lng: float) -> None:
    try:
        ok = is_valid_coordinate(float(lat), float(lng))
    except (TypeError, ValueError):
        ok = False
    if not ok:
        raise InvalidCoordinate(f"invalid coordinate: lat={lat!r}, lng={lng!r}")
