# path: route_planner/services/route_session.py

from __future__ import annotations

from typing import Optional
import logging

from route_planner.models.route_models import RenderFrame, SelectionOutcome
from route_planner.services.presentation import FramePresenter, Presenter
from route_planner.services.route_model import (
    DEFAULT_CLOSURE_THRESHOLD_KM,
    IndexOutOfRange,
    InvalidCoordinate,
    Route,
)


logger = logging.getLogger(__name__)


class RouteSession:
    """Owns the session's Route and re-renders it after every mutation."""

    def __init__(
        self,
        presenter: Optional[Presenter] = None,
        closure_threshold_km: float = DEFAULT_CLOSURE_THRESHOLD_KM,
    ):
        self.route = Route(closure_threshold_km=closure_threshold_km)
        self.presenter = presenter if presenter is not None else FramePresenter()
        self.render()

    def handle_selection(self, lat: float, lng: float) -> SelectionOutcome:
        try:
            outcome = self.route.handle_selection(lat, lng)
        except InvalidCoordinate as e:
            logger.warning("Rejected selection: %s", e)
            raise
        self.render()
        return outcome

    def close_loop(self) -> bool:
        closed = self.route.close_loop()
        self.render()
        return closed

    def remove(self, index: int) -> None:
        try:
            self.route.remove(index)
        except IndexOutOfRange as e:
            logger.warning("Rejected removal: %s", e)
            raise
        self.render()

    def clear(self) -> None:
        self.route.clear()
        self.render()

    def render(self) -> None:
        route = self.route
        waypoints = route.waypoints
        geometry = route.render_geometry()

        self.presenter.clear_all_markers()
        for i, waypoint in enumerate(waypoints):
            self.presenter.place_marker(waypoint, i, i == 0)
        self.presenter.draw_path(geometry.path, geometry.closing_segment)
        self.presenter.render_list(waypoints)
        self.presenter.render_distance(
            route.total_distance(), route.is_loop_closed, route.segment_distances()
        )

    def snapshot(self) -> RenderFrame:
        frame = getattr(self.presenter, "frame", None)
        if frame is None:
            raise TypeError(f"{type(self.presenter).__name__} does not keep a render frame")
        return frame.model_copy(deep=True)
