# path: route_planner/api/routes/routes.py

from __future__ import annotations

from typing import List
import asyncio
import logging

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    Request,
    WebSocket,
    WebSocketDisconnect,
)
from pydantic import BaseModel

from route_planner.models.route_models import (
    GeocodeCandidate,
    RenderFrame,
    SelectPointRequest,
    SelectionOutcome,
)
from route_planner.services.geocoding_client import GeocodingClient, LookupFailed
from route_planner.services.route_model import IndexOutOfRange, InvalidCoordinate
from route_planner.services.route_session import RouteSession
from route_planner.services.search_debouncer import SearchDebouncer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/route", tags=["route"])


class SelectionResponse(BaseModel):
    outcome: SelectionOutcome
    frame: RenderFrame


class CloseLoopResponse(BaseModel):
    closed: bool
    frame: RenderFrame


def get_session(request: Request) -> RouteSession:
    return request.app.state.route_session


def get_geocoder(request: Request) -> GeocodingClient:
    return request.app.state.geocoder


def _select(session: RouteSession, lat: float, lng: float) -> SelectionResponse:
    try:
        outcome = session.handle_selection(lat, lng)
    except InvalidCoordinate as e:
        raise HTTPException(status_code=400, detail=str(e))
    return SelectionResponse(outcome=outcome, frame=session.snapshot())


# Endpoints are async so route mutations run one at a time on the event loop.
@router.get("", response_model=RenderFrame)
async def get_route(session: RouteSession = Depends(get_session)) -> RenderFrame:
    return session.snapshot()


@router.post("/points", response_model=SelectionResponse)
async def select_point(
    body: SelectPointRequest, session: RouteSession = Depends(get_session)
) -> SelectionResponse:
    return _select(session, body.lat, body.lng)


@router.post("/close", response_model=CloseLoopResponse)
async def close_loop(session: RouteSession = Depends(get_session)) -> CloseLoopResponse:
    closed = session.close_loop()
    return CloseLoopResponse(closed=closed, frame=session.snapshot())


@router.delete("/points/{index}", response_model=RenderFrame)
async def remove_point(index: int, session: RouteSession = Depends(get_session)) -> RenderFrame:
    try:
        session.remove(index)
    except IndexOutOfRange as e:
        raise HTTPException(status_code=404, detail=str(e))
    return session.snapshot()


@router.delete("", response_model=RenderFrame)
async def clear_route(session: RouteSession = Depends(get_session)) -> RenderFrame:
    session.clear()
    return session.snapshot()


@router.get("/search", response_model=List[GeocodeCandidate])
async def search_places(
    q: str = Query(..., max_length=200),
    geocoder: GeocodingClient = Depends(get_geocoder),
) -> List[GeocodeCandidate]:
    try:
        return await geocoder.search(q)
    except LookupFailed as e:
        raise HTTPException(status_code=502, detail=f"Search failed: {e}")


@router.post("/search/select", response_model=SelectionResponse)
async def select_search_result(
    candidate: GeocodeCandidate, session: RouteSession = Depends(get_session)
) -> SelectionResponse:
    return _select(session, candidate.lat, candidate.lon)


async def _send_outbox(websocket: WebSocket, outbox: asyncio.Queue) -> None:
    while True:
        message = await outbox.get()
        await websocket.send_json(message)


@router.websocket("/search/ws")
async def search_as_you_type(websocket: WebSocket) -> None:
    """
    Type-ahead search: the client sends {"query": ...} per keystroke and gets
    back {"query", "results"} or {"query", "error"} once typing pauses.
    """
    await websocket.accept()
    settings = websocket.app.state.settings
    outbox: asyncio.Queue = asyncio.Queue()

    debouncer = SearchDebouncer(
        websocket.app.state.geocoder.search,
        on_results=lambda q, found: outbox.put_nowait(
            {"query": q, "results": [c.model_dump() for c in found]}
        ),
        on_error=lambda q, e: outbox.put_nowait({"query": q, "error": f"Search failed: {e}"}),
        delay_s=settings.search_debounce_s,
        min_query_length=settings.search_min_query_length,
    )
    sender = asyncio.create_task(_send_outbox(websocket, outbox))
    try:
        while True:
            message = await websocket.receive_json()
            debouncer.submit(str(message.get("query", "")))
    except WebSocketDisconnect:
        logger.debug("Search socket closed")
    finally:
        debouncer.cancel()
        sender.cancel()
