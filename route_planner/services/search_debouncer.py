# path: route_planner/services/search_debouncer.py

from __future__ import annotations

from typing import Awaitable, Callable, List, Optional
import asyncio
import logging

from route_planner.config import settings
from route_planner.models.route_models import GeocodeCandidate
from route_planner.services.geocoding_client import LookupFailed


logger = logging.getLogger(__name__)

SearchFn = Callable[[str], Awaitable[List[GeocodeCandidate]]]
ResultsFn = Callable[[str, List[GeocodeCandidate]], None]
ErrorFn = Callable[[str, LookupFailed], None]


class SearchDebouncer:
    """
    Debounced type-ahead lookups: one pending timer, one in-flight request.

    Each submit() bumps a generation counter. A lookup only reports back if
    its generation is still current when the response lands, and firing a
    new lookup cancels the one still in flight.
    """

    def __init__(
        self,
        search: SearchFn,
        on_results: ResultsFn,
        on_error: Optional[ErrorFn] = None,
        delay_s: Optional[float] = None,
        min_query_length: Optional[int] = None,
    ):
        self.search = search
        self.on_results = on_results
        self.on_error = on_error
        self.delay_s = delay_s if delay_s is not None else settings.search_debounce_s
        self.min_query_length = (
            min_query_length if min_query_length is not None else settings.search_min_query_length
        )
        self.generation = 0
        self._timer: Optional[asyncio.TimerHandle] = None
        self._in_flight: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._timer is not None or (
            self._in_flight is not None and not self._in_flight.done()
        )

    def submit(self, query: str) -> None:
        """Must be called from within the running event loop."""
        self.generation += 1
        self._cancel_timer()

        query = (query or "").strip()
        if len(query) < self.min_query_length:
            return

        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self.delay_s, self._fire, query, self.generation)

    def cancel(self) -> None:
        self.generation += 1
        self._cancel_timer()
        if self._in_flight is not None and not self._in_flight.done():
            self._in_flight.cancel()
        self._in_flight = None

    async def wait(self) -> None:
        """Wait until the pending timer has fired and the current lookup finished."""
        while True:
            if self._timer is not None:
                await asyncio.sleep(self.delay_s / 4 or 0.001)
                continue
            task = self._in_flight
            if task is None or task.done():
                return
            # A later fire may replace the slot while this one is awaited.
            await asyncio.wait({task})

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self, query: str, generation: int) -> None:
        self._timer = None
        if self._in_flight is not None and not self._in_flight.done():
            self._in_flight.cancel()
        self._in_flight = asyncio.ensure_future(self._lookup(query, generation))

    async def _lookup(self, query: str, generation: int) -> None:
        try:
            candidates = await self.search(query)
        except LookupFailed as e:
            if generation != self.generation:
                return
            logger.warning("Lookup failed for %r: %s", query, e)
            if self.on_error is not None:
                self.on_error(query, e)
            return
        except Exception as e:
            logger.exception("Unexpected error looking up %r", query)
            if generation == self.generation and self.on_error is not None:
                self.on_error(query, LookupFailed(f"Unexpected lookup error: {e}"))
            return

        if generation != self.generation:
            logger.debug("Dropping stale results for %r", query)
            return
        self.on_results(query, candidates)
