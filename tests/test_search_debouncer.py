import asyncio

from route_planner.models.route_models import GeocodeCandidate
from route_planner.services.geocoding_client import LookupFailed
from route_planner.services.search_debouncer import SearchDebouncer


def _candidate(name):
    return GeocodeCandidate(lat=1.0, lon=2.0, display_name=name)


class FakeSearch:
    def __init__(self):
        self.queries = []
        self.gates = {}

    async def __call__(self, query):
        self.queries.append(query)
        gate = self.gates.get(query)
        if gate is not None:
            await gate.wait()
        if query == "explode":
            raise LookupFailed("geocoder down")
        return [_candidate(query)]


def _debouncer(search, results, errors=None, delay_s=0.01):
    return SearchDebouncer(
        search,
        on_results=lambda q, c: results.append((q, [x.display_name for x in c])),
        on_error=(lambda q, e: errors.append((q, str(e)))) if errors is not None else None,
        delay_s=delay_s,
        min_query_length=3,
    )


def test_rapid_typing_fires_one_lookup():
    search, results = FakeSearch(), []

    async def scenario():
        debouncer = _debouncer(search, results)
        for q in ("par", "pari", "paris"):
            debouncer.submit(q)
        await debouncer.wait()

    asyncio.run(scenario())
    assert search.queries == ["paris"]
    assert results == [("paris", ["paris"])]


def test_short_queries_are_not_scheduled():
    search, results = FakeSearch(), []

    async def scenario():
        debouncer = _debouncer(search, results)
        debouncer.submit("ab")
        assert not debouncer.pending
        await asyncio.sleep(0.03)

    asyncio.run(scenario())
    assert search.queries == []
    assert results == []


def test_short_query_cancels_earlier_pending_lookup():
    search, results = FakeSearch(), []

    async def scenario():
        debouncer = _debouncer(search, results)
        debouncer.submit("paris")
        debouncer.submit("pa")
        await asyncio.sleep(0.03)

    asyncio.run(scenario())
    assert search.queries == []


def test_stale_response_is_dropped():
    search, results = FakeSearch(), []
    state = {}

    async def scenario():
        search.gates["slow"] = asyncio.Event()
        debouncer = _debouncer(search, results)

        debouncer.submit("slow")
        await asyncio.sleep(0.03)  # timer fired; "slow" is in flight
        slow_task = debouncer._in_flight
        debouncer.submit("fast")
        # Must not block on the superseded "slow" lookup.
        await asyncio.wait_for(debouncer.wait(), 1.0)
        state["slow_cancelled"] = slow_task.cancelled()

        search.gates["slow"].set()
        await asyncio.sleep(0.01)

    asyncio.run(scenario())
    assert search.queries == ["slow", "fast"]
    assert results == [("fast", ["fast"])]
    assert state["slow_cancelled"]


def test_unexpected_search_error_goes_to_on_error():
    results, errors = [], []

    async def broken_search(query):
        raise RuntimeError("boom")

    async def scenario():
        debouncer = _debouncer(broken_search, results, errors)
        debouncer.submit("paris")
        await asyncio.wait_for(debouncer.wait(), 1.0)

    asyncio.run(scenario())
    assert results == []
    assert errors == [("paris", "Unexpected lookup error: boom")]


def test_lookup_failure_is_reported():
    search, results, errors = FakeSearch(), [], []

    async def scenario():
        debouncer = _debouncer(search, results, errors)
        debouncer.submit("explode")
        await debouncer.wait()

    asyncio.run(scenario())
    assert results == []
    assert errors == [("explode", "geocoder down")]


def test_cancel_stops_pending_lookup():
    search, results = FakeSearch(), []

    async def scenario():
        debouncer = _debouncer(search, results)
        debouncer.submit("paris")
        debouncer.cancel()
        assert not debouncer.pending
        await asyncio.sleep(0.03)

    asyncio.run(scenario())
    assert search.queries == []
    assert results == []
