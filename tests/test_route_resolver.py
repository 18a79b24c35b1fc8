"""
tests.test_route_resolver

Status classification, matrix completeness and staleness for `RouteResolver`.
"""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from cityweaver.domain.errors import ProviderTransportError
from cityweaver.domain.models import (
    Coordinates,
    DistanceMatrixRequest,
    Route,
    RouteRequest,
    RouteResult,
    RouteStatus,
    TravelMode,
)
from cityweaver.enrichment.route_resolver import RouteResolver

A = Coordinates(latitude=48.8566, longitude=2.3522)
B = Coordinates(latitude=48.8606, longitude=2.3376)


def _route(distance: float) -> Route:
    return Route(legs=(), overview_polyline="", total_distance=distance, total_duration=60.0)


def _result(raw: str, *routes: Route) -> RouteResult:
    return RouteResult(status=RouteStatus.classify(raw), raw_status=raw, routes=routes)


def _cell(seconds: float, meters: float) -> dict[str, Any]:
    return {
        "status": "OK",
        "duration": {"value": seconds, "text": "1m"},
        "distance": {"value": meters, "text": "1 km"},
    }


class FakeRoutes:
    def __init__(self) -> None:
        self.directions_result: RouteResult | Exception = _result("OK", _route(1.0))
        self.matrix_payload: dict[str, Any] | Exception = {}
        self.gates: list[asyncio.Event] = []
        self.directions_calls = 0
        self.matrix_calls = 0

    async def directions(self, request: RouteRequest) -> RouteResult:
        self.directions_calls += 1
        if self.gates:
            await self.gates.pop(0).wait()
        if isinstance(self.directions_result, Exception):
            raise self.directions_result
        return self.directions_result

    async def distance_matrix(self, request: DistanceMatrixRequest) -> dict[str, Any]:
        self.matrix_calls += 1
        if isinstance(self.matrix_payload, Exception):
            raise self.matrix_payload
        return self.matrix_payload


@pytest.mark.asyncio
async def test_ok_picks_first_route_and_keeps_candidates() -> None:
    provider = FakeRoutes()
    provider.directions_result = _result("OK", _route(100.0), _route(200.0))
    resolver = RouteResolver(provider=provider)

    route = await resolver.get_directions(RouteRequest(origin=A, destination=B))

    assert route is not None and route.total_distance == 100.0
    snap = resolver.snapshot()
    assert snap.data.current_route == route
    assert len(snap.data.routes) == 2
    assert snap.error is None
    assert snap.is_loading is False


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("raw", "message"),
    [
        ("ZERO_RESULTS", "No route found between the specified locations"),
        ("NOT_FOUND", "One or more locations could not be found"),
        ("OVER_QUERY_LIMIT", "Route calculation failed: OVER_QUERY_LIMIT"),
    ],
)
async def test_domain_statuses_map_to_messages(raw: str, message: str) -> None:
    provider = FakeRoutes()
    provider.directions_result = _result(raw)
    resolver = RouteResolver(provider=provider)

    route = await resolver.get_directions(RouteRequest(origin=A, destination=B))

    assert route is None
    snap = resolver.snapshot()
    assert snap.error == message
    assert snap.error_kind == "domain"
    assert snap.data.current_route is None


@pytest.mark.asyncio
async def test_transport_failure_is_distinct_from_domain_status() -> None:
    provider = FakeRoutes()
    provider.directions_result = ProviderTransportError("HTTP 503", status_code=503)
    resolver = RouteResolver(provider=provider)

    assert await resolver.get_directions(RouteRequest(origin=A, destination=B)) is None
    assert resolver.snapshot().error_kind == "transport"
    assert resolver.snapshot().error == "HTTP 503"


@pytest.mark.asyncio
async def test_older_directions_call_does_not_overwrite_newer() -> None:
    provider = FakeRoutes()
    slow, fast = asyncio.Event(), asyncio.Event()
    provider.gates = [slow, fast]
    resolver = RouteResolver(provider=provider)

    provider.directions_result = _result("OK", _route(1.0))
    first = asyncio.ensure_future(resolver.get_directions(RouteRequest(origin=A, destination=B)))
    await asyncio.sleep(0)
    second = asyncio.ensure_future(resolver.get_directions(RouteRequest(origin=B, destination=A)))
    await asyncio.sleep(0)

    fast.set()
    while resolver.snapshot().data.current_route is None:
        await asyncio.sleep(0)
    provider.directions_result = _result("OK", _route(999.0))
    slow.set()
    await asyncio.gather(first, second)

    assert resolver.snapshot().data.current_route is not None
    assert resolver.snapshot().data.current_route.total_distance == 1.0
    assert resolver.snapshot().is_loading is False


@pytest.mark.asyncio
async def test_matrix_complete_response() -> None:
    provider = FakeRoutes()
    provider.matrix_payload = {
        "status": "OK",
        "rows": [{"elements": [_cell(60, 100), _cell(120, 200)]}],
    }
    resolver = RouteResolver(provider=provider)

    matrix = await resolver.get_distance_matrix(
        DistanceMatrixRequest(origins=(A,), destinations=(A, B))
    )

    assert matrix is not None
    assert matrix.cell(0, 1).distance == 200
    assert resolver.snapshot().data.distance_matrix == matrix


@pytest.mark.asyncio
async def test_matrix_short_row_fails_whole_call() -> None:
    provider = FakeRoutes()
    provider.matrix_payload = {"status": "OK", "rows": [{"elements": [_cell(60, 100)]}]}
    resolver = RouteResolver(provider=provider)

    matrix = await resolver.get_distance_matrix(
        DistanceMatrixRequest(origins=(A,), destinations=(A, B))
    )

    assert matrix is None
    assert resolver.snapshot().error == "Incomplete distance matrix response"
    assert resolver.snapshot().data.distance_matrix is None


@pytest.mark.asyncio
async def test_matrix_unresolved_element_is_domain_error() -> None:
    provider = FakeRoutes()
    provider.matrix_payload = {
        "status": "OK",
        "rows": [{"elements": [_cell(60, 100), {"status": "NOT_FOUND"}]}],
    }
    resolver = RouteResolver(provider=provider)

    assert (
        await resolver.get_distance_matrix(DistanceMatrixRequest(origins=(A,), destinations=(A, B)))
        is None
    )
    assert resolver.snapshot().error_kind == "domain"


@pytest.mark.asyncio
async def test_empty_matrix_request_is_a_no_op() -> None:
    provider = FakeRoutes()
    resolver = RouteResolver(provider=provider)

    request = DistanceMatrixRequest(origins=(), destinations=(B,))
    assert await resolver.get_distance_matrix(request) is None
    assert provider.matrix_calls == 0
    assert resolver.snapshot().error is None


@pytest.mark.asyncio
async def test_reset_clears_route_concern() -> None:
    provider = FakeRoutes()
    resolver = RouteResolver(provider=provider)
    await resolver.get_directions(RouteRequest(origin=A, destination=B))

    resolver.reset()

    snap = resolver.snapshot()
    assert snap.data.current_route is None
    assert snap.data.routes == ()
    assert snap.error is None


def test_maps_url_is_pure() -> None:
    resolver = RouteResolver(provider=FakeRoutes())

    url = resolver.generate_maps_url(
        Coordinates(latitude=40.0, longitude=-74.5),
        Coordinates(latitude=41.25, longitude=-73.0),
        TravelMode.transit,
    )

    assert url == (
        "https://www.google.com/maps/dir/40,-74.5/41.25,-73"
        "/@40,-74.5,15z/data=!3m1!4b1!4m2!4m1!3er"
    )
    assert resolver.snapshot().is_loading is False
