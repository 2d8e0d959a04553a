"""
Tests for the Google Directions routing provider.
Tests GoogleDirectionsProvider with mocked HTTP responses.
"""
import pytest
from unittest.mock import AsyncMock, patch

import httpx

from src.domain.errors import RoutingUnavailableError
from src.domain.models import Waypoint
from src.infrastructure.directions import GoogleDirectionsProvider, strip_markup
from tests.fakes import MockResponse


def _step(distance, duration, instruction):
    return {
        "html_instructions": instruction,
        "distance": {"value": distance},
        "duration": {"value": duration},
        "start_location": {"lat": 6.9, "lng": 79.8},
        "end_location": {"lat": 6.8, "lng": 79.9},
        "polyline": {"points": "abc"},
    }


def _leg(distance, duration, steps):
    return {
        "start_location": {"lat": 6.9271, "lng": 79.8612},
        "end_location": {"lat": 6.0535, "lng": 80.221},
        "start_address": "Colombo, Sri Lanka",
        "end_address": "Galle, Sri Lanka",
        "distance": {"value": distance},
        "duration": {"value": duration},
        "steps": steps,
    }


# Sample Directions API response with two legs
MOCK_DIRECTIONS_RESPONSE = {
    "status": "OK",
    "routes": [
        {
            "summary": "A2",
            "bounds": {
                "northeast": {"lat": 6.93, "lng": 80.23},
                "southwest": {"lat": 6.05, "lng": 79.86},
            },
            "overview_polyline": {"points": "overview_pts"},
            "waypoint_order": [0],
            "legs": [
                _leg(60_000, 4_000, [
                    _step(40_000, 2_500, "Head <b>south</b> on <div>Galle Rd</div>"),
                    _step(20_000, 1_500, "Turn left"),
                ]),
                _leg(55_500, 3_700, [_step(55_500, 3_700, "Continue")]),
            ],
        }
    ],
}


WAYPOINTS = [
    Waypoint(latitude=6.9271, longitude=79.8612, name="Colombo", order=0),
    Waypoint(latitude=6.42, longitude=79.99, name="Bentota", order=1),
    Waypoint(latitude=6.0535, longitude=80.221, name="Galle", order=2),
]


@pytest.mark.asyncio
async def test_directions_provider_parses_response():
    """Totals are the sums of the legs; instructions lose their markup."""
    provider = GoogleDirectionsProvider(api_key="test_api_key")

    with patch.object(httpx.AsyncClient, 'get', new_callable=AsyncMock) as mock_get:
        mock_get.return_value = MockResponse(MOCK_DIRECTIONS_RESPONSE)

        paths = await provider.compute_paths(WAYPOINTS)

        mock_get.assert_called_once()

    path = paths[0]
    assert path.total_distance == 115_500
    assert path.total_duration == 7_700
    assert path.total_distance == sum(s.distance for s in path.segments)
    assert path.total_duration == sum(s.duration for s in path.segments)
    assert path.segments[0].steps[0].instruction == "Head south on Galle Rd"
    assert path.segments[0].polyline == "abcabc"
    assert path.segments[0].start_point.name == "Colombo, Sri Lanka"
    assert path.overview.polyline == "overview_pts"
    assert path.overview.waypoint_order == [0]
    assert path.overview.bounds.northeast.latitude == 6.93


@pytest.mark.asyncio
async def test_directions_provider_sends_optimize_flag():
    provider = GoogleDirectionsProvider(api_key="test_api_key")

    with patch.object(httpx.AsyncClient, 'get', new_callable=AsyncMock) as mock_get:
        mock_get.return_value = MockResponse(MOCK_DIRECTIONS_RESPONSE)

        await provider.compute_paths(WAYPOINTS, optimize=True)
        optimized_params = mock_get.call_args.kwargs["params"]

        await provider.compute_paths(WAYPOINTS, optimize=False)
        ordered_params = mock_get.call_args.kwargs["params"]

    assert optimized_params["waypoints"] == "optimize:true|6.42,79.99"
    assert ordered_params["waypoints"] == "6.42,79.99"
    assert optimized_params["origin"] == "6.9271,79.8612"
    assert optimized_params["destination"] == "6.0535,80.221"
    assert optimized_params["alternatives"] == "true"


@pytest.mark.asyncio
async def test_direct_route_has_no_waypoints_param():
    provider = GoogleDirectionsProvider(api_key="test_api_key")

    with patch.object(httpx.AsyncClient, 'get', new_callable=AsyncMock) as mock_get:
        mock_get.return_value = MockResponse(MOCK_DIRECTIONS_RESPONSE)
        await provider.compute_paths([WAYPOINTS[0], WAYPOINTS[-1]])

    assert "waypoints" not in mock_get.call_args.kwargs["params"]


@pytest.mark.asyncio
async def test_non_ok_status_raises_routing_unavailable():
    provider = GoogleDirectionsProvider(api_key="test_api_key")
    body = {"status": "REQUEST_DENIED", "error_message": "The provided API key is invalid.", "routes": []}

    with patch.object(httpx.AsyncClient, 'get', new_callable=AsyncMock) as mock_get:
        mock_get.return_value = MockResponse(body)

        with pytest.raises(RoutingUnavailableError) as exc_info:
            await provider.compute_paths(WAYPOINTS)

    assert exc_info.value.provider_status == "REQUEST_DENIED"
    assert exc_info.value.provider_message == "The provided API key is invalid."
    assert exc_info.value.code == "ROUTING_UNAVAILABLE"


@pytest.mark.asyncio
async def test_zero_routes_raises_routing_unavailable():
    provider = GoogleDirectionsProvider(api_key="test_api_key")

    with patch.object(httpx.AsyncClient, 'get', new_callable=AsyncMock) as mock_get:
        mock_get.return_value = MockResponse({"status": "OK", "routes": []})

        with pytest.raises(RoutingUnavailableError):
            await provider.compute_paths(WAYPOINTS)


@pytest.mark.asyncio
async def test_timeout_raises_routing_unavailable():
    provider = GoogleDirectionsProvider(api_key="test_api_key")

    with patch.object(httpx.AsyncClient, 'get', new_callable=AsyncMock) as mock_get:
        mock_get.side_effect = httpx.TimeoutException("timed out")

        with pytest.raises(RoutingUnavailableError) as exc_info:
            await provider.compute_paths(WAYPOINTS)

    assert exc_info.value.provider_status == "TIMEOUT"


@pytest.mark.asyncio
async def test_http_error_raises_routing_unavailable():
    provider = GoogleDirectionsProvider(api_key="test_api_key")

    with patch.object(httpx.AsyncClient, 'get', new_callable=AsyncMock) as mock_get:
        mock_get.return_value = MockResponse({}, status_code=503)

        with pytest.raises(RoutingUnavailableError) as exc_info:
            await provider.compute_paths(WAYPOINTS)

    assert exc_info.value.provider_status == "503"


@pytest.mark.asyncio
async def test_single_waypoint_is_rejected():
    provider = GoogleDirectionsProvider(api_key="test_api_key")

    with pytest.raises(ValueError):
        await provider.compute_paths(WAYPOINTS[:1])


def test_provider_requires_api_key():
    with pytest.raises(ValueError):
        GoogleDirectionsProvider(api_key="")


def test_strip_markup():
    assert strip_markup('Turn <b>right</b> onto <span class="x">A2</span>') == "Turn right onto A2"
    assert strip_markup("") == ""
