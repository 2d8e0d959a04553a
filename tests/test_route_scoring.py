"""
Tests for per-type route scoring.
"""
from uuid import uuid4

import pytest

from src.application.route_costs import estimate_route_costs
from src.application.route_scoring import score_route
from src.domain.models import Attraction, Route, RouteOverview, RouteType, Waypoint


def _route(route_type, distance=100_000, duration=7_200, ratings=()):
    return Route(
        itinerary_id=uuid4(),
        route_type=route_type,
        total_distance=distance,
        total_duration=duration,
        waypoints=[Waypoint(latitude=6.9, longitude=79.8), Waypoint(latitude=6.0, longitude=80.2, order=1)],
        segments=[],
        overview=RouteOverview(),
        attractions=[
            Attraction(place_id=f"a{i}", rating=rating, detour_time=1800)
            for i, rating in enumerate(ratings)
        ],
        estimated_costs=estimate_route_costs(distance),
    )


def test_shortest_score_prefers_shorter_distance():
    short = _route(RouteType.SHORTEST, distance=50_000)
    long = _route(RouteType.SHORTEST, distance=100_000)

    assert score_route(short) > score_route(long)
    assert score_route(long) == pytest.approx(1_000_000 / 100_001)


def test_recommended_score_weights_distance_duration_and_attractions():
    route = _route(RouteType.RECOMMENDED, distance=100_000, duration=7_200, ratings=(4.0, 4.5))

    expected = 0.3 * (500_000 / 100_001) + 0.3 * (500_000 / 7_201) + 0.4 * 200

    assert score_route(route) == pytest.approx(expected)


def test_scenic_score_counts_attractions_and_average_rating():
    route = _route(RouteType.SCENIC, ratings=(4.0, 5.0, None))

    # Unrated attractions count as zero in the average
    assert score_route(route) == pytest.approx(3 * 200 + 3.0 * 100)


def test_scenic_score_without_attractions_is_zero():
    assert score_route(_route(RouteType.SCENIC)) == 0
