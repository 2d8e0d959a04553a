"""
Route scoring. Higher is better; scores are only comparable within one route type.
"""
from typing import Callable

from src.domain.models import Route, RouteType


def shortest_score(route: Route) -> float:
    return 1_000_000 / (route.total_distance + 1)


def recommended_score(route: Route) -> float:
    distance_score = 500_000 / (route.total_distance + 1)
    duration_score = 500_000 / (route.total_duration + 1)
    attraction_score = len(route.attractions) * 100
    return 0.3 * distance_score + 0.3 * duration_score + 0.4 * attraction_score


def scenic_score(route: Route) -> float:
    count = len(route.attractions)
    average_rating = sum(a.rating or 0 for a in route.attractions) / max(count, 1)
    return count * 200 + average_rating * 100


SCORERS: dict[RouteType, Callable[[Route], float]] = {
    RouteType.SHORTEST: shortest_score,
    RouteType.RECOMMENDED: recommended_score,
    RouteType.SCENIC: scenic_score,
}


def score_route(route: Route) -> float:
    """Score a route with the formula of its type."""
    return SCORERS[route.route_type](route)
