"""
Fake providers and builders shared by tests.
"""
from datetime import datetime, timedelta
from typing import Optional
from unittest.mock import MagicMock

import httpx
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.routes import get_route_planner
from src.application.route_planner import RoutePlanner
from src.domain.errors import PlacesUnavailableError, RoutingUnavailableError
from src.domain.models import (
    DayPlan,
    GeoPoint,
    Itinerary,
    ItineraryStatus,
    Place,
    RouteOverview,
    RoutePath,
    RouteSegment,
    SegmentPoint,
    TripLocation,
    Waypoint,
)
from src.infrastructure.database import get_db
from src.infrastructure.directions import RoutingProvider
from src.infrastructure.places import PlaceResult, PlacesProvider, PlaceSuggestion
from src.main import app


COLOMBO = TripLocation(name="Colombo", place_id="colombo", latitude=6.9271, longitude=79.8612)
GALLE = TripLocation(name="Galle", place_id="galle", latitude=6.0535, longitude=80.2210)


def make_path(leg_distances: list[int], leg_durations: Optional[list[int]] = None) -> RoutePath:
    durations = leg_durations or [d // 10 for d in leg_distances]
    segments = [
        RouteSegment(
            start_point=SegmentPoint(latitude=6.9 + i * 0.1, longitude=79.8),
            end_point=SegmentPoint(latitude=7.0 + i * 0.1, longitude=79.9),
            distance=distance,
            duration=duration,
            polyline=f"poly{i}",
        )
        for i, (distance, duration) in enumerate(zip(leg_distances, durations))
    ]
    return RoutePath(
        total_distance=sum(leg_distances),
        total_duration=sum(durations),
        segments=segments,
        overview=RouteOverview(polyline="overview", summary="A2"),
    )


class FakeRoutingProvider(RoutingProvider):
    """Returns a longer path when the stop order is kept than when it may be optimized."""

    def __init__(self, error: Optional[RoutingUnavailableError] = None):
        self.error = error
        self.calls: list[tuple[int, bool]] = []

    async def compute_paths(self, waypoints: list[Waypoint], mode: str = "driving", optimize: bool = False):
        self.calls.append((len(waypoints), optimize))
        if self.error:
            raise self.error
        legs = len(waypoints) - 1
        leg_distance = 40_000 if optimize else 50_000
        return [make_path([leg_distance] * legs, [3600] * legs)]


class FakePlacesProvider(PlacesProvider):
    """Nearby results keyed by waypoint latitude; failing latitudes raise."""

    def __init__(
        self,
        results_by_lat: Optional[dict[float, list[PlaceResult]]] = None,
        failing_lats: Optional[set[float]] = None,
    ):
        self.results_by_lat = results_by_lat or {}
        self.failing_lats = failing_lats or set()
        self.nearby_calls: list[GeoPoint] = []
        self.nearby_requests: list[tuple[float, Optional[list[str]]]] = []

    async def search_nearby(self, center, radius_meters, included_types=None):
        self.nearby_calls.append(center)
        self.nearby_requests.append((radius_meters, included_types))
        if center.latitude in self.failing_lats:
            raise PlacesUnavailableError("Failed to search nearby places: timeout")
        return self.results_by_lat.get(center.latitude, [])

    async def search_text(self, query, location_bias=None):
        return [place(f"text-{query}", rating=4.0)]

    async def autocomplete(self, text, location_bias=None):
        return [PlaceSuggestion(place_id="sugg-1", text=f"{text} Fort, Galle", main_text=f"{text} Fort")]

    async def get_place_details(self, place_id):
        return {"id": place_id, "displayName": {"text": "Galle Fort"}}


def place(
    place_id: str,
    rating: Optional[float] = None,
    lat: float = 6.03,
    lng: float = 80.21,
    types: Optional[list[str]] = None,
) -> PlaceResult:
    return PlaceResult(
        place_id=place_id,
        name=f"Place {place_id}",
        address=None,
        latitude=lat,
        longitude=lng,
        rating=rating,
        types=types or ["tourist_attraction"],
    )


def day_place(name: str, lat: Optional[float], lng: Optional[float]) -> Place:
    location = GeoPoint(latitude=lat, longitude=lng) if lat is not None and lng is not None else None
    return Place(place_id=name.lower(), name=name, location=location)


def make_itinerary(
    user_id: str = "user-1",
    status: ItineraryStatus = ItineraryStatus.DRAFT,
    start_in_days: Optional[float] = 10,
    length_days: int = 3,
    now: Optional[datetime] = None,
    **fields,
) -> Itinerary:
    now = now or datetime(2026, 1, 1, 12, 0)
    start = now + timedelta(days=start_in_days) if start_in_days is not None else None
    end = start + timedelta(days=length_days) if start is not None else None
    values = dict(
        user_id=user_id,
        trip_name="South Coast",
        start_date=start,
        end_date=end,
        start_location=COLOMBO,
        end_location=GALLE,
        status=status,
    )
    values.update(fields)
    return Itinerary(**values)


class MockResponse:
    """Mock HTTP response."""

    def __init__(self, json_data, status_code=200):
        self._json_data = json_data
        self.status_code = status_code

    def json(self):
        return self._json_data

    def raise_for_status(self):
        if self.status_code >= 400:
            raise httpx.HTTPStatusError(
                message="Error",
                request=MagicMock(),
                response=self
            )


def use_providers(routing: Optional[RoutingProvider], places: Optional[PlacesProvider]) -> None:
    """Route API requests compute with the given providers (None resolves from settings)."""

    def override(db: AsyncSession = Depends(get_db)) -> RoutePlanner:
        return RoutePlanner(db, routing_provider=routing, places_provider=places)

    app.dependency_overrides[get_route_planner] = override
