"""
Route Planner - computes, stores and serves the route set of an itinerary.

Pipeline for a computation:
1. Load the itinerary and check ownership
2. Extract waypoints (validation happens here, before any external call)
3. Request the shortest and recommended paths from the routing provider
4. Enrich the scenic variant with nearby attractions
5. Estimate costs and score every route
6. Replace the stored route set in one transaction
"""
import logging
from typing import Optional
from urllib.parse import urlencode
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.application.attractions import AttractionEnricher, EnrichmentResult
from src.application.route_costs import estimate_route_costs
from src.application.route_generator import RouteTypeGenerator
from src.application.route_scoring import score_route
from src.application.waypoints import extract_waypoints
from src.config import settings
from src.domain.errors import NotFoundError, UnauthorizedError
from src.domain.models import (
    Itinerary,
    Route,
    RouteMetadata,
    RouteType,
    Waypoint,
)
from src.domain.schemas import (
    DistanceBreakdown,
    DurationBreakdown,
    RouteCalculationResponse,
    RouteComparisonItem,
    RouteComparisonResponse,
    RouteSelectResponse,
    RouteSetResponse,
)
from src.infrastructure.directions import RoutingProvider, get_routing_provider
from src.infrastructure.places import PlacesProvider, get_places_provider
from src.infrastructure.repositories import ItineraryRepository, RouteRepository

logger = logging.getLogger(__name__)

GOOGLE_MAPS_DIRECTIONS_URL = "https://www.google.com/maps/dir/"
METERS_PER_MILE = 1609.34


def build_google_maps_url(waypoints: list[Waypoint], mode: Optional[str] = None) -> str:
    """Shareable Google Maps directions link through the waypoints."""

    def point(wp: Waypoint) -> str:
        return f"{wp.latitude},{wp.longitude}"

    params = {
        "api": "1",
        "origin": point(waypoints[0]),
        "destination": point(waypoints[-1]),
        "travelmode": mode or settings.routing_travel_mode,
    }
    if len(waypoints) > 2:
        params["waypoints"] = "|".join(point(wp) for wp in waypoints[1:-1])
    return f"{GOOGLE_MAPS_DIRECTIONS_URL}?{urlencode(params)}"


def build_route_set(
    itinerary_id: UUID,
    routes: list[Route],
    selected_route_id: Optional[UUID],
    response_class: type[RouteSetResponse] = RouteSetResponse,
    **extra,
) -> RouteSetResponse:
    by_type = {route.route_type: route for route in routes}
    return response_class(
        itinerary_id=itinerary_id,
        count=len(routes),
        selected_route_id=selected_route_id,
        shortest=by_type.get(RouteType.SHORTEST),
        recommended=by_type.get(RouteType.RECOMMENDED),
        scenic=by_type.get(RouteType.SCENIC),
        **extra,
    )


def compare_route(route: Route) -> RouteComparisonItem:
    return RouteComparisonItem(
        route_id=route.id,
        type=route.route_type,
        distance=DistanceBreakdown(
            meters=route.total_distance,
            kilometers=round(route.total_distance / 1000, 2),
            miles=round(route.total_distance / METERS_PER_MILE, 2),
        ),
        duration=DurationBreakdown(
            seconds=route.total_duration,
            minutes=round(route.total_duration / 60),
            hours=round(route.total_duration / 3600, 1),
        ),
        estimated_costs=route.estimated_costs,
        attractions_count=len(route.attractions),
        score=route.score,
    )


class RoutePlanner:
    """Route computation and route read/select operations for one request."""

    def __init__(
        self,
        db: AsyncSession,
        routing_provider: Optional[RoutingProvider] = None,
        places_provider: Optional[PlacesProvider] = None,
    ):
        self.db = db
        self.itineraries = ItineraryRepository(db)
        self.routes = RouteRepository(db)
        self.routing_provider = routing_provider
        self.places_provider = places_provider

    async def _load_owned_itinerary(self, itinerary_id: UUID, user_id: str) -> Itinerary:
        itinerary = await self.itineraries.get(itinerary_id)
        if itinerary is None:
            raise NotFoundError(f"Itinerary {itinerary_id} not found")
        if itinerary.user_id != user_id:
            raise UnauthorizedError("You don't have access to this itinerary")
        return itinerary

    def _build_routes(
        self,
        itinerary: Itinerary,
        waypoints: list[Waypoint],
        paths: dict,
        enrichment: EnrichmentResult,
    ) -> list[Route]:
        maps_url = build_google_maps_url(waypoints)
        routes = []
        for route_type, path in paths.items():
            route = Route(
                itinerary_id=itinerary.id,
                route_type=route_type,
                total_distance=path.total_distance,
                total_duration=path.total_duration,
                waypoints=waypoints,
                segments=path.segments,
                overview=path.overview,
                attractions=enrichment.attractions if route_type == RouteType.SCENIC else [],
                estimated_costs=estimate_route_costs(path.total_distance, itinerary.preferences),
                metadata=RouteMetadata(google_maps_url=maps_url),
            )
            route.score = score_route(route)
            logger.info(
                f"{route_type.value} route: {route.total_distance / 1000:.1f}km, "
                f"{route.estimated_costs.currency} {route.estimated_costs.total}, score {route.score:.2f}"
            )
            routes.append(route)
        return routes

    async def calculate_routes(self, itinerary_id: UUID, user_id: str) -> RouteCalculationResponse:
        """
        Compute and store the three route variants of an itinerary.

        Raises:
            NotFoundError: itinerary does not exist
            UnauthorizedError: itinerary belongs to another user
            ItineraryValidationError: start or end location unusable
            RoutingUnavailableError: provider failure; stored routes are untouched
        """
        itinerary = await self._load_owned_itinerary(itinerary_id, user_id)
        waypoints = extract_waypoints(itinerary)
        logger.info(
            f"Calculating routes for itinerary {itinerary_id}: {len(waypoints)} waypoints "
            f"({waypoints[0].name} -> {waypoints[-1].name})"
        )

        routing_provider = self.routing_provider or get_routing_provider()
        places_provider = self.places_provider or get_places_provider()

        paths = await RouteTypeGenerator(routing_provider).generate(waypoints)
        enrichment = await AttractionEnricher(places_provider).enrich(waypoints)

        routes = self._build_routes(itinerary, waypoints, paths, enrichment)
        saved = await self.routes.replace_routes(itinerary_id, routes)

        recommended = next(r for r in saved if r.route_type == RouteType.RECOMMENDED)
        return build_route_set(
            itinerary_id,
            saved,
            recommended.id,
            response_class=RouteCalculationResponse,
            enrichment_degraded=enrichment.degraded,
            failed_waypoints=enrichment.failed_waypoints,
        )

    async def get_route(self, route_id: UUID, user_id: str) -> Route:
        route = await self.routes.get(route_id)
        if route is None:
            raise NotFoundError(f"Route {route_id} not found")
        await self._load_owned_itinerary(route.itinerary_id, user_id)
        return route

    async def get_itinerary_routes(self, itinerary_id: UUID, user_id: str) -> RouteSetResponse:
        itinerary = await self._load_owned_itinerary(itinerary_id, user_id)
        routes = await self.routes.list_for_itinerary(itinerary_id)
        return build_route_set(itinerary_id, routes, itinerary.selected_route_id)

    async def compare_routes(self, itinerary_id: UUID, user_id: str) -> RouteComparisonResponse:
        await self._load_owned_itinerary(itinerary_id, user_id)
        routes = await self.routes.list_for_itinerary(itinerary_id)
        if not routes:
            raise NotFoundError(
                f"No routes found for itinerary {itinerary_id}. Please calculate routes first."
            )

        comparison = sorted((compare_route(r) for r in routes), key=lambda item: item.score, reverse=True)
        return RouteComparisonResponse(itinerary_id=itinerary_id, routes=comparison)

    async def select_route(self, route_id: UUID, user_id: str) -> RouteSelectResponse:
        """Point the owning itinerary's selection at this route."""
        route = await self.get_route(route_id, user_id)
        itinerary = await self.itineraries.get(route.itinerary_id)

        itinerary.selected_route_id = route.id
        await self.itineraries.save(itinerary)
        await self.db.commit()

        logger.info(f"Itinerary {itinerary.id} selected {route.route_type.value} route {route.id}")
        return RouteSelectResponse(
            itinerary_id=itinerary.id,
            selected_route_id=route.id,
            route_type=route.route_type,
        )
