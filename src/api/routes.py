"""
Route API endpoints: compute, read, compare and select the routes of an itinerary.
All endpoints require authentication (Bearer token).
"""
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.application.route_planner import RoutePlanner
from src.auth.dependencies import get_current_user_id
from src.domain.models import Route
from src.domain.schemas import (
    RouteCalculationResponse,
    RouteComparisonResponse,
    RouteSelectResponse,
    RouteSetResponse,
)
from src.infrastructure.database import get_db


router = APIRouter(prefix="/routes", tags=["routes"])


def get_route_planner(db: AsyncSession = Depends(get_db)) -> RoutePlanner:
    """Providers are resolved from settings when a computation starts."""
    return RoutePlanner(db)


@router.post(
    "/calculate/{itinerary_id}",
    response_model=RouteCalculationResponse,
    summary="Calculate routes",
    description=(
        "Compute the shortest, recommended and scenic routes of an itinerary, "
        "replacing any stored routes. The recommended route becomes the selection."
    )
)
async def calculate_routes(
    itinerary_id: UUID,
    user_id: str = Depends(get_current_user_id),
    planner: RoutePlanner = Depends(get_route_planner),
) -> RouteCalculationResponse:
    """
    Errors:
    - 400 VALIDATION_ERROR: start or end location missing or without coordinates
    - 403 UNAUTHORIZED: itinerary belongs to another user
    - 404 NOT_FOUND: unknown itinerary
    - 502 ROUTING_UNAVAILABLE: routing provider failed; stored routes are unchanged
    """
    return await planner.calculate_routes(itinerary_id, user_id)


@router.get(
    "/itinerary/{itinerary_id}",
    response_model=RouteSetResponse,
    summary="Get itinerary routes",
)
async def get_itinerary_routes(
    itinerary_id: UUID,
    user_id: str = Depends(get_current_user_id),
    planner: RoutePlanner = Depends(get_route_planner),
) -> RouteSetResponse:
    return await planner.get_itinerary_routes(itinerary_id, user_id)


@router.get(
    "/itinerary/{itinerary_id}/compare",
    response_model=RouteComparisonResponse,
    summary="Compare routes",
    description="Side-by-side distance, duration, cost and score of every route, best score first."
)
async def compare_routes(
    itinerary_id: UUID,
    user_id: str = Depends(get_current_user_id),
    planner: RoutePlanner = Depends(get_route_planner),
) -> RouteComparisonResponse:
    return await planner.compare_routes(itinerary_id, user_id)


@router.post(
    "/{route_id}/select",
    response_model=RouteSelectResponse,
    summary="Select a route",
)
async def select_route(
    route_id: UUID,
    user_id: str = Depends(get_current_user_id),
    planner: RoutePlanner = Depends(get_route_planner),
) -> RouteSelectResponse:
    return await planner.select_route(route_id, user_id)


@router.get(
    "/{route_id}",
    response_model=Route,
    summary="Get route by ID",
)
async def get_route(
    route_id: UUID,
    user_id: str = Depends(get_current_user_id),
    planner: RoutePlanner = Depends(get_route_planner),
) -> Route:
    return await planner.get_route(route_id, user_id)
