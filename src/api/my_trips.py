"""
My Trips API endpoints: the caller's itineraries classified into saved, unfinished and upcoming.
All endpoints require authentication (Bearer token).
"""
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.application.my_trips import MyTripsService
from src.auth.dependencies import get_current_user_id
from src.domain.schemas import MyTripsResponse, TripCategoryResponse, TripDetail
from src.infrastructure.database import get_db


router = APIRouter(prefix="/my-trips", tags=["my-trips"])


@router.get(
    "/summary",
    response_model=MyTripsResponse,
    summary="All trip buckets",
    description="Saved, unfinished and upcoming trips with summary counts."
)
async def get_my_trips(
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> MyTripsResponse:
    return await MyTripsService(db).get_summary(user_id)


@router.get(
    "/trip/{itinerary_id}",
    response_model=TripDetail,
    summary="Trip details",
)
async def get_trip_details(
    itinerary_id: UUID,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> TripDetail:
    return await MyTripsService(db).get_trip_detail(user_id, itinerary_id)


@router.get(
    "/{category}",
    response_model=TripCategoryResponse,
    summary="Trips in one bucket",
    description="category is one of: saved, unfinished, upcoming."
)
async def get_trips_by_category(
    category: str,
    user_id: str = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> TripCategoryResponse:
    return await MyTripsService(db).get_category(user_id, category)
