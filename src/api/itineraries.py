"""
Itinerary API endpoints.
All endpoints require authentication (Bearer token).
"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.application.itinerary_service import ItineraryService
from src.auth.dependencies import get_bearer_token, get_current_user_id
from src.domain.models import ItineraryStatus
from src.domain.schemas import (
    CompletedTripRequest,
    CompletedTripResponse,
    ItineraryCreateRequest,
    ItineraryListResponse,
    ItineraryResponse,
    ItineraryUpdateRequest,
)
from src.infrastructure.booking_client import BookingServiceClient, get_booking_client
from src.infrastructure.database import get_db
from src.infrastructure.places import PlacesProvider, get_places_provider


router = APIRouter(prefix="/itineraries", tags=["itineraries"])


def get_itinerary_service(
    db: AsyncSession = Depends(get_db),
    booking_client: BookingServiceClient = Depends(get_booking_client),
    places_provider: PlacesProvider = Depends(get_places_provider),
) -> ItineraryService:
    return ItineraryService(db, booking_client, places_provider)


@router.post(
    "",
    response_model=ItineraryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an itinerary",
    description="Create a draft itinerary with an empty day plan for every trip day."
)
async def create_itinerary(
    request: ItineraryCreateRequest,
    user_id: str = Depends(get_current_user_id),
    service: ItineraryService = Depends(get_itinerary_service),
) -> ItineraryResponse:
    return await service.create_itinerary(user_id, request)


@router.post(
    "/generate",
    response_model=ItineraryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Generate an itinerary",
    description=(
        "Create a draft itinerary whose day plans are filled with nearby activities "
        "matching the trip interests, an accommodation suggestion and meals."
    )
)
async def generate_itinerary(
    request: ItineraryCreateRequest,
    user_id: str = Depends(get_current_user_id),
    service: ItineraryService = Depends(get_itinerary_service),
) -> ItineraryResponse:
    return await service.generate_itinerary(user_id, request)


@router.get(
    "",
    response_model=ItineraryListResponse,
    summary="List itineraries",
    description="The caller's itineraries, newest first."
)
async def list_itineraries(
    status_filter: Optional[ItineraryStatus] = Query(default=None, alias="status"),
    user_id: str = Depends(get_current_user_id),
    service: ItineraryService = Depends(get_itinerary_service),
) -> ItineraryListResponse:
    return await service.list_itineraries(user_id, status_filter)


@router.post(
    "/completed",
    response_model=CompletedTripResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Store a completed trip",
    description="Store a paid-for trip and request its individual bookings."
)
async def store_completed_trip(
    request: CompletedTripRequest,
    user_id: str = Depends(get_current_user_id),
    token: str = Depends(get_bearer_token),
    service: ItineraryService = Depends(get_itinerary_service),
) -> CompletedTripResponse:
    """
    The itinerary is stored first; booking requests follow and their failures
    are only logged. booking_ids lists the bookings that were created.
    """
    return await service.store_completed_trip(user_id, request, token)


@router.get(
    "/{itinerary_id}",
    response_model=ItineraryResponse,
    summary="Get itinerary by ID",
)
async def get_itinerary(
    itinerary_id: UUID,
    user_id: str = Depends(get_current_user_id),
    service: ItineraryService = Depends(get_itinerary_service),
) -> ItineraryResponse:
    return await service.get_itinerary(itinerary_id, user_id)


@router.put(
    "/{itinerary_id}",
    response_model=ItineraryResponse,
    summary="Update itinerary",
    description=(
        "Partial update. Changing day plans, destinations, start or end location "
        "discards the stored routes and clears the route selection."
    )
)
async def update_itinerary(
    itinerary_id: UUID,
    request: ItineraryUpdateRequest,
    user_id: str = Depends(get_current_user_id),
    service: ItineraryService = Depends(get_itinerary_service),
) -> ItineraryResponse:
    return await service.update_itinerary(itinerary_id, user_id, request)


@router.delete(
    "/{itinerary_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete itinerary",
    description="Delete an itinerary together with its routes."
)
async def delete_itinerary(
    itinerary_id: UUID,
    user_id: str = Depends(get_current_user_id),
    service: ItineraryService = Depends(get_itinerary_service),
) -> None:
    await service.delete_itinerary(itinerary_id, user_id)
