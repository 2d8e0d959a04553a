"""
Itinerary Service - CRUD for itineraries and storage of completed trips.

Edits that change where the trip goes (day plans, destinations, start or end
location) discard the stored routes and clear the route selection, so a stored
route always matches the waypoints of its itinerary.
"""
import logging
import math
from datetime import datetime, timedelta
from typing import Any, Optional
from uuid import UUID, uuid4

from sqlalchemy.ext.asyncio import AsyncSession

from src.application.completion import calculate_completion
from src.application.itinerary_generator import ItineraryGenerator, calculate_total_costs
from src.config import settings
from src.domain.errors import ItineraryValidationError, NotFoundError, UnauthorizedError
from src.domain.models import (
    Accommodation,
    DayPlan,
    GeoPoint,
    Itinerary,
    ItineraryStatus,
    Place,
    TripCostBreakdown,
    TripLocation,
    TripPreferences,
)
from src.domain.schemas import (
    CompletedTripRequest,
    CompletedTripResponse,
    ItineraryCreateRequest,
    ItineraryListResponse,
    ItineraryResponse,
    ItineraryUpdateRequest,
    PlanningBookings,
)
from src.infrastructure.booking_client import BookingServiceClient
from src.infrastructure.places import PlacesProvider, get_places_provider
from src.infrastructure.repositories import ItineraryRepository, RouteRepository

logger = logging.getLogger(__name__)

ROUTE_AFFECTING_FIELDS = ("day_plans", "destinations", "start_location", "end_location")

# Booking group -> cost breakdown field
BOOKING_COST_FIELDS = {
    "accommodations": "accommodation",
    "transportation": "transportation",
    "guides": "activities",
    "destinations": "activities",
}


def trip_day_count(start: datetime, end: datetime) -> int:
    return math.ceil((end - start).total_seconds() / 86400) + 1


def empty_day_plans(start: datetime, end: datetime) -> list[DayPlan]:
    """One empty day plan per trip day, numbered from 1."""
    return [
        DayPlan(day_number=day + 1, date=start + timedelta(days=day))
        for day in range(trip_day_count(start, end))
    ]


def booking_cost(booking: dict[str, Any]) -> float:
    for key in ("totalPrice", "price", "cost"):
        value = booking.get(key)
        if value:
            try:
                return float(value)
            except (TypeError, ValueError):
                return 0.0
    return 0.0


def aggregate_booking_costs(bookings: PlanningBookings, total_amount: Optional[float]) -> TripCostBreakdown:
    totals = {"accommodation": 0.0, "transportation": 0.0, "activities": 0.0}
    for group, target in BOOKING_COST_FIELDS.items():
        for booking in getattr(bookings, group):
            totals[target] += booking_cost(booking)

    return TripCostBreakdown(
        accommodation=totals["accommodation"],
        food=0,
        activities=totals["activities"],
        transportation=totals["transportation"],
        total=total_amount or sum(totals.values()),
    )


def _booking_date(booking: dict[str, Any]) -> Optional[str]:
    selected = booking.get("selectedDate")
    if not selected:
        return None
    try:
        return datetime.fromisoformat(str(selected).replace("Z", "+00:00")).date().isoformat()
    except ValueError:
        logger.warning(f"Unparseable booking date: {selected}")
        return None


def _route_inputs(itinerary: Itinerary) -> dict:
    return itinerary.model_dump(mode="json", include=set(ROUTE_AFFECTING_FIELDS))


class ItineraryService:
    """Itinerary lifecycle operations for one request."""

    def __init__(
        self,
        db: AsyncSession,
        booking_client: Optional[BookingServiceClient] = None,
        places_provider: Optional[PlacesProvider] = None,
    ):
        self.db = db
        self.itineraries = ItineraryRepository(db)
        self.routes = RouteRepository(db)
        self.booking_client = booking_client or BookingServiceClient()
        self.places_provider = places_provider

    @staticmethod
    def to_response(itinerary: Itinerary) -> ItineraryResponse:
        return ItineraryResponse(
            **itinerary.model_dump(),
            completion_percentage=calculate_completion(itinerary),
        )

    async def _load_owned(self, itinerary_id: UUID, user_id: str) -> Itinerary:
        itinerary = await self.itineraries.get(itinerary_id)
        if itinerary is None:
            raise NotFoundError(f"Itinerary {itinerary_id} not found")
        if itinerary.user_id != user_id:
            raise UnauthorizedError("You don't have access to this itinerary")
        return itinerary

    @staticmethod
    def _new_draft(user_id: str, request: ItineraryCreateRequest) -> Itinerary:
        itinerary = Itinerary(
            user_id=user_id,
            trip_name=request.trip_name,
            start_date=request.start_date,
            end_date=request.end_date,
            start_location=request.start_location,
            end_location=request.end_location,
            destinations=request.destinations,
            preferences=request.preferences or TripPreferences(),
            is_public=request.is_public,
            status=ItineraryStatus.DRAFT,
        )
        if itinerary.end_date < itinerary.start_date:
            raise ItineraryValidationError("end_date must be on or after start_date")
        return itinerary

    async def create_itinerary(self, user_id: str, request: ItineraryCreateRequest) -> ItineraryResponse:
        """Create a draft itinerary with an empty day plan for every trip day."""
        itinerary = self._new_draft(user_id, request)
        itinerary.day_plans = empty_day_plans(itinerary.start_date, itinerary.end_date)

        saved = await self.itineraries.add(itinerary)
        await self.db.commit()

        logger.info(
            f"Created itinerary {saved.id} for user {user_id} with {len(saved.day_plans)} days "
            f"({request.start_location.name} -> {request.end_location.name})"
        )
        return self.to_response(saved)

    async def generate_itinerary(self, user_id: str, request: ItineraryCreateRequest) -> ItineraryResponse:
        """
        Create a draft itinerary with suggested day plans.

        Start, destinations and end are spread over the trip days; each day is
        filled with nearby activities, an accommodation and meals, and the
        trip's estimated cost is the sum of those suggestions.
        """
        itinerary = self._new_draft(user_id, request)
        generator = ItineraryGenerator(self.places_provider or get_places_provider())

        itinerary.day_plans = await generator.generate_day_plans(
            itinerary.start_date,
            trip_day_count(itinerary.start_date, itinerary.end_date),
            [itinerary.start_location, *itinerary.destinations, itinerary.end_location],
            itinerary.preferences,
        )
        itinerary.total_estimated_cost = calculate_total_costs(itinerary.day_plans, itinerary.preferences)

        saved = await self.itineraries.add(itinerary)
        await self.db.commit()

        logger.info(
            f"Generated itinerary {saved.id} for user {user_id}: {len(saved.day_plans)} days, "
            f"estimated total {saved.total_estimated_cost.total}"
        )
        return self.to_response(saved)

    async def list_itineraries(
        self,
        user_id: str,
        status: Optional[ItineraryStatus] = None,
    ) -> ItineraryListResponse:
        itineraries = await self.itineraries.list_by_owner(user_id, status)
        return ItineraryListResponse(
            itineraries=[self.to_response(it) for it in itineraries],
            total=len(itineraries),
        )

    async def get_itinerary(self, itinerary_id: UUID, user_id: str) -> ItineraryResponse:
        return self.to_response(await self._load_owned(itinerary_id, user_id))

    async def update_itinerary(
        self,
        itinerary_id: UUID,
        user_id: str,
        request: ItineraryUpdateRequest,
    ) -> ItineraryResponse:
        """
        Apply a partial update. Stored routes are discarded when a field that
        feeds waypoint extraction changes.
        """
        itinerary = await self._load_owned(itinerary_id, user_id)
        before = _route_inputs(itinerary)

        updates = request.model_dump(exclude_unset=True)
        updated = Itinerary.model_validate({**itinerary.model_dump(), **updates})

        if updated.start_date and updated.end_date and updated.end_date < updated.start_date:
            raise ItineraryValidationError("end_date must be on or after start_date")

        if _route_inputs(updated) != before:
            deleted = await self.routes.delete_for_itinerary(itinerary_id)
            updated.selected_route_id = None
            logger.info(f"Itinerary {itinerary_id} waypoints changed, discarded {deleted} stored routes")

        saved = await self.itineraries.save(updated)
        await self.db.commit()

        logger.info(f"Updated itinerary {itinerary_id}: {', '.join(sorted(updates)) or 'no fields'}")
        return self.to_response(saved)

    async def delete_itinerary(self, itinerary_id: UUID, user_id: str) -> None:
        await self._load_owned(itinerary_id, user_id)
        await self.itineraries.delete(itinerary_id)
        await self.db.commit()
        logger.info(f"Deleted itinerary {itinerary_id} and its routes")

    def _completed_day_plans(self, request: CompletedTripRequest, start: datetime, end: datetime) -> list[DayPlan]:
        accommodations_by_date: dict[str, list[dict]] = {}
        for booking in request.planning_bookings.accommodations:
            booked_on = _booking_date(booking)
            if booked_on:
                accommodations_by_date.setdefault(booked_on, []).append(booking)

        day_plans = []
        for day in empty_day_plans(start, end):
            places = [
                Place(
                    place_id=p.place_id or f"place_{uuid4().hex}",
                    name=p.name,
                    location=(
                        GeoPoint(latitude=p.latitude, longitude=p.longitude)
                        if p.latitude is not None and p.longitude is not None
                        else None
                    ),
                    address=p.address,
                    types=p.types,
                    rating=p.rating,
                    photos=p.photos,
                    description=p.description,
                )
                for p in request.day_places.get(day.day_number, [])
            ]

            accommodation = None
            booked = accommodations_by_date.get(day.date.date().isoformat())
            if booked:
                first = booked[0]
                accommodation = Accommodation(
                    name=first.get("name"),
                    address=first.get("location"),
                    check_in=first.get("checkIn"),
                    check_out=first.get("checkOut"),
                    estimated_cost=booking_cost(first),
                )

            notes = request.day_notes.get(day.day_number, [])
            day_plans.append(
                day.model_copy(update={
                    "places": places,
                    "accommodation": accommodation,
                    "checklists": request.day_checklists.get(day.day_number, []),
                    "notes": "\n".join(note.content for note in notes),
                })
            )
        return day_plans

    async def store_completed_trip(
        self,
        user_id: str,
        request: CompletedTripRequest,
        auth_token: str,
    ) -> CompletedTripResponse:
        """
        Store a paid-for trip as a completed itinerary, then request the
        individual bookings. Booking failures never undo the stored itinerary.
        """
        trip = request.trip_data
        if trip.end_date < trip.start_date:
            raise ItineraryValidationError("end_date must be on or after start_date")

        label = trip.destination
        itinerary = Itinerary(
            user_id=user_id,
            trip_name=trip.trip_name or f"{label or 'Trip'} - {datetime.utcnow().date().isoformat()}",
            start_date=trip.start_date,
            end_date=trip.end_date,
            start_location=TripLocation(
                name=label or "Starting Point",
                place_id="start_location",
                latitude=settings.completed_trip_default_latitude,
                longitude=settings.completed_trip_default_longitude,
            ),
            end_location=TripLocation(
                name=label or "Ending Point",
                place_id="end_location",
                latitude=settings.completed_trip_default_latitude,
                longitude=settings.completed_trip_default_longitude,
            ),
            preferences=TripPreferences(interests=["tourist_attraction", "culture", "nature"]),
            total_estimated_cost=aggregate_booking_costs(request.planning_bookings, request.total_amount),
            status=ItineraryStatus.COMPLETED,
        )
        itinerary.day_plans = self._completed_day_plans(request, itinerary.start_date, itinerary.end_date)

        saved = await self.itineraries.add(itinerary)
        await self.db.commit()
        logger.info(
            f"Stored completed trip {saved.id} for user {user_id}: {len(saved.day_plans)} days, "
            f"total {saved.total_estimated_cost.total}"
        )

        booking_ids = await self.booking_client.create_bookings(
            request.planning_bookings.model_dump(),
            user_id,
            saved.id,
            auth_token,
        )
        if booking_ids.accommodations or booking_ids.transportation or booking_ids.guides:
            saved.booking_ids = booking_ids
            saved = await self.itineraries.save(saved)
            await self.db.commit()

        return CompletedTripResponse(
            itinerary_id=saved.id,
            trip_name=saved.trip_name,
            start_date=saved.start_date,
            end_date=saved.end_date,
            day_plans_count=len(saved.day_plans),
            total_estimated_cost=saved.total_estimated_cost,
            booking_ids=saved.booking_ids,
        )
