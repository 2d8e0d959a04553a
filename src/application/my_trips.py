"""
My Trips service - loads a user's itineraries and their routes in bulk and classifies them.
"""
import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from src.application.trip_classifier import (
    ClassifiedTrips,
    build_trip_detail,
    classify_trips,
)
from src.domain.errors import ItineraryValidationError, NotFoundError
from src.domain.models import TripCategory
from src.domain.schemas import (
    MyTripsResponse,
    TripBucket,
    TripCategoryResponse,
    TripDetail,
    TripsSummaryCounts,
)
from src.infrastructure.repositories import ItineraryRepository, RouteRepository

logger = logging.getLogger(__name__)


def parse_category(value: str) -> TripCategory:
    try:
        return TripCategory(value)
    except ValueError:
        allowed = ", ".join(c.value for c in TripCategory)
        raise ItineraryValidationError(f"Invalid category '{value}'. Must be one of: {allowed}")


class MyTripsService:
    """Read-only dashboard queries over a user's itineraries."""

    def __init__(self, db: AsyncSession):
        self.itineraries = ItineraryRepository(db)
        self.routes = RouteRepository(db)

    async def classify(self, user_id: str, now: Optional[datetime] = None) -> ClassifiedTrips:
        """
        Three queries in total, however many itineraries the user has:
        all itineraries, route counts for all of them, and all selected routes.
        """
        now = now or datetime.utcnow()
        itineraries = await self.itineraries.list_by_owner(user_id)
        ids = [it.id for it in itineraries]

        route_counts = await self.routes.count_by_itinerary(ids)
        selected_routes = await self.routes.get_many(
            it.selected_route_id for it in itineraries if it.selected_route_id
        )

        result = classify_trips(itineraries, route_counts, selected_routes, now)
        logger.info(
            f"Classified {result.total} trips for user {user_id}: {len(result.saved)} saved, "
            f"{len(result.unfinished)} unfinished, {len(result.upcoming)} upcoming"
        )
        return result

    async def get_summary(self, user_id: str, now: Optional[datetime] = None) -> MyTripsResponse:
        result = await self.classify(user_id, now)
        return MyTripsResponse(
            saved=TripBucket(count=len(result.saved), trips=result.saved),
            unfinished=TripBucket(count=len(result.unfinished), trips=result.unfinished),
            upcoming=TripBucket(count=len(result.upcoming), trips=result.upcoming),
            summary=TripsSummaryCounts(
                total=result.total,
                saved=len(result.saved),
                unfinished=len(result.unfinished),
                upcoming=len(result.upcoming),
            ),
        )

    async def get_category(
        self,
        user_id: str,
        category: str,
        now: Optional[datetime] = None,
    ) -> TripCategoryResponse:
        """
        Raises:
            ItineraryValidationError: unknown category (checked before any query)
        """
        parsed = parse_category(category)
        trips = (await self.classify(user_id, now)).bucket(parsed)
        return TripCategoryResponse(category=parsed, count=len(trips), trips=trips)

    async def get_trip_detail(
        self,
        user_id: str,
        itinerary_id: UUID,
        now: Optional[datetime] = None,
    ) -> TripDetail:
        """
        Raises:
            NotFoundError: no itinerary with this id owned by the user
        """
        itinerary = await self.itineraries.get(itinerary_id)
        if itinerary is None or itinerary.user_id != user_id:
            raise NotFoundError(f"Trip {itinerary_id} not found")

        routes = await self.routes.list_for_itinerary(itinerary_id)
        selected = next((r for r in routes if r.id == itinerary.selected_route_id), None)
        return build_trip_detail(itinerary, routes, selected, now or datetime.utcnow())
