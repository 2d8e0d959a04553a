"""
Trip classification for the My Trips dashboard.

Pure functions over already-loaded data: the caller supplies every itinerary of
a user, the route counts and selected routes fetched in bulk, and the current
time. Nothing here touches the database.
"""
import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from uuid import UUID

from src.application.completion import calculate_completion
from src.domain.models import Itinerary, ItineraryStatus, Route, TripCategory
from src.domain.schemas import RouteSummary, TripCard, TripDetail

SECONDS_PER_DAY = 86400
DESTINATION_LABEL_PLACES = 3


def days_between(later: datetime, earlier: datetime) -> int:
    """Whole days from earlier to later, rounded up."""
    return math.ceil((later - earlier).total_seconds() / SECONDS_PER_DAY)


def trip_duration(itinerary: Itinerary) -> Optional[int]:
    if itinerary.start_date is None or itinerary.end_date is None:
        return None
    return days_between(itinerary.end_date, itinerary.start_date) + 1


def place_names(itinerary: Itinerary) -> list[str]:
    return [
        place.name
        for day in itinerary.sorted_day_plans
        for place in day.places
        if place.name
    ]


def destination_label(itinerary: Itinerary, locations: list[str]) -> str:
    """'a, b, c +N more' from the visited places, or 'start to end' when there are none."""
    if locations:
        label = ", ".join(locations[:DESTINATION_LABEL_PLACES])
        if len(locations) > DESTINATION_LABEL_PLACES:
            label += f" +{len(locations) - DESTINATION_LABEL_PLACES} more"
        return label

    start = itinerary.start_location.name if itinerary.start_location else "Unknown"
    end = itinerary.end_location.name if itinerary.end_location else "Unknown"
    return f"{start} to {end}"


def route_summary(route: Route) -> RouteSummary:
    return RouteSummary(
        id=route.id,
        route_type=route.route_type,
        total_distance=route.total_distance,
        total_duration=route.total_duration,
        estimated_cost=route.estimated_costs.total,
    )


def build_trip_card(
    itinerary: Itinerary,
    route_count: int,
    selected_route: Optional[Route],
    now: datetime,
    card_class: type[TripCard] = TripCard,
    **extra,
) -> TripCard:
    """Derive completion, temporal flags and display fields for one itinerary."""
    start, end = itinerary.start_date, itinerary.end_date
    locations = place_names(itinerary)

    return card_class(
        id=itinerary.id,
        trip_name=itinerary.trip_name,
        destination=destination_label(itinerary, locations),
        start_location_name=itinerary.start_location.name if itinerary.start_location else None,
        end_location_name=itinerary.end_location.name if itinerary.end_location else None,
        start_date=start,
        end_date=end,
        status=itinerary.status,
        completion_percentage=calculate_completion(itinerary),
        has_route=route_count > 0,
        selected_route=route_summary(selected_route) if selected_route else None,
        day_plans_count=len(itinerary.day_plans),
        places_count=sum(len(day.places) for day in itinerary.day_plans),
        locations=locations,
        trip_duration=trip_duration(itinerary),
        days_until_start=days_between(start, now) if start is not None else None,
        is_upcoming=start is not None and start > now,
        is_active=start is not None and end is not None and start <= now <= end,
        is_completed=end is not None and end < now,
        created_at=itinerary.created_at,
        updated_at=itinerary.updated_at,
        **extra,
    )


def is_unfinished(card: TripCard) -> bool:
    return card.status == ItineraryStatus.DRAFT and card.completion_percentage < 100


def is_saved(card: TripCard) -> bool:
    ready = card.status == ItineraryStatus.PLANNED or (
        card.status == ItineraryStatus.DRAFT and card.completion_percentage == 100
    )
    undated = not (card.is_upcoming or card.is_active or card.is_completed)
    return ready and (card.is_upcoming or undated)


@dataclass
class ClassifiedTrips:
    saved: list[TripCard] = field(default_factory=list)
    unfinished: list[TripCard] = field(default_factory=list)
    upcoming: list[TripCard] = field(default_factory=list)
    total: int = 0

    def bucket(self, category: TripCategory) -> list[TripCard]:
        return getattr(self, category.value)


def classify_trips(
    itineraries: list[Itinerary],
    route_counts: dict[UUID, int],
    selected_routes: dict[UUID, Route],
    now: datetime,
) -> ClassifiedTrips:
    """
    Bucket a user's itineraries into saved / unfinished / upcoming.

    An itinerary is in at most one of saved and unfinished, and independently
    may also be upcoming. A trip in progress with status active is upcoming and
    flagged as currently active.

    Args:
        itineraries: Every itinerary of the user
        route_counts: Stored route count per itinerary id (absent means none)
        selected_routes: Selected Route records by route id
        now: Reference time, naive UTC
    """
    result = ClassifiedTrips(total=len(itineraries))

    for itinerary in itineraries:
        selected = selected_routes.get(itinerary.selected_route_id) if itinerary.selected_route_id else None
        card = build_trip_card(itinerary, route_counts.get(itinerary.id, 0), selected, now)

        if is_unfinished(card):
            result.unfinished.append(card)
        elif is_saved(card):
            result.saved.append(card)

        if card.is_upcoming and card.status in (ItineraryStatus.PLANNED, ItineraryStatus.ACTIVE):
            result.upcoming.append(card)
        elif card.is_active and card.status == ItineraryStatus.ACTIVE:
            result.upcoming.append(
                card.model_copy(update={
                    "is_currently_active": True,
                    "days_remaining": days_between(itinerary.end_date, now),
                })
            )

    result.saved.sort(key=lambda c: c.updated_at, reverse=True)
    result.unfinished.sort(key=lambda c: c.completion_percentage, reverse=True)
    result.upcoming.sort(key=lambda c: c.days_until_start)
    return result


def build_trip_detail(
    itinerary: Itinerary,
    routes: list[Route],
    selected_route: Optional[Route],
    now: datetime,
) -> TripDetail:
    """Detail view: the card fields plus day plans, locations and every stored route."""
    return build_trip_card(
        itinerary,
        len(routes),
        selected_route,
        now,
        card_class=TripDetail,
        start_location=itinerary.start_location,
        end_location=itinerary.end_location,
        day_plans=itinerary.sorted_day_plans,
        all_routes=[route_summary(route) for route in routes],
        selected_route_costs=selected_route.estimated_costs if selected_route else None,
    )
