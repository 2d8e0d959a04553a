"""
Itinerary generation: filled-in day plans for a new trip.

The trip's locations (start, legacy destinations, end) are spread over the trip
days in order. Each day gets activities from a nearby search around its
locations, an accommodation suggestion at the last location reached and three
meals, all priced from the budget tables below. A failed search only leaves that
location without activities.
"""
import asyncio
import logging
from datetime import datetime, timedelta
from typing import Optional

from src.config import settings
from src.domain.errors import PlacesUnavailableError
from src.domain.models import (
    AccommodationTier,
    Accommodation,
    Activity,
    BudgetTier,
    DayPlan,
    GeoPoint,
    Meal,
    MealType,
    Place,
    TransportMode,
    TravelStyle,
    TripCostBreakdown,
    TripLocation,
    TripPreferences,
)
from src.infrastructure.places import PlaceResult, PlacesProvider

logger = logging.getLogger(__name__)


NIGHTLY_ACCOMMODATION_COST = {
    BudgetTier.BUDGET: {
        AccommodationTier.HOSTEL: 1500, AccommodationTier.GUESTHOUSE: 2500,
        AccommodationTier.HOTEL: 3500, AccommodationTier.RESORT: 5000,
    },
    BudgetTier.MODERATE: {
        AccommodationTier.HOSTEL: 2500, AccommodationTier.GUESTHOUSE: 4000,
        AccommodationTier.HOTEL: 6000, AccommodationTier.RESORT: 10000,
    },
    BudgetTier.LUXURY: {
        AccommodationTier.HOSTEL: 4000, AccommodationTier.GUESTHOUSE: 6000,
        AccommodationTier.HOTEL: 12000, AccommodationTier.RESORT: 25000,
    },
}

MEAL_COST = {
    BudgetTier.BUDGET: {MealType.BREAKFAST: 500, MealType.LUNCH: 800, MealType.DINNER: 1200},
    BudgetTier.MODERATE: {MealType.BREAKFAST: 1000, MealType.LUNCH: 1500, MealType.DINNER: 2500},
    BudgetTier.LUXURY: {MealType.BREAKFAST: 2000, MealType.LUNCH: 3500, MealType.DINNER: 6000},
}

# Meal -> (suggested time, placeholder restaurant)
MEAL_SLOTS = {
    MealType.BREAKFAST: ("08:00", "Local breakfast spot"),
    MealType.LUNCH: ("13:00", "Local restaurant"),
    MealType.DINNER: ("19:00", "Local dining"),
}

ACTIVITY_BASE_COST = {BudgetTier.BUDGET: 500, BudgetTier.MODERATE: 1500, BudgetTier.LUXURY: 5000}
ACTIVITY_TYPE_SURCHARGE = {"museum": 500, "amusement_park": 2000, "zoo": 1000}
PARK_DISCOUNT = 500
MIN_PARK_COST = 200

ACTIVITY_MINUTES = {TravelStyle.RELAXED: 120, TravelStyle.MODERATE: 90, TravelStyle.PACKED: 60}
FIRST_ACTIVITY_HOUR = 9
ACTIVITY_SPACING_HOURS = 3
ACTIVITY_SLOT_HOURS = 2


def distribute_locations(locations: list[TripLocation], day_count: int) -> list[list[TripLocation]]:
    """
    Split locations over days in order. Earlier days take one extra location
    when they do not divide evenly; days past the last location stay empty.
    """
    per_day, extra = divmod(len(locations), day_count)
    days = []
    cursor = 0
    for day in range(day_count):
        size = per_day + (1 if day < extra else 0)
        days.append(locations[cursor:cursor + size])
        cursor += size
    return days


def estimate_activity_cost(types: list[str], budget: BudgetTier) -> float:
    cost = ACTIVITY_BASE_COST[budget]
    for place_type, surcharge in ACTIVITY_TYPE_SURCHARGE.items():
        if place_type in types:
            cost += surcharge
    if "park" in types:
        cost = max(MIN_PARK_COST, cost - PARK_DISCOUNT)
    return float(cost)


def suggest_accommodation(location: TripLocation, preferences: TripPreferences) -> Accommodation:
    return Accommodation(
        name=f"{preferences.accommodation.value} near {location.name}",
        address=f"Near {location.name}",
        check_in="14:00",
        check_out="11:00",
        estimated_cost=float(NIGHTLY_ACCOMMODATION_COST[preferences.budget][preferences.accommodation]),
    )


def suggest_meals(preferences: TripPreferences) -> list[Meal]:
    costs = MEAL_COST[preferences.budget]
    return [
        Meal(type=meal_type, restaurant=restaurant, estimated_cost=float(costs[meal_type]), time=time)
        for meal_type, (time, restaurant) in MEAL_SLOTS.items()
    ]


def calculate_total_costs(day_plans: list[DayPlan], preferences: TripPreferences) -> TripCostBreakdown:
    """Sum day plan estimates; transportation is a flat per-day rate."""
    accommodation = sum(
        day.accommodation.estimated_cost or 0
        for day in day_plans
        if day.accommodation
    )
    food = sum(meal.estimated_cost or 0 for day in day_plans for meal in day.meals)
    activities = sum(activity.estimated_cost or 0 for day in day_plans for activity in day.activities)

    rates = settings.daily_transport_cost
    daily = rates.get(preferences.transportation.value, rates.get(TransportMode.MIXED.value, 0.0))
    transportation = daily * len(day_plans)

    return TripCostBreakdown(
        accommodation=accommodation,
        food=food,
        activities=activities,
        transportation=transportation,
        total=accommodation + food + activities + transportation,
    )


def _as_place(location: TripLocation) -> Place:
    coordinates = None
    if location.has_coordinates():
        coordinates = GeoPoint(latitude=location.latitude, longitude=location.longitude)
    return Place(place_id=location.place_id, name=location.name, location=coordinates)


class ItineraryGenerator:
    """Builds day plans for a new itinerary from nearby places."""

    def __init__(
        self,
        provider: PlacesProvider,
        radius_meters: Optional[int] = None,
        min_rating: Optional[float] = None,
        concurrency: Optional[int] = None,
    ):
        self.provider = provider
        self.radius_meters = settings.generation_search_radius_meters if radius_meters is None else radius_meters
        self.min_rating = settings.generation_min_activity_rating if min_rating is None else min_rating
        if concurrency is None:
            concurrency = settings.attraction_search_concurrency
        self.concurrency = max(concurrency, 1)

    def _top_places(self, places: list[PlaceResult], preferences: TripPreferences) -> list[PlaceResult]:
        rated = [p for p in places if p.rating is not None and p.rating >= self.min_rating]
        rated.sort(key=lambda p: p.rating, reverse=True)
        return rated[: 3 if preferences.travel_style == TravelStyle.PACKED else 2]

    async def _places_near(
        self,
        semaphore: asyncio.Semaphore,
        location: TripLocation,
        preferences: TripPreferences,
    ) -> list[PlaceResult]:
        if not location.has_coordinates():
            return []

        types = preferences.interests[: settings.generation_interest_types_limit] or None
        async with semaphore:
            try:
                places = await self.provider.search_nearby(
                    GeoPoint(latitude=location.latitude, longitude=location.longitude),
                    self.radius_meters,
                    types,
                )
            except PlacesUnavailableError as e:
                logger.warning(f"No activities for {location.name}: {e.message}")
                return []
        return self._top_places(places, preferences)

    def _activities(self, places: list[PlaceResult], preferences: TripPreferences) -> list[Activity]:
        """Visits near one location, the first starting at 09:00."""
        activities = []
        for slot, place in enumerate(places):
            start_hour = FIRST_ACTIVITY_HOUR + slot * ACTIVITY_SPACING_HOURS
            activities.append(Activity(
                place_id=place.place_id,
                place_name=place.name,
                activity=f"Visit {place.name}",
                duration=ACTIVITY_MINUTES[preferences.travel_style],
                estimated_cost=estimate_activity_cost(place.types, preferences.budget),
                start_time=f"{start_hour:02d}:00",
                end_time=f"{start_hour + ACTIVITY_SLOT_HOURS:02d}:00",
            ))
        return activities

    async def generate_day_plans(
        self,
        start_date: datetime,
        day_count: int,
        locations: list[TripLocation],
        preferences: TripPreferences,
    ) -> list[DayPlan]:
        """
        One day plan per trip day.

        Searches for every location run concurrently; a day without locations
        keeps the accommodation of the last location reached before it.
        """
        per_day = distribute_locations(locations, day_count)
        semaphore = asyncio.Semaphore(self.concurrency)
        searches = await asyncio.gather(*[
            asyncio.gather(*[self._places_near(semaphore, loc, preferences) for loc in day_locations])
            for day_locations in per_day
        ])

        day_plans = []
        staying_at: Optional[TripLocation] = None
        for index, (day_locations, day_searches) in enumerate(zip(per_day, searches)):
            if day_locations:
                staying_at = day_locations[-1]
            activities = [
                activity
                for found in day_searches
                for activity in self._activities(found, preferences)
            ]

            day_plans.append(DayPlan(
                day_number=index + 1,
                date=start_date + timedelta(days=index),
                places=[_as_place(loc) for loc in day_locations],
                activities=activities,
                accommodation=suggest_accommodation(staying_at, preferences) if staying_at else None,
                meals=suggest_meals(preferences),
                notes=f"Day {index + 1} of your trip",
            ))

        logger.info(
            f"Generated {len(day_plans)} day plans over {len(locations)} locations with "
            f"{sum(len(day.activities) for day in day_plans)} activities"
        )
        return day_plans
