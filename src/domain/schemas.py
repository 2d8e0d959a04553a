"""
Request/Response schemas for API endpoints.
These schemas define the contract between the client app and the backend.
"""
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from src.domain.models import (
    BookingIds,
    Checklist,
    DayPlan,
    Itinerary,
    ItineraryStatus,
    Route,
    RouteCosts,
    RouteType,
    TripCategory,
    TripCostBreakdown,
    TripLocation,
    TripPreferences,
)


# --- Itineraries ---

class ItineraryCreateRequest(BaseModel):
    """Request schema for creating a new itinerary."""
    trip_name: str = Field(description="Trip name", min_length=1, max_length=200)
    start_date: datetime = Field(description="Trip start")
    end_date: datetime = Field(description="Trip end")
    start_location: TripLocation
    end_location: TripLocation
    destinations: list[TripLocation] = Field(default_factory=list)
    preferences: Optional[TripPreferences] = Field(default=None, description="Defaults applied when omitted")
    is_public: bool = False

    class Config:
        json_schema_extra = {
            "example": {
                "trip_name": "South Coast Loop",
                "start_date": "2026-03-01T08:00:00Z",
                "end_date": "2026-03-04T18:00:00Z",
                "start_location": {"name": "Colombo", "latitude": 6.9271, "longitude": 79.8612},
                "end_location": {"name": "Galle", "latitude": 6.0535, "longitude": 80.221},
                "preferences": {"travel_style": "relaxed", "transportation": "private"},
            }
        }


class ItineraryUpdateRequest(BaseModel):
    """Request schema for updating an itinerary (partial updates)."""
    trip_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    start_location: Optional[TripLocation] = None
    end_location: Optional[TripLocation] = None
    destinations: Optional[list[TripLocation]] = None
    preferences: Optional[TripPreferences] = None
    day_plans: Optional[list[DayPlan]] = None
    status: Optional[ItineraryStatus] = None
    total_estimated_cost: Optional[TripCostBreakdown] = None
    is_public: Optional[bool] = None


class ItineraryResponse(Itinerary):
    """Itinerary with its current completion percentage."""
    completion_percentage: int = Field(ge=0, le=100)


class ItineraryListResponse(BaseModel):
    itineraries: list[ItineraryResponse]
    total: int


class CompletedTripData(BaseModel):
    trip_name: Optional[str] = None
    destination: Optional[str] = Field(default=None, description="Label used for start/end location")
    start_date: datetime
    end_date: datetime


class CompletedTripPlace(BaseModel):
    place_id: Optional[str] = None
    name: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    address: Optional[str] = None
    types: list[str] = Field(default_factory=lambda: ["tourist_attraction"])
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    photos: list[str] = Field(default_factory=list)
    description: Optional[str] = None


class CompletedTripNote(BaseModel):
    content: str


class PlanningBookings(BaseModel):
    """
    Services booked while planning. Items are forwarded to the booking service
    in its own payload format (camelCase keys such as totalPrice, selectedDate).
    """
    accommodations: list[dict[str, Any]] = Field(default_factory=list)
    transportation: list[dict[str, Any]] = Field(default_factory=list)
    guides: list[dict[str, Any]] = Field(default_factory=list)
    destinations: list[dict[str, Any]] = Field(default_factory=list)


class CompletedTripRequest(BaseModel):
    """Planning/payment payload stored as a completed itinerary."""
    trip_data: CompletedTripData
    planning_bookings: PlanningBookings = Field(default_factory=PlanningBookings)
    day_places: dict[int, list[CompletedTripPlace]] = Field(default_factory=dict, description="Places keyed by day number")
    day_notes: dict[int, list[CompletedTripNote]] = Field(default_factory=dict)
    day_checklists: dict[int, list[Checklist]] = Field(default_factory=dict)
    total_amount: Optional[float] = Field(default=None, description="Overrides the summed booking costs")


class CompletedTripResponse(BaseModel):
    itinerary_id: UUID
    trip_name: Optional[str]
    start_date: Optional[datetime]
    end_date: Optional[datetime]
    day_plans_count: int
    total_estimated_cost: TripCostBreakdown
    booking_ids: Optional[BookingIds] = None


# --- Places ---

class PlaceResponse(BaseModel):
    place_id: str
    name: Optional[str] = None
    address: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    rating: Optional[float] = None
    types: list[str] = Field(default_factory=list)
    photos: list[str] = Field(default_factory=list)


class PlaceSearchResponse(BaseModel):
    results: list[PlaceResponse]
    total: int


class PlaceSuggestionResponse(BaseModel):
    place_id: Optional[str] = None
    text: str
    main_text: Optional[str] = None
    secondary_text: Optional[str] = None


class AutocompleteResponse(BaseModel):
    suggestions: list[PlaceSuggestionResponse]


# --- Routes ---

class RouteSetResponse(BaseModel):
    """An itinerary's routes keyed by type."""
    itinerary_id: UUID
    count: int
    selected_route_id: Optional[UUID] = None
    shortest: Optional[Route] = None
    recommended: Optional[Route] = None
    scenic: Optional[Route] = None


class RouteCalculationResponse(RouteSetResponse):
    """Result of a route computation; degraded when some attraction searches failed."""
    enrichment_degraded: bool = False
    failed_waypoints: list[int] = Field(default_factory=list)


class DistanceBreakdown(BaseModel):
    meters: int
    kilometers: float
    miles: float


class DurationBreakdown(BaseModel):
    seconds: int
    minutes: int
    hours: float


class RouteComparisonItem(BaseModel):
    route_id: UUID
    type: RouteType
    distance: DistanceBreakdown
    duration: DurationBreakdown
    estimated_costs: RouteCosts
    attractions_count: int
    score: float


class RouteComparisonResponse(BaseModel):
    itinerary_id: UUID
    routes: list[RouteComparisonItem] = Field(description="Sorted by score, best first")


class RouteSelectResponse(BaseModel):
    itinerary_id: UUID
    selected_route_id: UUID
    route_type: RouteType


# --- My Trips ---

class RouteSummary(BaseModel):
    """Compact route card for trip listings."""
    id: UUID
    route_type: RouteType
    total_distance: int
    total_duration: int
    estimated_cost: float = 0


class TripCard(BaseModel):
    """One classified itinerary."""
    id: UUID
    trip_name: Optional[str]
    destination: str = Field(description="First three place names (+N more), or 'start to end'")
    start_location_name: Optional[str] = None
    end_location_name: Optional[str] = None
    start_date: Optional[datetime]
    end_date: Optional[datetime]
    status: ItineraryStatus
    completion_percentage: int = Field(ge=0, le=100)
    has_route: bool
    selected_route: Optional[RouteSummary] = None
    day_plans_count: int
    places_count: int
    locations: list[str] = Field(default_factory=list)
    trip_duration: Optional[int] = Field(default=None, description="Days, inclusive of start and end")
    days_until_start: Optional[int] = None
    is_upcoming: bool
    is_active: bool
    is_completed: bool
    is_currently_active: bool = False
    days_remaining: Optional[int] = None
    created_at: datetime
    updated_at: datetime


class TripDetail(TripCard):
    """Full view of one trip with all its routes."""
    start_location: Optional[TripLocation] = None
    end_location: Optional[TripLocation] = None
    day_plans: list[DayPlan] = Field(default_factory=list)
    all_routes: list[RouteSummary] = Field(default_factory=list)
    selected_route_costs: Optional[RouteCosts] = None


class TripBucket(BaseModel):
    count: int
    trips: list[TripCard]


class TripsSummaryCounts(BaseModel):
    total: int
    saved: int
    unfinished: int
    upcoming: int


class MyTripsResponse(BaseModel):
    saved: TripBucket
    unfinished: TripBucket
    upcoming: TripBucket
    summary: TripsSummaryCounts


class TripCategoryResponse(BaseModel):
    category: TripCategory
    count: int
    trips: list[TripCard]
