"""
Core domain models for the Trip Route backend.
All models use Pydantic v2 for type safety and validation.
"""
import datetime as dt
from typing import Optional
from enum import Enum
from pydantic import BaseModel, Field, field_validator
from uuid import UUID, uuid4


def to_naive_utc(value: Optional[dt.datetime]) -> Optional[dt.datetime]:
    """Timestamps are stored and compared as naive UTC."""
    if value is not None and value.tzinfo is not None:
        return value.astimezone(dt.timezone.utc).replace(tzinfo=None)
    return value


# Enums for constrained values
class ItineraryStatus(str, Enum):
    """Lifecycle status of an itinerary."""
    DRAFT = "draft"
    PLANNED = "planned"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class RouteType(str, Enum):
    """The three route variants computed for every itinerary."""
    SHORTEST = "shortest"
    RECOMMENDED = "recommended"
    SCENIC = "scenic"


class TripCategory(str, Enum):
    """Dashboard buckets a user's itineraries are classified into."""
    SAVED = "saved"
    UNFINISHED = "unfinished"
    UPCOMING = "upcoming"


class TravelStyle(str, Enum):
    RELAXED = "relaxed"
    MODERATE = "moderate"
    PACKED = "packed"


class BudgetTier(str, Enum):
    BUDGET = "budget"
    MODERATE = "moderate"
    LUXURY = "luxury"


class AccommodationTier(str, Enum):
    HOSTEL = "hostel"
    HOTEL = "hotel"
    RESORT = "resort"
    GUESTHOUSE = "guesthouse"


class TransportMode(str, Enum):
    """User transport preference, drives the per-km cost rate."""
    PUBLIC = "public"
    PRIVATE = "private"
    RENTAL = "rental"
    MIXED = "mixed"


class MealType(str, Enum):
    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


# Itinerary building blocks

class GeoPoint(BaseModel):
    """A bare coordinate."""
    latitude: float
    longitude: float


class TripLocation(BaseModel):
    """Named location used for trip start/end and legacy destinations."""
    name: str = Field(description="Display name")
    place_id: Optional[str] = Field(default=None, description="External place identifier")
    latitude: Optional[float] = Field(default=None, description="Latitude coordinate")
    longitude: Optional[float] = Field(default=None, description="Longitude coordinate")
    arrival_date: Optional[dt.datetime] = Field(default=None, description="Legacy destination arrival")
    departure_date: Optional[dt.datetime] = Field(default=None, description="Legacy destination departure")
    duration: Optional[int] = Field(default=None, description="Legacy destination stay in days")

    def has_coordinates(self) -> bool:
        """Check if this location has valid coordinates."""
        return self.latitude is not None and self.longitude is not None


class Place(BaseModel):
    """A place visited on a given day."""
    place_id: Optional[str] = Field(default=None, description="External place identifier")
    name: Optional[str] = Field(default=None, description="Place name")
    location: Optional[GeoPoint] = Field(default=None, description="Place coordinates")
    address: Optional[str] = None
    types: list[str] = Field(default_factory=list, description="Place type tags")
    rating: Optional[float] = Field(default=None, ge=0, le=5)
    photos: list[str] = Field(default_factory=list)
    description: Optional[str] = None

    def has_coordinates(self) -> bool:
        return self.location is not None


class Activity(BaseModel):
    place_id: Optional[str] = None
    place_name: Optional[str] = None
    activity: Optional[str] = None
    duration: Optional[int] = Field(default=None, description="Duration in minutes")
    estimated_cost: Optional[float] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None


class Accommodation(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    check_in: Optional[str] = None
    check_out: Optional[str] = None
    estimated_cost: Optional[float] = None


class Meal(BaseModel):
    type: Optional[MealType] = None
    restaurant: Optional[str] = None
    estimated_cost: Optional[float] = None
    time: Optional[str] = None


class ChecklistItem(BaseModel):
    id: Optional[str] = None
    title: str
    completed: bool = False


class Checklist(BaseModel):
    id: Optional[str] = None
    title: str
    items: list[ChecklistItem] = Field(default_factory=list)


class DayPlan(BaseModel):
    """One day of an itinerary."""
    day_number: int = Field(ge=1, description="Day number in the trip")
    date: Optional[dt.datetime] = Field(default=None, description="Date of this day")
    places: list[Place] = Field(default_factory=list, description="Ordered places for the day")
    activities: list[Activity] = Field(default_factory=list)
    accommodation: Optional[Accommodation] = None
    meals: list[Meal] = Field(default_factory=list)
    checklists: list[Checklist] = Field(default_factory=list)
    notes: str = ""


class TripPreferences(BaseModel):
    """User preference bundle for a trip."""
    travel_style: TravelStyle = TravelStyle.MODERATE
    interests: list[str] = Field(
        default_factory=lambda: ["tourist_attraction", "museum", "park"],
        description="Interest tags (place types)"
    )
    budget: BudgetTier = BudgetTier.MODERATE
    accommodation: AccommodationTier = AccommodationTier.HOTEL
    transportation: TransportMode = TransportMode.MIXED

    @field_validator("transportation", mode="before")
    @classmethod
    def unknown_transport_is_mixed(cls, value):
        if isinstance(value, str) and value in TransportMode._value2member_map_:
            return value
        return TransportMode.MIXED


class TripCostBreakdown(BaseModel):
    """Aggregate estimated cost of a trip."""
    accommodation: float = 0
    food: float = 0
    activities: float = 0
    transportation: float = 0
    total: float = 0


class BookingIds(BaseModel):
    """Booking identifiers returned by the booking service, grouped by service type."""
    accommodations: list[str] = Field(default_factory=list)
    transportation: list[str] = Field(default_factory=list)
    guides: list[str] = Field(default_factory=list)


class Itinerary(BaseModel):
    """
    A user's multi-day trip.
    This is the normalized itinerary used by route computation and classification.
    """
    id: UUID = Field(default_factory=uuid4, description="Unique itinerary ID")
    user_id: str = Field(description="Opaque owner identifier")
    trip_name: Optional[str] = Field(default=None, description="Trip name")
    start_date: Optional[dt.datetime] = Field(default=None, description="Trip start")
    end_date: Optional[dt.datetime] = Field(default=None, description="Trip end")
    start_location: Optional[TripLocation] = None
    end_location: Optional[TripLocation] = None
    destinations: list[TripLocation] = Field(
        default_factory=list,
        description="Legacy flat destination list, used when day plans have no located places"
    )
    preferences: TripPreferences = Field(default_factory=TripPreferences)
    day_plans: list[DayPlan] = Field(default_factory=list)
    status: ItineraryStatus = ItineraryStatus.DRAFT
    selected_route_id: Optional[UUID] = Field(default=None, description="ID of the selected Route")
    total_estimated_cost: TripCostBreakdown = Field(default_factory=TripCostBreakdown)
    booking_ids: Optional[BookingIds] = None
    is_public: bool = False

    created_at: dt.datetime = Field(default_factory=dt.datetime.utcnow)
    updated_at: dt.datetime = Field(default_factory=dt.datetime.utcnow)

    @field_validator("start_date", "end_date", "created_at", "updated_at")
    @classmethod
    def store_naive_utc(cls, value: Optional[dt.datetime]) -> Optional[dt.datetime]:
        return to_naive_utc(value)

    @property
    def sorted_day_plans(self) -> list[DayPlan]:
        return sorted(self.day_plans, key=lambda day: day.day_number)


# Route models

class Waypoint(BaseModel):
    """A stop the routed path must pass through, in sequence."""
    latitude: float
    longitude: float
    name: Optional[str] = None
    place_id: Optional[str] = None
    order: int = Field(default=0, ge=0, description="Sequence index")


class RouteStep(BaseModel):
    """A single turn-by-turn instruction."""
    instruction: str = Field(description="Plain-text instruction (markup stripped)")
    distance: int = Field(description="Step distance in meters")
    duration: int = Field(description="Step duration in seconds")
    start_location: GeoPoint
    end_location: GeoPoint


class SegmentPoint(BaseModel):
    latitude: float
    longitude: float
    name: Optional[str] = None


class RouteSegment(BaseModel):
    """The portion of a route between two consecutive waypoints."""
    start_point: SegmentPoint
    end_point: SegmentPoint
    distance: int = Field(description="Segment distance in meters")
    duration: int = Field(description="Segment duration in seconds")
    polyline: str = Field(default="", description="Encoded polyline for the segment")
    steps: list[RouteStep] = Field(default_factory=list)


class RouteBounds(BaseModel):
    northeast: GeoPoint
    southwest: GeoPoint


class RouteOverview(BaseModel):
    """Whole-route geometry used for map display."""
    bounds: Optional[RouteBounds] = None
    polyline: str = ""
    summary: Optional[str] = None
    waypoint_order: list[int] = Field(
        default_factory=list,
        description="Order of intermediate waypoints chosen by the provider"
    )


class RoutePath(BaseModel):
    """One path alternative reduced from a routing provider response."""
    total_distance: int = Field(description="Sum of segment distances in meters")
    total_duration: int = Field(description="Sum of segment durations in seconds")
    segments: list[RouteSegment]
    overview: RouteOverview


class Attraction(BaseModel):
    """A point of interest near the route (scenic routes only)."""
    place_id: str
    name: Optional[str] = None
    location: Optional[GeoPoint] = None
    types: list[str] = Field(default_factory=list)
    rating: Optional[float] = None
    distance_from_route: int = Field(default=0, description="Meters from route")
    detour_time: int = Field(description="Additional seconds if visited")


class RouteCosts(BaseModel):
    """Monetary estimate for driving a route."""
    fuel: float
    tolls: float
    parking: float
    total: float
    currency: str = "LKR"


class RouteMetadata(BaseModel):
    calculated_at: dt.datetime = Field(default_factory=dt.datetime.utcnow)
    google_maps_url: Optional[str] = None


class Route(BaseModel):
    """A computed route for one itinerary and one route type."""
    id: UUID = Field(default_factory=uuid4)
    itinerary_id: UUID
    route_type: RouteType
    total_distance: int = Field(description="Meters")
    total_duration: int = Field(description="Seconds")
    waypoints: list[Waypoint]
    segments: list[RouteSegment]
    overview: RouteOverview
    attractions: list[Attraction] = Field(default_factory=list)
    estimated_costs: RouteCosts
    score: float = 0.0
    metadata: RouteMetadata = Field(default_factory=RouteMetadata)
