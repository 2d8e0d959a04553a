"""
SQLAlchemy ORM models for database tables.
These are separate from domain models to maintain clean architecture.
"""
from sqlalchemy import Column, String, Integer, DateTime, JSON, Float, Boolean, ForeignKey, Index, Uuid
from sqlalchemy import Enum as SQLEnum
from datetime import datetime
import uuid
from src.infrastructure.database import Base
from src.domain.models import ItineraryStatus, RouteType


class ItineraryModel(Base):
    """Database model for a user's itinerary."""
    __tablename__ = "itineraries"

    __table_args__ = (
        Index("ix_itineraries_user_id_created_at", "user_id", "created_at"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(String, nullable=False, index=True)  # Opaque identifier from the auth token

    trip_name = Column(String, nullable=True)
    start_date = Column(DateTime, nullable=True, index=True)
    end_date = Column(DateTime, nullable=True)

    # TripLocation dicts
    start_location = Column(JSON, nullable=True)
    end_location = Column(JSON, nullable=True)
    destinations = Column(JSON, nullable=False, default=list)

    preferences = Column(JSON, nullable=False, default=dict)
    day_plans = Column(JSON, nullable=False, default=list)

    status = Column(SQLEnum(ItineraryStatus), nullable=False, default=ItineraryStatus.DRAFT, index=True)

    # Points at routes.id; not a FK because routes already reference itineraries
    selected_route_id = Column(Uuid(as_uuid=True), nullable=True)

    total_estimated_cost = Column(JSON, nullable=False, default=dict)
    booking_ids = Column(JSON, nullable=True)
    is_public = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)


class RouteModel(Base):
    """Database model for a computed route (one per itinerary and route type)."""
    __tablename__ = "routes"

    __table_args__ = (
        Index("ix_routes_itinerary_id_route_type", "itinerary_id", "route_type"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    itinerary_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("itineraries.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    route_type = Column(SQLEnum(RouteType), nullable=False)

    total_distance = Column(Integer, nullable=False)  # meters
    total_duration = Column(Integer, nullable=False)  # seconds

    waypoints = Column(JSON, nullable=False, default=list)
    segments = Column(JSON, nullable=False, default=list)
    overview = Column(JSON, nullable=False, default=dict)
    attractions = Column(JSON, nullable=False, default=list)
    estimated_costs = Column(JSON, nullable=False, default=dict)

    score = Column(Float, nullable=False, default=0.0, index=True)

    calculated_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    google_maps_url = Column(String, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
