"""
Configuration management for the Trip Route backend.
Uses Pydantic Settings to load configuration from environment variables.
"""
from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Database
    database_url: str = Field(
        default="postgresql+asyncpg://tripplanner:tripplanner@db:5432/tripplanner",
        description="Database connection URL (asyncpg for PostgreSQL, aiosqlite for tests)"
    )
    database_echo: bool = Field(
        default=False,
        description="Log every SQL statement"
    )

    # Google Maps Platform
    google_maps_api_key: Optional[str] = Field(
        default=None,
        description="Google Maps API key for Directions and Places APIs"
    )
    google_directions_base_url: str = Field(
        default="https://maps.googleapis.com/maps/api/directions/json",
        description="Base URL for Google Directions API"
    )
    google_directions_timeout_seconds: int = Field(
        default=15,
        description="HTTP timeout for Google Directions API calls"
    )
    google_places_base_url: str = Field(
        default="https://places.googleapis.com/v1",
        description="Base URL for Google Places API (New)"
    )
    google_places_timeout_seconds: int = Field(
        default=10,
        description="HTTP timeout for Google Places API calls"
    )
    google_places_default_language: str = Field(
        default="en",
        description="Default language for Places API responses"
    )
    google_places_bias_radius_meters: float = Field(
        default=50000.0,
        description="Location bias radius for text search and autocomplete (50km)"
    )
    google_places_nearby_max_results: int = Field(
        default=20,
        description="Maximum results requested from a nearby search"
    )

    # Routing
    routing_travel_mode: str = Field(
        default="driving",
        description="Travel mode sent to the Directions API (driving, walking, bicycling, transit)"
    )

    # =========================================================================
    # Scenic Route Enrichment
    # =========================================================================

    attraction_search_radius_meters: int = Field(
        default=5000,
        description="Radius around each waypoint searched for attractions (5km)"
    )
    attraction_types: list[str] = Field(
        default=["tourist_attraction", "museum", "park", "natural_feature"],
        description="Place types considered attractions"
    )
    attractions_per_waypoint: int = Field(
        default=5,
        description="Maximum attractions kept per waypoint, in provider relevance order"
    )
    attraction_detour_seconds: int = Field(
        default=1800,
        description="Placeholder detour time attached to every attraction (30 minutes)"
    )
    attraction_search_concurrency: int = Field(
        default=4,
        description="Maximum concurrent nearby searches while enriching a route"
    )

    # =========================================================================
    # Route Cost Estimation
    # =========================================================================

    cost_per_km: dict[str, float] = Field(
        default={"public": 300.0, "private": 300.0, "rental": 300.0, "mixed": 300.0},
        description="Fuel cost per km by transport preference"
    )
    toll_unit_cost: float = Field(
        default=500.0,
        description="Toll charged per full toll bracket"
    )
    toll_bracket_km: float = Field(
        default=100.0,
        description="Distance covered by one toll bracket"
    )
    parking_cost_per_route: float = Field(
        default=200.0,
        description="Flat parking estimate per route"
    )
    cost_currency: str = Field(
        default="LKR",
        description="Currency code attached to cost estimates"
    )

    # =========================================================================
    # Itinerary Generation
    # =========================================================================

    generation_search_radius_meters: int = Field(
        default=5000,
        description="Radius searched around each trip location for day activities (5km)"
    )
    generation_interest_types_limit: int = Field(
        default=3,
        description="Leading interests sent as place types with each activity search"
    )
    generation_min_activity_rating: float = Field(
        default=4.0,
        description="Places rated below this (or unrated) are not suggested as activities"
    )
    daily_transport_cost: dict[str, float] = Field(
        default={"public": 1000.0, "private": 5000.0, "rental": 3000.0, "mixed": 2000.0},
        description="Per-day transportation estimate by transport preference"
    )

    # Completed trips arrive without coordinates; start/end default to the country centre
    completed_trip_default_latitude: float = Field(default=7.8731)
    completed_trip_default_longitude: float = Field(default=80.7718)

    # Booking service (downstream side effect of completed trips)
    booking_service_url: str = Field(
        default="http://localhost:3009/enhanced",
        description="Endpoint receiving per-service booking requests"
    )
    booking_service_timeout_seconds: int = Field(
        default=10,
        description="HTTP timeout for booking service calls"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Root log level")

    # Server
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port")
    debug: bool = Field(default=False, description="Debug mode")


# Global settings instance
settings = Settings()
