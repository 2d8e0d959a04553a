"""
Attraction enrichment for scenic routes.

Searches the places provider around every waypoint, keeps the first few
results per waypoint and merges them in waypoint order without duplicates.
A failing waypoint contributes nothing; the rest of the enrichment continues.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Optional

from src.config import settings
from src.domain.errors import ENRICHMENT_DEGRADED, PlacesUnavailableError
from src.domain.models import Attraction, GeoPoint, Waypoint
from src.infrastructure.places import PlaceResult, PlacesProvider

logger = logging.getLogger(__name__)


@dataclass
class EnrichmentResult:
    """Deduplicated attractions plus the waypoints whose search failed."""
    attractions: list[Attraction] = field(default_factory=list)
    failed_waypoints: list[int] = field(default_factory=list)

    @property
    def degraded(self) -> bool:
        return bool(self.failed_waypoints)


class AttractionEnricher:
    """Finds points of interest near a route's waypoints."""

    def __init__(
        self,
        provider: PlacesProvider,
        radius_meters: Optional[int] = None,
        attraction_types: Optional[list[str]] = None,
        per_waypoint: Optional[int] = None,
        detour_seconds: Optional[int] = None,
        concurrency: Optional[int] = None,
    ):
        self.provider = provider
        self.radius_meters = settings.attraction_search_radius_meters if radius_meters is None else radius_meters
        self.attraction_types = settings.attraction_types if attraction_types is None else attraction_types
        self.per_waypoint = settings.attractions_per_waypoint if per_waypoint is None else per_waypoint
        self.detour_seconds = settings.attraction_detour_seconds if detour_seconds is None else detour_seconds
        if concurrency is None:
            concurrency = settings.attraction_search_concurrency
        self.concurrency = max(concurrency, 1)

    def _to_attraction(self, place: PlaceResult) -> Attraction:
        location = None
        if place.latitude is not None and place.longitude is not None:
            location = GeoPoint(latitude=place.latitude, longitude=place.longitude)
        return Attraction(
            place_id=place.place_id,
            name=place.name,
            location=location,
            types=place.types,
            rating=place.rating,
            distance_from_route=0,
            detour_time=self.detour_seconds,
        )

    async def _search_waypoint(
        self,
        semaphore: asyncio.Semaphore,
        waypoint: Waypoint,
    ) -> Optional[list[Attraction]]:
        """Attractions near one waypoint, or None when the search failed."""
        async with semaphore:
            try:
                places = await self.provider.search_nearby(
                    GeoPoint(latitude=waypoint.latitude, longitude=waypoint.longitude),
                    self.radius_meters,
                    self.attraction_types,
                )
            except PlacesUnavailableError as e:
                logger.warning(f"{ENRICHMENT_DEGRADED}: waypoint {waypoint.order} ({waypoint.name}): {e.message}")
                return None
            except Exception as e:
                logger.warning(f"{ENRICHMENT_DEGRADED}: waypoint {waypoint.order} ({waypoint.name}) unexpected error: {e}")
                return None

        return [self._to_attraction(place) for place in places[: self.per_waypoint]]

    async def enrich(self, waypoints: list[Waypoint]) -> EnrichmentResult:
        semaphore = asyncio.Semaphore(self.concurrency)
        per_waypoint = await asyncio.gather(
            *[self._search_waypoint(semaphore, wp) for wp in waypoints]
        )

        result = EnrichmentResult()
        seen: set[str] = set()
        for waypoint, attractions in zip(waypoints, per_waypoint):
            if attractions is None:
                result.failed_waypoints.append(waypoint.order)
                continue
            for attraction in attractions:
                if attraction.place_id in seen:
                    continue
                seen.add(attraction.place_id)
                result.attractions.append(attraction)

        if result.degraded:
            logger.warning(
                f"{ENRICHMENT_DEGRADED}: {len(result.failed_waypoints)}/{len(waypoints)} waypoint searches failed"
            )
        logger.info(f"Found {len(result.attractions)} unique attractions along {len(waypoints)} waypoints")
        return result
