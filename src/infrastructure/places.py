"""
Places provider abstraction and Google Places API (New) implementation.
Read-only lookups: nearby search, text search, autocomplete and place details.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from src.config import settings
from src.domain.errors import PlacesUnavailableError
from src.domain.models import GeoPoint

logger = logging.getLogger(__name__)


SEARCH_FIELD_MASK = (
    "places.id,places.displayName,places.formattedAddress,places.location,"
    "places.rating,places.types,places.photos"
)
DETAILS_FIELD_MASK = (
    "id,displayName,formattedAddress,location,rating,types,photos,"
    "editorialSummary,currentOpeningHours,priceLevel,userRatingCount"
)


@dataclass
class PlaceResult:
    """Parsed place from the Places API."""
    place_id: str
    name: Optional[str]
    address: Optional[str]
    latitude: Optional[float]
    longitude: Optional[float]
    rating: Optional[float]
    types: list[str] = field(default_factory=list)
    photos: list[str] = field(default_factory=list)


@dataclass
class PlaceSuggestion:
    """Autocomplete prediction."""
    place_id: Optional[str]
    text: str
    main_text: Optional[str] = None
    secondary_text: Optional[str] = None


class PlacesProvider(ABC):
    """Abstract base class for places providers."""

    @abstractmethod
    async def search_nearby(
        self,
        center: GeoPoint,
        radius_meters: float,
        included_types: Optional[list[str]] = None,
    ) -> list[PlaceResult]:
        """
        Places within a radius of a point, ranked by provider relevance.

        Raises:
            PlacesUnavailableError: provider failure
        """
        pass

    @abstractmethod
    async def search_text(
        self,
        query: str,
        location_bias: Optional[GeoPoint] = None,
    ) -> list[PlaceResult]:
        pass

    @abstractmethod
    async def autocomplete(
        self,
        text: str,
        location_bias: Optional[GeoPoint] = None,
    ) -> list[PlaceSuggestion]:
        pass

    @abstractmethod
    async def get_place_details(self, place_id: str) -> dict[str, Any]:
        pass


class GooglePlacesProvider(PlacesProvider):
    """
    Places provider backed by Google Places API (New).
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_seconds: Optional[int] = None,
    ):
        """
        Initialize Google Places provider.

        Args:
            api_key: Google Maps API key (defaults to settings)
            base_url: API base URL (defaults to settings)
            timeout_seconds: HTTP timeout in seconds
        """
        self.api_key = api_key or settings.google_maps_api_key
        self.base_url = (base_url or settings.google_places_base_url).rstrip("/")
        self.timeout_seconds = timeout_seconds or settings.google_places_timeout_seconds
        self.language = settings.google_places_default_language

    def _headers(self, field_mask: Optional[str] = None) -> dict:
        headers = {
            "Content-Type": "application/json",
            "X-Goog-Api-Key": self.api_key or "",
        }
        if field_mask:
            headers["X-Goog-FieldMask"] = field_mask
        return headers

    @staticmethod
    def _circle(center: GeoPoint, radius: float) -> dict:
        return {
            "circle": {
                "center": {"latitude": center.latitude, "longitude": center.longitude},
                "radius": float(radius),
            }
        }

    async def _request(
        self,
        method: str,
        path: str,
        operation: str,
        json_body: Optional[dict] = None,
        field_mask: Optional[str] = None,
    ) -> dict:
        """Send one Places API request, translating failures into PlacesUnavailableError."""
        if not self.api_key:
            logger.warning("Google Maps API key not configured, skipping places lookup")
            raise PlacesUnavailableError("Places provider is not configured")

        url = f"{self.base_url}/{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                if method == "GET":
                    response = await client.get(url, headers=self._headers(field_mask))
                else:
                    response = await client.post(url, json=json_body, headers=self._headers(field_mask))
                response.raise_for_status()
                return response.json()

        except httpx.TimeoutException:
            logger.warning(f"Google Places {operation} timeout after {self.timeout_seconds}s")
            raise PlacesUnavailableError(f"Failed to {operation}: timeout")
        except httpx.HTTPStatusError as e:
            logger.warning(f"Google Places {operation} HTTP error: {e.response.status_code}")
            raise PlacesUnavailableError(f"Failed to {operation}: HTTP {e.response.status_code}")
        except httpx.HTTPError as e:
            logger.error(f"Google Places {operation} transport error: {e}")
            raise PlacesUnavailableError(f"Failed to {operation}: {e}")

    @staticmethod
    def parse_place(place: dict) -> Optional[PlaceResult]:
        """Parse a single place from a Places API response."""
        try:
            location = place.get("location") or {}
            display_name = place.get("displayName") or {}
            return PlaceResult(
                place_id=place["id"],
                name=display_name.get("text") or place.get("name"),
                address=place.get("formattedAddress"),
                latitude=location.get("latitude"),
                longitude=location.get("longitude"),
                rating=place.get("rating"),
                types=place.get("types", []),
                photos=[p["name"] for p in place.get("photos", []) if "name" in p],
            )
        except (KeyError, TypeError) as e:
            logger.warning(f"Failed to parse place result: {e}")
            return None

    def _parse_places(self, data: dict) -> list[PlaceResult]:
        results = []
        for place in data.get("places", []):
            parsed = self.parse_place(place)
            if parsed:
                results.append(parsed)
        return results

    async def search_nearby(
        self,
        center: GeoPoint,
        radius_meters: float,
        included_types: Optional[list[str]] = None,
    ) -> list[PlaceResult]:
        body = {
            "locationRestriction": self._circle(center, radius_meters),
            "languageCode": self.language,
            "maxResultCount": settings.google_places_nearby_max_results,
        }
        if included_types:
            body["includedTypes"] = included_types

        data = await self._request(
            "POST", "places:searchNearby", "search nearby places",
            json_body=body, field_mask=SEARCH_FIELD_MASK,
        )
        results = self._parse_places(data)
        logger.debug(f"Nearby search at ({center.latitude}, {center.longitude}) returned {len(results)} places")
        return results

    async def search_text(
        self,
        query: str,
        location_bias: Optional[GeoPoint] = None,
    ) -> list[PlaceResult]:
        body = {"textQuery": query, "languageCode": self.language}
        if location_bias:
            body["locationBias"] = self._circle(location_bias, settings.google_places_bias_radius_meters)

        data = await self._request(
            "POST", "places:searchText", "search places",
            json_body=body, field_mask=SEARCH_FIELD_MASK,
        )
        results = self._parse_places(data)
        logger.info(f"Text search '{query}' returned {len(results)} places")
        return results

    async def autocomplete(
        self,
        text: str,
        location_bias: Optional[GeoPoint] = None,
    ) -> list[PlaceSuggestion]:
        body = {"input": text, "languageCode": self.language}
        if location_bias:
            body["locationBias"] = self._circle(location_bias, settings.google_places_bias_radius_meters)

        data = await self._request(
            "POST", "places:autocomplete", "get autocomplete suggestions", json_body=body,
        )

        suggestions = []
        for suggestion in data.get("suggestions", []):
            prediction = suggestion.get("placePrediction")
            if not prediction:
                continue
            structured = prediction.get("structuredFormat") or {}
            suggestions.append(
                PlaceSuggestion(
                    place_id=prediction.get("placeId"),
                    text=(prediction.get("text") or {}).get("text", ""),
                    main_text=(structured.get("mainText") or {}).get("text"),
                    secondary_text=(structured.get("secondaryText") or {}).get("text"),
                )
            )
        return suggestions

    async def get_place_details(self, place_id: str) -> dict[str, Any]:
        return await self._request(
            "GET", f"places/{place_id}", "get place details", field_mask=DETAILS_FIELD_MASK,
        )


# Global provider instance
_places_provider: Optional[PlacesProvider] = None


def get_places_provider() -> PlacesProvider:
    """Get or create the places provider singleton."""
    global _places_provider
    if _places_provider is None:
        _places_provider = GooglePlacesProvider()
    return _places_provider
