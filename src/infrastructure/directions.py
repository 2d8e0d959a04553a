"""
Routing provider abstraction.
Requests path alternatives through an ordered list of waypoints.
"""
import logging
import re
from abc import ABC, abstractmethod
from typing import Optional

import httpx

from src.config import settings
from src.domain.errors import RoutingUnavailableError
from src.domain.models import (
    GeoPoint,
    RouteBounds,
    RouteOverview,
    RoutePath,
    RouteSegment,
    RouteStep,
    SegmentPoint,
    Waypoint,
)

logger = logging.getLogger(__name__)

_HTML_TAG_RE = re.compile(r"<[^>]*>")


def strip_markup(text: str) -> str:
    """Remove HTML tags from a provider instruction."""
    return _HTML_TAG_RE.sub("", text or "")


class RoutingProvider(ABC):
    """
    Abstract base class for routing providers.
    Allows swapping the Directions API for fakes in tests.
    """

    @abstractmethod
    async def compute_paths(
        self,
        waypoints: list[Waypoint],
        mode: str = "driving",
        optimize: bool = False,
    ) -> list[RoutePath]:
        """
        Compute path alternatives through the waypoints.

        Args:
            waypoints: Ordered waypoints, origin first and destination last
            mode: Travel mode ("driving", "walking", "bicycling", "transit")
            optimize: Let the provider reorder intermediate waypoints

        Returns:
            One or more RoutePath alternatives, best first

        Raises:
            RoutingUnavailableError: provider error or zero paths
        """
        pass


class GoogleDirectionsProvider(RoutingProvider):
    """
    Google Directions API-based routing provider.
    """

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        timeout_seconds: int = 15,
    ):
        """
        Initialize Google Directions provider.

        Args:
            api_key: Google Maps API key
            base_url: Directions API base URL (defaults to settings)
            timeout_seconds: HTTP request timeout
        """
        if not api_key:
            raise ValueError("Google Maps API key is required")

        self.api_key = api_key
        self.base_url = base_url or settings.google_directions_base_url
        self.timeout_seconds = timeout_seconds

    @staticmethod
    def _format_point(waypoint: Waypoint) -> str:
        return f"{waypoint.latitude},{waypoint.longitude}"

    def _build_params(self, waypoints: list[Waypoint], mode: str, optimize: bool) -> dict:
        params = {
            "origin": self._format_point(waypoints[0]),
            "destination": self._format_point(waypoints[-1]),
            "key": self.api_key,
            "mode": mode,
            "alternatives": "true",
            "departure_time": "now",
            "traffic_model": "best_guess",
        }

        intermediate = waypoints[1:-1]
        if intermediate:
            joined = "|".join(self._format_point(wp) for wp in intermediate)
            params["waypoints"] = f"optimize:true|{joined}" if optimize else joined
            logger.debug(f"Including {len(intermediate)} intermediate waypoints (optimize={optimize})")
        else:
            logger.debug("No intermediate waypoints, requesting a direct route")

        return params

    async def _fetch_directions(self, params: dict) -> dict:
        """Call the Directions API and return the decoded body."""
        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                response = await client.get(self.base_url, params=params)
                response.raise_for_status()
                return response.json()

        except httpx.TimeoutException:
            logger.warning(f"Google Directions API timeout after {self.timeout_seconds}s")
            raise RoutingUnavailableError(
                f"Routing provider timed out after {self.timeout_seconds}s",
                provider_status="TIMEOUT",
            )
        except httpx.HTTPStatusError as e:
            logger.warning(f"Google Directions API HTTP error: {e.response.status_code}")
            raise RoutingUnavailableError(
                f"Routing provider returned HTTP {e.response.status_code}",
                provider_status=str(e.response.status_code),
            )
        except httpx.HTTPError as e:
            logger.error(f"Google Directions API transport error: {e}")
            raise RoutingUnavailableError(
                f"Routing provider unreachable: {e}",
                provider_status="TRANSPORT_ERROR",
            )

    @staticmethod
    def _parse_step(step: dict) -> RouteStep:
        return RouteStep(
            instruction=strip_markup(step.get("html_instructions", "")),
            distance=step["distance"]["value"],
            duration=step["duration"]["value"],
            start_location=GeoPoint(
                latitude=step["start_location"]["lat"],
                longitude=step["start_location"]["lng"],
            ),
            end_location=GeoPoint(
                latitude=step["end_location"]["lat"],
                longitude=step["end_location"]["lng"],
            ),
        )

    def _parse_leg(self, leg: dict) -> RouteSegment:
        steps = leg.get("steps", [])
        return RouteSegment(
            start_point=SegmentPoint(
                latitude=leg["start_location"]["lat"],
                longitude=leg["start_location"]["lng"],
                name=leg.get("start_address"),
            ),
            end_point=SegmentPoint(
                latitude=leg["end_location"]["lat"],
                longitude=leg["end_location"]["lng"],
                name=leg.get("end_address"),
            ),
            distance=leg["distance"]["value"],
            duration=leg["duration"]["value"],
            polyline="".join(step.get("polyline", {}).get("points", "") for step in steps),
            steps=[self._parse_step(step) for step in steps],
        )

    @staticmethod
    def _parse_bounds(bounds: Optional[dict]) -> Optional[RouteBounds]:
        if not bounds:
            return None
        return RouteBounds(
            northeast=GeoPoint(latitude=bounds["northeast"]["lat"], longitude=bounds["northeast"]["lng"]),
            southwest=GeoPoint(latitude=bounds["southwest"]["lat"], longitude=bounds["southwest"]["lng"]),
        )

    def parse_route(self, route: dict) -> RoutePath:
        """
        Reduce one Directions API route to a RoutePath.
        Totals are the sums over legs, so they always equal the segment sums.
        """
        segments = [self._parse_leg(leg) for leg in route.get("legs", [])]

        return RoutePath(
            total_distance=sum(segment.distance for segment in segments),
            total_duration=sum(segment.duration for segment in segments),
            segments=segments,
            overview=RouteOverview(
                bounds=self._parse_bounds(route.get("bounds")),
                polyline=route.get("overview_polyline", {}).get("points", ""),
                summary=route.get("summary"),
                waypoint_order=route.get("waypoint_order", []),
            ),
        )

    def parse_response(self, data: dict) -> list[RoutePath]:
        """
        Parse a Directions API response into path alternatives.

        Raises:
            RoutingUnavailableError: non-OK status, zero routes, or malformed body
        """
        status = data.get("status", "UNKNOWN")
        if status != "OK":
            error_message = data.get("error_message", "")
            logger.warning(f"Google Directions API returned status: {status} {error_message}")
            raise RoutingUnavailableError(
                f"Directions API error: {status} - {error_message}".rstrip(" -"),
                provider_status=status,
                provider_message=error_message or None,
            )

        routes = data.get("routes", [])
        if not routes:
            raise RoutingUnavailableError(
                "Directions API returned no routes",
                provider_status="ZERO_RESULTS",
            )

        try:
            return [self.parse_route(route) for route in routes]
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Failed to parse Google Directions response: {e}")
            raise RoutingUnavailableError(
                f"Malformed Directions API response: {e}",
                provider_status="MALFORMED_RESPONSE",
            )

    async def compute_paths(
        self,
        waypoints: list[Waypoint],
        mode: str = "driving",
        optimize: bool = False,
    ) -> list[RoutePath]:
        if len(waypoints) < 2:
            raise ValueError("At least 2 waypoints required (origin and destination)")

        params = self._build_params(waypoints, mode, optimize)
        logger.info(
            f"Google Directions API: {params['origin']} -> {params['destination']} "
            f"via {len(waypoints) - 2} waypoints ({mode}, optimize={optimize})"
        )
        data = await self._fetch_directions(params)
        paths = self.parse_response(data)

        best = paths[0]
        logger.info(
            f"Route parsed: {best.total_distance / 1000:.1f}km, "
            f"{best.total_duration / 60:.0f}min, {len(best.segments)} legs"
        )
        return paths


def get_routing_provider() -> RoutingProvider:
    """
    Factory function to get the routing provider based on settings.

    Raises:
        RoutingUnavailableError: if no API key is configured
    """
    if not settings.google_maps_api_key:
        logger.warning("GOOGLE_MAPS_API_KEY not set, route computation is unavailable")
        raise RoutingUnavailableError(
            "Routing provider is not configured",
            provider_status="NOT_CONFIGURED",
        )

    return GoogleDirectionsProvider(
        api_key=settings.google_maps_api_key,
        timeout_seconds=settings.google_directions_timeout_seconds,
    )
