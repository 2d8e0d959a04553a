"""
Route type generation: produces the shortest / recommended / scenic path variants.
"""
import logging
from typing import Optional

from src.config import settings
from src.domain.models import RoutePath, RouteType, Waypoint
from src.infrastructure.directions import RoutingProvider

logger = logging.getLogger(__name__)


class RouteTypeGenerator:
    """
    Calls the routing provider twice: once letting it reorder the intermediate
    stops (shortest candidate) and once keeping the itinerary order
    (recommended candidate). The scenic variant shares the recommended path;
    it differs only by attractions and scoring.
    """

    def __init__(self, provider: RoutingProvider, mode: Optional[str] = None):
        self.provider = provider
        self.mode = mode or settings.routing_travel_mode

    async def generate(self, waypoints: list[Waypoint]) -> dict[RouteType, RoutePath]:
        """
        Raises:
            RoutingUnavailableError: either provider call failed; no partial result is returned
        """
        shortest = await self.provider.compute_paths(waypoints, mode=self.mode, optimize=True)
        recommended = await self.provider.compute_paths(waypoints, mode=self.mode, optimize=False)

        # Best alternative of each call
        paths = {
            RouteType.SHORTEST: shortest[0],
            RouteType.RECOMMENDED: recommended[0],
            RouteType.SCENIC: recommended[0],
        }

        for route_type, path in paths.items():
            logger.info(
                f"{route_type.value} path: {path.total_distance / 1000:.1f}km, "
                f"{path.total_duration / 60:.0f}min"
            )
        return paths
