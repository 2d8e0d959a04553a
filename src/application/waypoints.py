"""
Waypoint extraction: turns an itinerary into the ordered stop sequence a route must follow.
"""
import logging

from src.domain.errors import ItineraryValidationError
from src.domain.models import Itinerary, TripLocation, Waypoint

logger = logging.getLogger(__name__)


def _location_waypoint(location: TripLocation, order: int) -> Waypoint:
    return Waypoint(
        latitude=location.latitude,
        longitude=location.longitude,
        name=location.name,
        place_id=location.place_id,
        order=order,
    )


def _require_located(location, label: str) -> TripLocation:
    if location is None:
        raise ItineraryValidationError(f"Itinerary has no {label} location")
    if not location.has_coordinates():
        raise ItineraryValidationError(f"{label.capitalize()} location '{location.name}' has no coordinates")
    return location


def extract_waypoints(itinerary: Itinerary) -> list[Waypoint]:
    """
    Build [start, *intermediates, end] for an itinerary.

    Intermediates are the located places of the day plans, in day-number order
    and then in their order within the day. When no day plan has a located
    place, the legacy destinations list is used in its stored order.

    Raises:
        ItineraryValidationError: start or end location missing or without coordinates
    """
    start = _require_located(itinerary.start_location, "start")
    end = _require_located(itinerary.end_location, "end")

    intermediates: list[tuple[float, float, str, str]] = []
    for day in itinerary.sorted_day_plans:
        for index, place in enumerate(day.places, start=1):
            if not place.has_coordinates():
                continue
            intermediates.append((
                place.location.latitude,
                place.location.longitude,
                place.name or f"Place {day.day_number}-{index}",
                place.place_id,
            ))

    if intermediates:
        logger.debug(f"Using {len(intermediates)} waypoints from day plans")
    elif itinerary.destinations:
        intermediates = [
            (d.latitude, d.longitude, d.name, d.place_id)
            for d in itinerary.destinations
            if d.has_coordinates()
        ]
        logger.debug(f"No located day plan places, using {len(intermediates)} legacy destinations")

    waypoints = [_location_waypoint(start, 0)]
    for latitude, longitude, name, place_id in intermediates:
        waypoints.append(
            Waypoint(
                latitude=latitude,
                longitude=longitude,
                name=name,
                place_id=place_id,
                order=len(waypoints),
            )
        )
    waypoints.append(_location_waypoint(end, len(waypoints)))

    return waypoints
