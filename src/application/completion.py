"""
Itinerary completion: how far along the planning of a trip is, 0-100.
"""
from src.domain.models import Itinerary


def completion_units(itinerary: Itinerary) -> list[bool]:
    """The seven planning checks, in display order."""
    return [
        bool(itinerary.trip_name),
        itinerary.start_date is not None,
        itinerary.end_date is not None,
        itinerary.start_location is not None and itinerary.end_location is not None,
        len(itinerary.day_plans) > 0,
        any(day.places for day in itinerary.day_plans),
        itinerary.selected_route_id is not None,
    ]


def calculate_completion(itinerary: Itinerary) -> int:
    """Percentage of completed planning checks, rounded to the nearest integer."""
    units = completion_units(itinerary)
    return round(sum(units) / len(units) * 100)
