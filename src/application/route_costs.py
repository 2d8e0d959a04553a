"""
Route cost estimation (fuel, tolls, parking).
"""
import math
from typing import Optional

from src.config import settings
from src.domain.models import RouteCosts, TransportMode, TripPreferences


def estimate_route_costs(
    distance_meters: int,
    preferences: Optional[TripPreferences] = None,
) -> RouteCosts:
    """
    Estimate the cost of driving a route.

    fuel = km * rate for the transport preference, in whole currency units
           (unknown modes use "mixed")
    tolls = one toll unit per full toll bracket of distance
    parking = flat amount per route
    """
    distance_km = distance_meters / 1000

    mode = preferences.transportation.value if preferences else TransportMode.MIXED.value
    rates = settings.cost_per_km
    rate = rates.get(mode, rates.get(TransportMode.MIXED.value, 0.0))

    fuel = float(round(distance_km * rate))
    tolls = math.floor(distance_km / settings.toll_bracket_km) * settings.toll_unit_cost
    parking = settings.parking_cost_per_route

    return RouteCosts(
        fuel=fuel,
        tolls=float(tolls),
        parking=float(parking),
        total=fuel + tolls + parking,
        currency=settings.cost_currency,
    )
