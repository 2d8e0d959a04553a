"""
Client for the external booking service.

Booking creation is a side effect of storing a completed trip: one request per
booked accommodation, vehicle and guide. Failures are logged per item and never
propagate, so the stored itinerary is unaffected by an unavailable booking service.
"""
import logging
import math
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

import httpx

from src.config import settings
from src.domain.models import BookingIds

logger = logging.getLogger(__name__)


# Booking payload group -> (service type sent downstream, BookingIds field, default provider label)
SERVICE_GROUPS = {
    "accommodations": ("accommodation", "accommodations", "Property Owner"),
    "transportation": ("transportation", "transportation", "Vehicle Owner"),
    "guides": ("guide", "guides", "Tour Guide"),
}


def _to_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _to_int(value: Any, default: int) -> int:
    try:
        return int(value) or default
    except (TypeError, ValueError):
        return default


def _nights(check_in: Optional[str], check_out: Optional[str]) -> int:
    try:
        delta = datetime.fromisoformat(check_out) - datetime.fromisoformat(check_in)
    except (TypeError, ValueError):
        return 1
    return max(math.ceil(delta.total_seconds() / 86400), 1)


def build_booking_details(service_type: str, item: dict) -> dict:
    """Service-specific detail block for one booking request."""
    common = {
        "name": item.get("name"),
        "location": item.get("location"),
        "description": item.get("description") or "",
        "rating": item.get("rating") or 0,
        "policies": item.get("policies") or {},
        "availability": item.get("availability") or {},
    }

    if service_type == "accommodation":
        return {
            **common,
            "checkInDate": item.get("checkIn"),
            "checkOutDate": item.get("checkOut"),
            "adults": _to_int(item.get("adults"), 1),
            "children": _to_int(item.get("children"), 0),
            "rooms": _to_int(item.get("rooms"), 1),
            "nights": _nights(item.get("checkIn"), item.get("checkOut")),
            "amenities": item.get("amenities") or [],
        }
    if service_type == "transportation":
        return {
            **common,
            "startDate": item.get("startDate"),
            "days": _to_int(item.get("days"), 1),
            "passengers": _to_int(item.get("passengers"), 1),
            "pickupLocation": item.get("pickupLocation"),
            "dropoffLocation": item.get("dropoffLocation"),
            "estimatedDistance": _to_float(item.get("estimatedDistance")),
            "vehicleType": item.get("vehicleType") or "",
        }
    return {
        **common,
        "tourDate": item.get("tourDate"),
        "duration": item.get("duration") or "1 day",
        "groupSize": _to_int(item.get("groupSize"), 1),
        "languages": item.get("languages") or [],
        "specialties": item.get("specialties") or [],
    }


class BookingServiceClient:
    """Posts booking requests to the booking service."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout_seconds: Optional[int] = None,
    ):
        self.base_url = base_url or settings.booking_service_url
        self.timeout_seconds = timeout_seconds or settings.booking_service_timeout_seconds

    async def _post_booking(self, client: httpx.AsyncClient, payload: dict, auth_token: str) -> Optional[str]:
        response = await client.post(
            self.base_url,
            json=payload,
            headers={"Authorization": f"Bearer {auth_token}"},
        )
        response.raise_for_status()
        body = response.json()
        if not isinstance(body, dict) or not body.get("success"):
            logger.warning(f"Booking service rejected {payload['serviceType']} '{payload['serviceName']}'")
            return None
        data = body.get("data")
        if not isinstance(data, dict):
            logger.warning(f"Booking service returned no booking data for '{payload['serviceName']}'")
            return None
        return data.get("bookingId")

    async def create_bookings(
        self,
        planning_bookings: dict[str, list[dict]],
        user_id: str,
        itinerary_id: UUID,
        auth_token: str,
    ) -> BookingIds:
        """
        Create one booking per planned service item.

        Args:
            planning_bookings: Items grouped as accommodations / transportation / guides
            user_id: Owner of the itinerary
            itinerary_id: Stored itinerary the bookings belong to
            auth_token: Caller's bearer token, forwarded to the booking service

        Returns:
            Booking ids of the successful requests, grouped by service type
        """
        booking_ids = BookingIds()

        async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
            for group, (service_type, target, default_provider) in SERVICE_GROUPS.items():
                for item in planning_bookings.get(group) or []:
                    payload = {
                        "userId": user_id,
                        "itineraryId": str(itinerary_id),
                        "serviceType": service_type,
                        "serviceId": item.get("serviceId"),
                        "serviceName": item.get("name"),
                        "serviceProvider": item.get("provider") or default_provider,
                        "totalAmount": _to_float(item.get("totalPrice")),
                        "bookingDetails": build_booking_details(service_type, item),
                    }
                    try:
                        booking_id = await self._post_booking(client, payload, auth_token)
                    except httpx.HTTPStatusError as e:
                        logger.error(
                            f"Failed to create {service_type} booking for {item.get('name')}: "
                            f"HTTP {e.response.status_code}"
                        )
                        continue
                    except (httpx.HTTPError, ValueError) as e:
                        logger.error(f"Failed to create {service_type} booking for {item.get('name')}: {e}")
                        continue

                    if booking_id:
                        getattr(booking_ids, target).append(str(booking_id))
                        logger.info(f"Created {service_type} booking {booking_id}: {item.get('name')}")

        total = len(booking_ids.accommodations) + len(booking_ids.transportation) + len(booking_ids.guides)
        logger.info(f"Created {total} bookings for itinerary {itinerary_id}")
        return booking_ids


def get_booking_client() -> BookingServiceClient:
    return BookingServiceClient()
