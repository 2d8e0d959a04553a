"""
Tests for the booking service client.
"""
import pytest
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import httpx

from src.application.itinerary_service import ItineraryService
from src.domain.models import BookingIds, ItineraryStatus
from src.domain.schemas import CompletedTripRequest
from src.infrastructure.booking_client import BookingServiceClient, build_booking_details
from src.infrastructure.repositories import ItineraryRepository
from tests.fakes import MockResponse


PLANNING_BOOKINGS = {
    "accommodations": [
        {"name": "Jetwing Lighthouse", "serviceId": "acc-1", "totalPrice": 45000,
         "checkIn": "2026-05-01", "checkOut": "2026-05-03", "adults": 2},
    ],
    "transportation": [{"name": "Van", "serviceId": "veh-1", "totalPrice": "12000", "days": 2}],
    "guides": [{"name": "Nimal", "serviceId": "guide-1", "totalPrice": 8000}],
}


def _ok(booking_id):
    return MockResponse({"success": True, "data": {"bookingId": booking_id}})


@pytest.mark.asyncio
async def test_create_bookings_posts_one_request_per_item():
    client = BookingServiceClient(base_url="http://bookings.test/enhanced")
    itinerary_id = uuid4()

    with patch.object(httpx.AsyncClient, 'post', new_callable=AsyncMock) as mock_post:
        mock_post.side_effect = [_ok("b-acc"), _ok("b-veh"), _ok("b-guide")]

        booking_ids = await client.create_bookings(PLANNING_BOOKINGS, "user-1", itinerary_id, "tok")

        assert mock_post.call_count == 3
        first = mock_post.call_args_list[0]

    assert booking_ids.accommodations == ["b-acc"]
    assert booking_ids.transportation == ["b-veh"]
    assert booking_ids.guides == ["b-guide"]

    payload = first.kwargs["json"]
    assert first.args[0] == "http://bookings.test/enhanced"
    assert first.kwargs["headers"] == {"Authorization": "Bearer tok"}
    assert payload["serviceType"] == "accommodation"
    assert payload["itineraryId"] == str(itinerary_id)
    assert payload["serviceProvider"] == "Property Owner"
    assert payload["totalAmount"] == 45000.0
    assert payload["bookingDetails"]["nights"] == 2
    assert payload["bookingDetails"]["adults"] == 2


@pytest.mark.asyncio
async def test_failed_items_are_skipped():
    client = BookingServiceClient(base_url="http://bookings.test/enhanced")

    with patch.object(httpx.AsyncClient, 'post', new_callable=AsyncMock) as mock_post:
        mock_post.side_effect = [
            MockResponse({}, status_code=500),
            httpx.ConnectError("refused"),
            MockResponse({"success": False}),
        ]

        booking_ids = await client.create_bookings(PLANNING_BOOKINGS, "user-1", uuid4(), "tok")

    assert booking_ids.accommodations == []
    assert booking_ids.transportation == []
    assert booking_ids.guides == []


@pytest.mark.asyncio
async def test_non_object_responses_are_rejections():
    client = BookingServiceClient(base_url="http://bookings.test/enhanced")

    with patch.object(httpx.AsyncClient, 'post', new_callable=AsyncMock) as mock_post:
        mock_post.side_effect = [
            MockResponse(["unexpected"]),
            MockResponse({"success": True, "data": "b-veh"}),
            MockResponse(None),
        ]

        booking_ids = await client.create_bookings(PLANNING_BOOKINGS, "user-1", uuid4(), "tok")

        assert mock_post.call_count == 3

    assert booking_ids == BookingIds()


@pytest.mark.asyncio
async def test_unexpected_booking_response_keeps_stored_trip(db_session):
    service = ItineraryService(db_session, BookingServiceClient(base_url="http://bookings.test/enhanced"))
    request = CompletedTripRequest.model_validate({
        "trip_data": {"start_date": "2026-05-01T00:00:00Z", "end_date": "2026-05-02T00:00:00Z"},
        "planning_bookings": PLANNING_BOOKINGS,
    })

    with patch.object(httpx.AsyncClient, 'post', new_callable=AsyncMock) as mock_post:
        mock_post.return_value = MockResponse(["unexpected"])

        result = await service.store_completed_trip("user-1", request, "tok")

    assert result.booking_ids is None
    stored = await ItineraryRepository(db_session).get(result.itinerary_id)
    assert stored.status == ItineraryStatus.COMPLETED
    assert len(stored.day_plans) == 2


@pytest.mark.asyncio
async def test_no_items_makes_no_requests():
    client = BookingServiceClient(base_url="http://bookings.test/enhanced")

    with patch.object(httpx.AsyncClient, 'post', new_callable=AsyncMock) as mock_post:
        booking_ids = await client.create_bookings({"accommodations": []}, "user-1", uuid4(), "tok")

        mock_post.assert_not_called()

    assert booking_ids.accommodations == []


def test_booking_details_defaults():
    transport = build_booking_details("transportation", {"name": "Van", "estimatedDistance": "n/a"})
    guide = build_booking_details("guide", {"name": "Nimal"})
    stay = build_booking_details("accommodation", {"name": "Hotel", "checkIn": "bad"})

    assert transport["days"] == 1
    assert transport["passengers"] == 1
    assert transport["estimatedDistance"] == 0.0
    assert guide["duration"] == "1 day"
    assert guide["groupSize"] == 1
    assert stay["nights"] == 1
    assert stay["rooms"] == 1
