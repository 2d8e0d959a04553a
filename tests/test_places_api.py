"""
Integration tests for the public place lookup endpoints.
"""
import pytest

from src.domain.errors import PlacesUnavailableError
from src.infrastructure.places import get_places_provider
from src.main import app
from tests.fakes import FakePlacesProvider


@pytest.fixture
def places_provider():
    provider = FakePlacesProvider()
    app.dependency_overrides[get_places_provider] = lambda: provider
    return provider


@pytest.mark.asyncio
async def test_search_places(client, places_provider):
    response = await client.get("/api/places/search", params={"query": "fort", "lat": 6.05, "lng": 80.22})

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    assert data["results"][0]["place_id"] == "text-fort"
    assert data["results"][0]["rating"] == 4.0


@pytest.mark.asyncio
async def test_search_requires_query(client, places_provider):
    response = await client.get("/api/places/search")

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


@pytest.mark.asyncio
async def test_autocomplete(client, places_provider):
    response = await client.get("/api/places/autocomplete", params={"input": "Galle"})

    assert response.status_code == 200
    suggestions = response.json()["suggestions"]
    assert suggestions == [{
        "place_id": "sugg-1",
        "text": "Galle Fort, Galle",
        "main_text": "Galle Fort",
        "secondary_text": None,
    }]


@pytest.mark.asyncio
async def test_place_details_passes_provider_record_through(client, places_provider):
    response = await client.get("/api/places/ChIJ-galle-fort")

    assert response.status_code == 200
    assert response.json() == {"id": "ChIJ-galle-fort", "displayName": {"text": "Galle Fort"}}


@pytest.mark.asyncio
async def test_provider_failure_is_places_unavailable(client):
    class DownProvider(FakePlacesProvider):
        async def search_text(self, query, location_bias=None):
            raise PlacesUnavailableError("Failed to search places: timeout")

    app.dependency_overrides[get_places_provider] = lambda: DownProvider()

    response = await client.get("/api/places/search", params={"query": "fort"})

    assert response.status_code == 502
    assert response.json() == {"code": "PLACES_UNAVAILABLE", "message": "Failed to search places: timeout"}
