"""
Tests for scenic route attraction enrichment.
"""
import pytest

from src.application.attractions import AttractionEnricher
from src.config import settings
from src.domain.models import Waypoint
from tests.fakes import FakePlacesProvider, place


def _waypoints(*lats):
    return [Waypoint(latitude=lat, longitude=80.0, name=f"wp{i}", order=i) for i, lat in enumerate(lats)]


@pytest.mark.asyncio
async def test_keeps_first_five_per_waypoint():
    provider = FakePlacesProvider({6.0: [place(f"p{i}", rating=4.0) for i in range(8)]})
    enricher = AttractionEnricher(provider, per_waypoint=5, detour_seconds=1800)

    result = await enricher.enrich(_waypoints(6.0))

    assert [a.place_id for a in result.attractions] == ["p0", "p1", "p2", "p3", "p4"]
    assert all(a.detour_time == 1800 for a in result.attractions)
    assert all(a.distance_from_route == 0 for a in result.attractions)
    assert not result.degraded


@pytest.mark.asyncio
async def test_deduplicates_by_place_id_keeping_first_occurrence():
    provider = FakePlacesProvider({
        6.0: [place("fort", rating=4.7), place("beach", rating=4.2)],
        6.5: [place("beach", rating=4.2), place("temple", rating=4.5)],
    })
    enricher = AttractionEnricher(provider)

    result = await enricher.enrich(_waypoints(6.0, 6.5))

    assert [a.place_id for a in result.attractions] == ["fort", "beach", "temple"]


@pytest.mark.asyncio
async def test_failed_waypoint_contributes_nothing_and_marks_degraded():
    provider = FakePlacesProvider(
        {6.0: [place("fort")], 7.0: [place("temple")]},
        failing_lats={6.5},
    )
    enricher = AttractionEnricher(provider)

    result = await enricher.enrich(_waypoints(6.0, 6.5, 7.0))

    assert [a.place_id for a in result.attractions] == ["fort", "temple"]
    assert result.failed_waypoints == [1]
    assert result.degraded
    assert len(provider.nearby_calls) == 3


@pytest.mark.asyncio
async def test_unexpected_provider_error_is_contained():
    class BrokenProvider(FakePlacesProvider):
        async def search_nearby(self, center, radius_meters, included_types=None):
            raise RuntimeError("boom")

    result = await AttractionEnricher(BrokenProvider()).enrich(_waypoints(6.0, 7.0))

    assert result.attractions == []
    assert result.failed_waypoints == [0, 1]


@pytest.mark.asyncio
async def test_searches_every_waypoint_with_limited_concurrency():
    provider = FakePlacesProvider()
    enricher = AttractionEnricher(provider, concurrency=1)

    result = await enricher.enrich(_waypoints(6.0, 6.1, 6.2, 6.3))

    assert [c.latitude for c in provider.nearby_calls] == [6.0, 6.1, 6.2, 6.3]
    assert result.attractions == []


@pytest.mark.asyncio
async def test_explicit_zero_settings_are_respected():
    provider = FakePlacesProvider({6.0: [place("fort", rating=4.5)]})
    enricher = AttractionEnricher(provider, per_waypoint=0, detour_seconds=0, concurrency=0)

    result = await enricher.enrich(_waypoints(6.0))

    assert enricher.per_waypoint == 0
    assert enricher.detour_seconds == 0
    assert enricher.concurrency == 1
    assert result.attractions == []


def test_unset_settings_fall_back_to_config():
    enricher = AttractionEnricher(FakePlacesProvider())

    assert enricher.per_waypoint == settings.attractions_per_waypoint
    assert enricher.radius_meters == settings.attraction_search_radius_meters
    assert enricher.concurrency == settings.attraction_search_concurrency
