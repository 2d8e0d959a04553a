"""
Place lookup endpoints backed by the places provider.
Public: no authentication required.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from src.domain.models import GeoPoint
from src.domain.schemas import (
    AutocompleteResponse,
    PlaceResponse,
    PlaceSearchResponse,
    PlaceSuggestionResponse,
)
from src.infrastructure.places import PlacesProvider, get_places_provider

router = APIRouter(prefix="/places", tags=["places"])


def _bias(lat: Optional[float], lng: Optional[float]) -> Optional[GeoPoint]:
    if lat is None or lng is None:
        return None
    return GeoPoint(latitude=lat, longitude=lng)


@router.get("/search", response_model=PlaceSearchResponse, summary="Text search for places")
async def search_places(
    query: str = Query(min_length=1, description="Free-text query"),
    lat: Optional[float] = Query(default=None, ge=-90, le=90),
    lng: Optional[float] = Query(default=None, ge=-180, le=180),
    provider: PlacesProvider = Depends(get_places_provider),
) -> PlaceSearchResponse:
    """Results are biased to a 50km circle around lat/lng when both are given."""
    results = await provider.search_text(query, _bias(lat, lng))
    return PlaceSearchResponse(
        results=[
            PlaceResponse(
                place_id=r.place_id,
                name=r.name,
                address=r.address,
                latitude=r.latitude,
                longitude=r.longitude,
                rating=r.rating,
                types=r.types,
                photos=r.photos,
            )
            for r in results
        ],
        total=len(results),
    )


@router.get("/autocomplete", response_model=AutocompleteResponse, summary="Autocomplete place names")
async def autocomplete_places(
    input: str = Query(min_length=1, description="Partial text typed by the user"),
    lat: Optional[float] = Query(default=None, ge=-90, le=90),
    lng: Optional[float] = Query(default=None, ge=-180, le=180),
    provider: PlacesProvider = Depends(get_places_provider),
) -> AutocompleteResponse:
    suggestions = await provider.autocomplete(input, _bias(lat, lng))
    return AutocompleteResponse(
        suggestions=[
            PlaceSuggestionResponse(
                place_id=s.place_id,
                text=s.text,
                main_text=s.main_text,
                secondary_text=s.secondary_text,
            )
            for s in suggestions
        ]
    )


@router.get("/{place_id}", summary="Place details")
async def get_place_details(
    place_id: str,
    provider: PlacesProvider = Depends(get_places_provider),
) -> dict:
    """Provider place record, passed through unchanged."""
    return await provider.get_place_details(place_id)
