"""
Tests for route cost estimation.
"""
from src.application.route_costs import estimate_route_costs
from src.config import settings
from src.domain.models import TransportMode, TripPreferences


def test_120km_route_with_one_toll_bracket():
    rate = settings.cost_per_km["mixed"]

    costs = estimate_route_costs(120_000)

    assert costs.fuel == 120 * rate
    assert costs.tolls == 500
    assert costs.parking == settings.parking_cost_per_route
    assert costs.total == costs.fuel + costs.tolls + costs.parking
    assert costs.currency == "LKR"


def test_no_tolls_below_first_bracket():
    costs = estimate_route_costs(99_999)

    assert costs.tolls == 0


def test_tolls_count_only_full_brackets():
    assert estimate_route_costs(250_000).tolls == 1000


def test_zero_distance_costs_only_parking():
    costs = estimate_route_costs(0)

    assert costs.fuel == 0
    assert costs.tolls == 0
    assert costs.total == settings.parking_cost_per_route


def test_rate_follows_transport_preference(monkeypatch):
    monkeypatch.setattr(settings, "cost_per_km", {"rental": 450.0, "mixed": 300.0})

    rental = estimate_route_costs(10_000, TripPreferences(transportation=TransportMode.RENTAL))
    public = estimate_route_costs(10_000, TripPreferences(transportation=TransportMode.PUBLIC))

    assert rental.fuel == 4500.0
    # No rate for "public" falls back to the mixed rate
    assert public.fuel == 3000.0


def test_unknown_transport_preference_uses_mixed():
    preferences = TripPreferences(transportation="hovercraft")

    assert preferences.transportation == TransportMode.MIXED


def test_total_is_exact_sum_with_fractional_rate(monkeypatch):
    monkeypatch.setattr(settings, "cost_per_km", {"mixed": 310.0})

    costs = estimate_route_costs(143)

    # 0.143 km * 310 = 44.33, kept in whole currency units
    assert costs.fuel == 44
    assert costs.total == costs.fuel + costs.tolls + costs.parking
    assert costs.total == 244


def test_total_matches_components_across_distances(monkeypatch):
    monkeypatch.setattr(settings, "cost_per_km", {"mixed": 287.5})

    for distance in (1, 143, 9_999, 101_337, 250_001):
        costs = estimate_route_costs(distance)
        assert costs.total == costs.fuel + costs.tolls + costs.parking
        assert costs.fuel == round(distance / 1000 * 287.5)
