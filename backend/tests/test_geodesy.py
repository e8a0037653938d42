"""Tests for haversine distance."""

import math

from cargo_tracker.core.geodesy import DistanceCalculator, haversine_km

SHANGHAI = (121.47, 31.23)
SINGAPORE = (103.82, 1.35)


def test_coincident_points_are_zero():
    calc = DistanceCalculator()
    for p in [(0.0, 0.0), SHANGHAI, (-180.0, 90.0), (179.9, -45.5)]:
        assert calc.distance(p, p) == 0.0


def test_symmetry():
    calc = DistanceCalculator()
    pairs = [
        (SHANGHAI, SINGAPORE),
        ((4.48, 51.92), (-74.0, 40.7)),
        ((170.0, -10.0), (-170.0, 10.0)),
    ]
    for a, b in pairs:
        assert math.isclose(calc.distance(a, b), calc.distance(b, a), rel_tol=1e-12)


def test_antipodal_is_half_circumference():
    calc = DistanceCalculator()
    d = calc.distance((0.0, 0.0), (-180.0, 0.0))
    assert abs(d - math.pi * 6371.0) < 0.5
    assert abs(d - 20015.09) < 0.5


def test_shanghai_to_singapore():
    d = DistanceCalculator().distance(SHANGHAI, SINGAPORE)
    # Published great-circle distance is about 3800 km
    assert 3700 < d < 3900


def test_custom_radius_scales_distance():
    unit = DistanceCalculator(radius_km=1.0).distance(SHANGHAI, SINGAPORE)
    earth = DistanceCalculator().distance(SHANGHAI, SINGAPORE)
    assert math.isclose(earth, unit * 6371.0, rel_tol=1e-9)


def test_non_finite_input_returns_nan():
    assert math.isnan(haversine_km(math.nan, 0.0, 10.0, 10.0))
    assert math.isnan(haversine_km(0.0, math.inf, 10.0, 10.0))
