import pytest

from routebid.shared.services.geo import distance_km


def test_same_point_is_zero():
    assert distance_km(40.7590, -73.9850, 40.7590, -73.9850) == 0


def test_short_city_distance():
    assert distance_km(40.7590, -73.9850, 40.7600, -73.9840) == pytest.approx(0.14, abs=0.01)


def test_is_symmetric():
    a = distance_km(40.7590, -73.9850, 40.7069, -74.0113)
    b = distance_km(40.7069, -74.0113, 40.7590, -73.9850)
    assert a == pytest.approx(b)


def test_long_distance():
    # Nueva York - Los Ángeles
    assert distance_km(40.7128, -74.0060, 34.0522, -118.2437) == pytest.approx(3936, rel=0.01)


def test_antipodes_do_not_fail():
    assert distance_km(0, 0, 0, 180) == pytest.approx(20015, rel=0.001)
