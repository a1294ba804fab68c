"""
Tests for great-circle distance and hub geofence checks
"""
import pytest

from field_ops.geofence import haversine_km, is_inside_geofence

LAGOS = (6.5244, 3.3792)
ABUJA = (9.0765, 7.3986)


def test_zero_distance_to_self():
    assert haversine_km(*LAGOS, *LAGOS) == pytest.approx(0.0)


def test_one_degree_of_latitude():
    assert haversine_km(0.0, 0.0, 1.0, 0.0) == pytest.approx(111.19, abs=0.01)


def test_distance_is_symmetric():
    assert haversine_km(*LAGOS, *ABUJA) == pytest.approx(haversine_km(*ABUJA, *LAGOS))


def test_lagos_to_abuja():
    assert haversine_km(*LAGOS, *ABUJA) == pytest.approx(525, abs=10)


def test_inside_and_outside():
    # ~0.55 km north of the hub
    nearby = (LAGOS[0] + 0.005, LAGOS[1])
    assert is_inside_geofence(*nearby, *LAGOS, radius_km=1.0)
    assert not is_inside_geofence(*nearby, *LAGOS, radius_km=0.5)


def test_boundary_counts_as_inside():
    distance = haversine_km(0.0, 0.0, 0.0, 0.01)
    assert is_inside_geofence(0.0, 0.01, 0.0, 0.0, radius_km=distance)


def test_negative_radius_rejected():
    with pytest.raises(ValueError):
        is_inside_geofence(*LAGOS, *LAGOS, radius_km=-1)
