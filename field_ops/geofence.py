"""Great-circle distance and hub geofence checks."""

from math import atan2, cos, radians, sin, sqrt

# Approximate radius of Earth in kilometres.
_EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Return the great-circle distance in km between two lat/lon points."""
    lat1, lon1, lat2, lon2 = map(radians, [lat1, lon1, lat2, lon2])
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = sin(dlat / 2) ** 2 + cos(lat1) * cos(lat2) * sin(dlon / 2) ** 2
    return _EARTH_RADIUS_KM * 2 * atan2(sqrt(a), sqrt(1 - a))


def is_inside_geofence(
    lat: float,
    lng: float,
    hub_lat: float,
    hub_lng: float,
    radius_km: float,
) -> bool:
    """Return True if (lat, lng) lies within *radius_km* of the hub.

    The boundary counts as inside.
    """
    if radius_km < 0:
        raise ValueError(f"radius_km must be non-negative, got {radius_km}")
    return haversine_km(lat, lng, hub_lat, hub_lng) <= radius_km
