"""Check-in and check-out against the driver's hub."""

import logging

from field_ops.errors import CheckInError
from field_ops.geofence import haversine_km, is_inside_geofence
from field_ops.session import DriverSession, DriverSnapshot

logger = logging.getLogger(__name__)

VEHICLE_SIDES = ("Front", "Right", "Left", "Back")


def _is_cargo(vehicle: dict | None) -> bool:
    return bool(vehicle) and str(vehicle.get("usageType", "")).lower() == "cargo"


def _require_photos(photos: dict | None) -> None:
    missing = [side for side in VEHICLE_SIDES if not (photos or {}).get(side)]
    if missing:
        raise CheckInError(
            "Please upload all images for cargo vehicles "
            f"(missing: {', '.join(missing)})."
        )


def ensure_inside_geofence(snapshot: DriverSnapshot, lat: float, lng: float) -> None:
    """Raise CheckInError if the hub has a geofence and (lat, lng) is outside it."""
    if not snapshot.has_geofence:
        return
    hub_lat = float(snapshot.operation_lat)
    hub_lng = float(snapshot.operation_lng)
    radius = float(snapshot.geofence_radius_km)
    if not is_inside_geofence(lat, lng, hub_lat, hub_lng, radius):
        distance = haversine_km(lat, lng, hub_lat, hub_lng)
        logger.info("[GEOFENCE] Driver %.2f km from hub (radius %.2f km)", distance, radius)
        raise CheckInError(
            f"You are {distance:.2f} km from your hub; move within "
            f"{radius:.2f} km to continue."
        )


def check_in(
    session: DriverSession,
    vehicle: dict | None,
    lat: float,
    lng: float,
    address: dict | None = None,
    photos: dict | None = None,
) -> DriverSnapshot:
    """Check the driver in with *vehicle* and return the refreshed snapshot.

    Raises:
        CheckInError: If no vehicle is selected, cargo photos are missing, or
            the driver is outside the hub geofence.
        ApiError: If the backend rejects the check-in.
    """
    if not vehicle:
        raise CheckInError("Select a vehicle before checking in.")
    if _is_cargo(vehicle):
        _require_photos(photos)
    ensure_inside_geofence(session.snapshot, lat, lng)

    session.client.check_in({
        "vehicleId": vehicle.get("id"),
        "address": address,
        "photo": photos or {},
    })
    return session.refresh()


def check_out(
    session: DriverSession,
    lat: float,
    lng: float,
    address: dict | None = None,
    photos: dict | None = None,
    orders: list | None = None,
    total_cash: str | None = None,
) -> DriverSnapshot:
    """Check the driver out of the in-progress trip.

    Cargo trips need all vehicle photos and carry the delivered orders and
    collected cash.
    """
    trip = session.snapshot.in_progress_trip
    if not trip:
        raise CheckInError("There is no trip in progress to check out of.")
    cargo = _is_cargo(trip.get("vehicle"))
    if cargo:
        _require_photos(photos)
    ensure_inside_geofence(session.snapshot, lat, lng)

    payload = {
        "tripId": trip.get("id"),
        "address": address,
        "photo": photos or {},
    }
    if cargo:
        payload["orders"] = orders or []
        payload["totalCash"] = total_cash
    session.client.check_out(payload)
    return session.refresh()
