"""Backend service client for driver, trip and route operations."""

import logging

from field_ops.base_client import ServiceClient
from field_ops.config import Settings
from field_ops.errors import ApiError

logger = logging.getLogger(__name__)


class BackendClient(ServiceClient):
    """Client for the fleet backend REST API."""

    @classmethod
    def from_settings(cls, settings: Settings) -> "BackendClient":
        return cls(settings.backend_url, token=settings.token, timeout=settings.timeout)

    def fetch_user(self) -> dict:
        """Fetch the logged-in driver, including trips and hub operation."""
        return self._get("/user", "Failed to fetch user")

    def fetch_user_vehicles(self) -> list[dict]:
        data = self._get("/user/vehicles", "Failed to fetch vehicles")
        if isinstance(data, dict):
            return data.get("vehicles", [])
        return data

    def get_trip(self, trip_id: str) -> dict:
        return self._get(f"/trip/{trip_id}", "Failed to fetch trip")

    def check_in(self, payload: dict) -> dict:
        """Assign the driver to a vehicle (start a trip)."""
        data = self._post("/user/trip/assign", "Check-in failed", payload)
        logger.info("[CHECKIN] Checked in with vehicle %s", payload.get("vehicleId"))
        return data

    def check_out(self, payload: dict) -> dict:
        """Unassign the driver from the in-progress trip."""
        data = self._post("/user/trip/unassign", "Check-out failed", payload)
        logger.info("[CHECKIN] Checked out of trip %s", payload.get("tripId"))
        return data

    def complete_route_point(
        self,
        route_id: str,
        trip_id: str,
        point_type: str,
        otp: str,
        original_trip_id: str | None = None,
        parcel_image: str | None = None,
    ) -> bool:
        """Mark one route point as done.

        Args:
            route_id: ID of the route being executed.
            trip_id: Trip the point belongs to.
            point_type: ``start``, ``end``, ``route_start`` or ``route_end``.
            otp: Six-digit proof code given by the customer.
            original_trip_id: Trip a route boundary maps back to.
            parcel_image: JPEG data URI, required for pickups.

        Returns:
            True if completing this point ended the route.
        """
        body = {
            "routeId": route_id,
            "tripId": trip_id,
            "originalTripId": original_trip_id,
            "pointType": point_type,
            "otp": otp,
            "parcelImage": parcel_image,
        }
        data = self._post("/route/complete-point", "Failed to complete stop", body)
        route_ended = bool(data.get("routeEnded", False))
        logger.info(
            "[ROUTE] Completed %s of trip %s on route %s (ended=%s)",
            point_type, trip_id, route_id, route_ended,
        )
        return route_ended

    def register_driver(self, payload: dict, hub_code: str) -> str:
        """Submit a driver registration under a hub and keep the returned token.

        Raises:
            ApiError: If the request fails or the response carries no token.
        """
        fallback = "Registration failed. Please try again."
        data = self._post("/user/register", fallback, payload, params={"hubCode": hub_code})
        token = data.get("token")
        if not token:
            raise ApiError(data.get("error") or fallback)
        self.set_token(token)
        logger.info("[AUTH] Registered driver under hub %s", hub_code)
        return token

    def fetch_driver_image(self, organisation_id: str, user_id: str) -> str:
        return self._get_data_uri(
            f"/media/{organisation_id}/Drivers/{user_id}",
            "Failed to fetch driver photo",
            params={"photoField": "photo"},
        )
