"""Customer contact lookup against the driver's loaded trips."""

from field_ops.models import Customer, TaskPointType


class TripRegistry:
    """Index of the trips delivered with the ``/user`` payload."""

    def __init__(self, trips: list[dict] | None = None):
        self._trips: list[dict] = list(trips or [])

    def find(self, trip_id: str) -> dict | None:
        """Return the trip whose ``id`` or ``tripId`` equals *trip_id*."""
        if not trip_id:
            return None
        for trip in self._trips:
            if trip.get("id") == trip_id or trip.get("tripId") == trip_id:
                return trip
        return None

    def customer_details(self, trip_id: str, point_type: TaskPointType) -> Customer:
        """Look up the contact for a trip's pickup or drop address.

        Pickup positions (``start`` and ``route_start``) read the trip's
        ``startAddress``; drop positions read its ``endAddress``. A missing
        trip or address yields an empty Customer.
        """
        trip = self.find(trip_id)
        if trip is None:
            return Customer()

        key = "startAddress" if point_type.is_pickup else "endAddress"
        address = trip.get(key) or {}
        return Customer(
            name=address.get("contactName") or "",
            phone=address.get("phoneNumber") or "",
        )
