"""Driver session state as immutable snapshots of the ``/user`` payload."""

import logging
from dataclasses import dataclass, field

from field_ops.backend_client import BackendClient
from field_ops.customers import TripRegistry
from field_ops.errors import RouteParseError
from field_ops.models import Route, RouteStatus

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DriverSnapshot:
    """Everything the app derives from one fetch of the driver record."""

    user: dict | None = None
    operation_lat: float | None = None
    operation_lng: float | None = None
    geofence_radius_km: float | None = None
    organisation_id: str | None = None
    approval_status: str | None = None
    trips: tuple[dict, ...] = field(default_factory=tuple)
    in_progress_trip: dict | None = None

    @classmethod
    def from_user(cls, user: dict) -> "DriverSnapshot":
        operation = user.get("operation") or {}
        trips = user.get("trips")
        trips = tuple(trips) if isinstance(trips, list) else ()
        in_progress = next(
            (t for t in trips if t.get("status") != RouteStatus.COMPLETE.value),
            None,
        )
        return cls(
            user=user,
            operation_lat=operation.get("latitude"),
            operation_lng=operation.get("longitude"),
            geofence_radius_km=operation.get("geofenceRadius"),
            organisation_id=user.get("organisationId"),
            approval_status=user.get("approvalStatus"),
            trips=trips,
            in_progress_trip=in_progress,
        )

    @property
    def has_geofence(self) -> bool:
        return (
            self.operation_lat is not None
            and self.operation_lng is not None
            and self.geofence_radius_km is not None
        )

    def registry(self) -> TripRegistry:
        return TripRegistry(list(self.trips))

    def routes(self) -> list[Route]:
        """Return the driver's routes, newest first.

        Routes the backend sent in an unreadable shape are logged and left out.
        """
        raw = [t for t in self.trips if t.get("triptype") == "route"]
        raw.sort(key=lambda t: t.get("tripStartDate") or "", reverse=True)
        routes = []
        for trip in raw:
            try:
                routes.append(Route.from_dict(trip))
            except RouteParseError as exc:
                logger.warning("[SESSION] Skipping route: %s", exc.message)
        return routes

    def active_routes(self) -> list[Route]:
        return [r for r in self.routes() if r.status.is_active]

    def history_routes(self) -> list[Route]:
        return [r for r in self.routes() if not r.status.is_active]

    def find_route(self, route_id: str) -> Route | None:
        """Find a route by full ID or by its trailing short ID."""
        wanted = route_id.lower()
        for route in self.routes():
            if route.id.lower() == wanted or (len(wanted) >= 4 and route.id.lower().endswith(wanted)):
                return route
        return None


class DriverSession:
    """Owns the backend client and the current driver snapshot.

    ``refresh`` swaps in a new snapshot; snapshots are never mutated.
    """

    def __init__(self, client: BackendClient):
        self.client = client
        self.snapshot = DriverSnapshot()

    def refresh(self) -> DriverSnapshot:
        user = self.client.fetch_user()
        self.snapshot = DriverSnapshot.from_user(user)
        logger.debug("[SESSION] Refreshed driver with %d trips", len(self.snapshot.trips))
        return self.snapshot

    def clear(self) -> None:
        self.snapshot = DriverSnapshot()
