"""Shared data models for driver routes, stops and the derived task timeline."""

from dataclasses import dataclass, field
from enum import Enum

from field_ops.errors import RouteParseError


class PointType(str, Enum):
    """Pickup or drop point within a single trip."""

    START = "start"
    END = "end"

    @property
    def is_pickup(self) -> bool:
        return self is PointType.START


class TaskPointType(str, Enum):
    """Position kind of a task in the route timeline."""

    START = "start"
    END = "end"
    ROUTE_START = "route_start"
    ROUTE_END = "route_end"

    @property
    def is_pickup(self) -> bool:
        return self in (TaskPointType.START, TaskPointType.ROUTE_START)

    @property
    def label(self) -> str:
        return "Pickup" if self.is_pickup else "Drop"


class RouteStatus(str, Enum):
    ASSIGNED = "Assigned"
    IN_PROGRESS = "In Progress"
    COMPLETE = "Complete"
    CANCELLED = "Cancelled"

    @property
    def is_active(self) -> bool:
        return self in (RouteStatus.ASSIGNED, RouteStatus.IN_PROGRESS)


def _to_float(value) -> float | None:
    """Parse a coordinate that the backend may send as a string or number."""
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def short_address(address: str) -> str:
    """Return the first comma-separated part of an address."""
    return address.split(",")[0]


@dataclass(frozen=True)
class Location:
    """A route-level start or end address."""

    address: str
    latitude: float | None = None
    longitude: float | None = None
    original_trip_id: str = ""

    @classmethod
    def from_dict(cls, data: dict | None) -> "Location | None":
        if not data or not data.get("address"):
            return None
        return cls(
            address=data["address"],
            latitude=_to_float(data.get("latitude")),
            longitude=_to_float(data.get("longitude")),
            original_trip_id=data.get("originalTripId") or "",
        )


@dataclass(frozen=True)
class Stop:
    """A single pickup or drop point belonging to one trip."""

    trip_id: str
    point_type: PointType
    address: str
    latitude: float | None = None
    longitude: float | None = None
    original_trip_id: str | None = None

    @property
    def short_address(self) -> str:
        return short_address(self.address)

    def matches(self, current: "CurrentStop") -> bool:
        return self.trip_id == current.trip_id and self.point_type is current.point_type

    @classmethod
    def from_dict(cls, data: dict) -> "Stop":
        return cls(
            trip_id=data["tripId"],
            point_type=PointType(data["pointType"]),
            address=data.get("address", ""),
            latitude=_to_float(data.get("latitude")),
            longitude=_to_float(data.get("longitude")),
            original_trip_id=data.get("originalTripId"),
        )


@dataclass(frozen=True)
class CurrentStop:
    """Pointer to the last stop the driver has completed."""

    trip_id: str
    point_type: PointType

    @classmethod
    def from_dict(cls, data: dict | None) -> "CurrentStop | None":
        if not data or not data.get("tripId") or not data.get("pointType"):
            return None
        return cls(trip_id=data["tripId"], point_type=PointType(data["pointType"]))


@dataclass(frozen=True)
class Route:
    """An ordered sequence of stops composed of one or more trips."""

    id: str
    status: RouteStatus
    stops: tuple[Stop, ...] = ()
    current_stop: CurrentStop | None = None
    start_address: Location | None = None
    end_address: Location | None = None
    child_trips: tuple[str, ...] = ()
    trip_start_date: str | None = None
    route_distance: float | None = None
    route_duration: float | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "Route":
        """Build a Route from the backend's trip payload (``triptype == "route"``).

        Raises:
            RouteParseError: If the status, a stop or an address is malformed.
        """
        route_id = data.get("id", "")
        try:
            return cls(
                id=route_id,
                status=RouteStatus(data.get("status", RouteStatus.ASSIGNED.value)),
                stops=tuple(Stop.from_dict(s) for s in data.get("stops") or []),
                current_stop=CurrentStop.from_dict(data.get("currentStop")),
                start_address=Location.from_dict(data.get("startAddress")),
                end_address=Location.from_dict(data.get("endAddress")),
                child_trips=tuple(data.get("childTrips") or []),
                trip_start_date=data.get("tripStartDate"),
                route_distance=_to_float(data.get("routeDistance")),
                route_duration=_to_float(data.get("routeDuration")),
            )
        except KeyError as exc:
            raise RouteParseError(f"Route {route_id} is missing field {exc}.") from exc
        except (AttributeError, TypeError, ValueError) as exc:
            raise RouteParseError(f"Route {route_id} is malformed: {exc}") from exc


@dataclass(frozen=True)
class Customer:
    """Contact details for a pickup or drop point."""

    name: str = ""
    phone: str = ""


@dataclass(frozen=True)
class TaskItem:
    """One position in the route timeline, as shown to the driver."""

    address: str
    full_address: str
    trip_id: str
    original_trip_id: str | None
    point_type: TaskPointType
    is_completed: bool
    is_current_stop: bool
    customer_name: str = ""
    customer_phone: str = ""

    @property
    def is_route_point(self) -> bool:
        return False


@dataclass(frozen=True)
class StopTask(TaskItem):
    """A task backed by a real stop in the route."""

    latitude: float | None = None
    longitude: float | None = None


@dataclass(frozen=True)
class BoundaryTask(TaskItem):
    """A synthetic route-start or route-end task."""

    @property
    def is_route_point(self) -> bool:
        return True


@dataclass(frozen=True)
class TripGroup:
    """Stops of one child trip, in route order."""

    trip_id: str
    stops: tuple[Stop, ...] = field(default_factory=tuple)
