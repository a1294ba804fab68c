"""Derive per-task completion and activity state for a route timeline.

The timeline is an optional route-start task, then every stop in route
order, then an optional route-end task. The route's ``current_stop`` points
at the last completed stop; everything up to it is completed and the task
right after it is the active one.
"""

import logging
from typing import Callable

from field_ops.models import (
    BoundaryTask,
    Customer,
    Route,
    RouteStatus,
    StopTask,
    TaskItem,
    TaskPointType,
    TripGroup,
    short_address,
)

logger = logging.getLogger(__name__)

CustomerLookup = Callable[[str, TaskPointType], Customer]


def _no_customer(_trip_id: str, _point_type: TaskPointType) -> Customer:
    return Customer()


def find_current_stop_index(route: Route) -> int:
    """Return the index of the route's current stop, or -1.

    -1 means nothing has been completed: either the route has no current
    stop or the pointer does not match any stop.
    """
    current = route.current_stop
    if current is None:
        return -1
    for i, stop in enumerate(route.stops):
        if stop.matches(current):
            return i
    logger.warning(
        "[ROUTE_STATUS] Route %s current stop %s/%s not found among %d stops",
        route.id, current.trip_id, current.point_type.value, len(route.stops),
    )
    return -1


def is_stop_completed(route: Route, stop_index: int) -> bool:
    """Return True if the stop at *stop_index* has been completed."""
    if route.status is RouteStatus.COMPLETE:
        return True
    current_index = find_current_stop_index(route)
    return current_index >= 0 and stop_index <= current_index


def derive_tasks(
    route: Route,
    customer_lookup: CustomerLookup | None = None,
) -> list[TaskItem]:
    """Project a route into its ordered list of timeline tasks.

    Args:
        route: The route as fetched from the backend.
        customer_lookup: Callable returning contact details for a
            ``(trip_id, point_type)`` pair. Defaults to empty contacts.

    Returns:
        Tasks in timeline order. At most one has ``is_current_stop`` set;
        completed tasks always form a prefix of the list.
    """
    lookup = customer_lookup or _no_customer
    stops = route.stops
    complete = route.status is RouteStatus.COMPLETE
    current_index = -1 if complete else find_current_stop_index(route)
    has_route_start = route.start_address is not None
    nothing_done = current_index < 0

    tasks: list[TaskItem] = []

    if route.start_address is not None:
        start = route.start_address
        trip_id = start.original_trip_id
        customer = lookup(trip_id, TaskPointType.ROUTE_START)
        tasks.append(BoundaryTask(
            address=short_address(start.address),
            full_address=start.address,
            trip_id=trip_id,
            original_trip_id=trip_id,
            point_type=TaskPointType.ROUTE_START,
            is_completed=complete or current_index >= 0,
            is_current_stop=not complete and nothing_done,
            customer_name=customer.name,
            customer_phone=customer.phone,
        ))

    for i, stop in enumerate(stops):
        if complete:
            active = False
        elif nothing_done:
            active = not has_route_start and i == 0
        else:
            active = i == current_index + 1

        point_type = TaskPointType(stop.point_type.value)
        customer = lookup(stop.trip_id, point_type)
        tasks.append(StopTask(
            address=stop.short_address,
            full_address=stop.address,
            trip_id=stop.trip_id,
            original_trip_id=stop.original_trip_id,
            point_type=point_type,
            is_completed=complete or (current_index >= 0 and i <= current_index),
            is_current_stop=active,
            customer_name=customer.name,
            customer_phone=customer.phone,
            latitude=stop.latitude,
            longitude=stop.longitude,
        ))

    if route.end_address is not None:
        end = route.end_address
        all_stops_done = bool(stops) and current_index == len(stops) - 1
        customer = lookup(end.original_trip_id, TaskPointType.ROUTE_END)
        tasks.append(BoundaryTask(
            address=short_address(end.address),
            full_address=end.address,
            trip_id=end.original_trip_id or "route_end",
            original_trip_id=end.original_trip_id,
            point_type=TaskPointType.ROUTE_END,
            is_completed=complete,
            is_current_stop=not complete and all_stops_done,
            customer_name=customer.name,
            customer_phone=customer.phone,
        ))

    return tasks


def current_task(tasks: list[TaskItem]) -> TaskItem | None:
    """Return the task the driver should do next.

    The first active task wins; if none is marked active, the first
    incomplete task is used.
    """
    for task in tasks:
        if task.is_current_stop:
            return task
    for task in tasks:
        if not task.is_completed:
            return task
    return None


def group_stops_by_trip(route: Route) -> list[TripGroup]:
    """Group the route's stops under each child trip, in ``child_trips`` order."""
    groups: dict[str, list] = {}
    for stop in route.stops:
        groups.setdefault(stop.trip_id, []).append(stop)
    return [
        TripGroup(trip_id=trip_id, stops=tuple(groups.get(trip_id, [])))
        for trip_id in route.child_trips
    ]
