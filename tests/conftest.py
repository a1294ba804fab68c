"""
Pytest fixtures for field_ops tests
"""
from unittest.mock import MagicMock

import pytest
import requests


def make_route(stops=None, current=None, start=None, end=None,
               status="In Progress", child_trips=None, route_id="route-abc123"):
    """Build a backend-shaped route payload."""
    return {
        "id": route_id,
        "triptype": "route",
        "status": status,
        "stops": stops or [],
        "currentStop": current,
        "startAddress": start,
        "endAddress": end,
        "childTrips": child_trips or [],
        "tripStartDate": "2026-10-19T08:00:00Z",
    }


def stop(trip_id, point_type, address=None, lat="6.52", lng="3.37"):
    return {
        "tripId": trip_id,
        "pointType": point_type,
        "address": address or f"{trip_id} {point_type} street, Lagos",
        "latitude": lat,
        "longitude": lng,
    }


def make_response(json_data=None, status_code=200, content=b"{}", headers=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = json_data if json_data is not None else {}
    resp.content = content
    resp.headers = headers or {"Content-Type": "application/json"}
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(response=resp)
    else:
        resp.raise_for_status.return_value = None
    return resp


@pytest.fixture
def http_session():
    """A stand-in requests.Session with real header storage"""
    session = MagicMock()
    session.headers = {}
    session.request.return_value = make_response({})
    return session


@pytest.fixture
def trip_a_stops():
    return [stop("trip-A", "start"), stop("trip-A", "end")]


@pytest.fixture
def user_payload():
    """A /user payload with one active route, one finished route and a hub"""
    active = make_route(
        stops=[stop("trip-A", "start"), stop("trip-A", "end")],
        current={"tripId": "trip-A", "pointType": "start"},
        child_trips=["trip-A"],
        route_id="route-0001aaaa",
    )
    active["tripStartDate"] = "2026-10-19T08:00:00Z"
    done = make_route(
        stops=[stop("trip-B", "start"), stop("trip-B", "end")],
        status="Complete",
        child_trips=["trip-B"],
        route_id="route-0002bbbb",
    )
    done["tripStartDate"] = "2026-10-18T08:00:00Z"
    return {
        "id": "driver-1",
        "firstName": "Ada",
        "organisationId": "org-9",
        "approvalStatus": "approved",
        "operation": {"latitude": 6.5244, "longitude": 3.3792, "geofenceRadius": 1.0},
        "trips": [
            done,
            active,
            {
                "id": "trip-A",
                "status": "In Progress",
                "startAddress": {"contactName": "Bola", "phoneNumber": "+2348000000001"},
                "endAddress": {"contactName": "Chidi", "phoneNumber": "+2348000000002"},
            },
        ],
    }
