#!/usr/bin/env python3
"""CLI entry point for driver field operations."""

import argparse
import base64
import json
import logging
import mimetypes
import sys

from field_ops.backend_client import BackendClient
from field_ops.checkin import check_in, check_out
from field_ops.completion import complete_task
from field_ops.config import Settings
from field_ops.errors import FieldOpsError
from field_ops.formatting import (
    directions_url,
    drive_time,
    format_date,
    format_distance,
    format_eta,
    short_id,
)
from field_ops.geofence import haversine_km
from field_ops.identity_client import IdentityClient
from field_ops.models import Route
from field_ops.onboarding import register
from field_ops.profile import decode_data_uri, load_profile
from field_ops.route_status import (
    current_task,
    derive_tasks,
    group_stops_by_trip,
)
from field_ops.session import DriverSession


def _print_route_card(route: Route):
    print(f"  Route #{short_id(route.id)}  {format_date(route.trip_start_date)}  [{route.status.value}]")
    print(
        f"    {len(route.child_trips)} trips | {format_distance(route.route_distance)}"
        f" | {format_eta(route.route_duration)}"
    )


def _print_task_view(route: Route, tasks):
    print(f"\n{'=' * 70}")
    print(f"  ROUTE #{short_id(route.id)}  TASK VIEW  [{route.status.value}]")
    print(f"{'=' * 70}\n")

    for task in tasks:
        if task.is_completed:
            marker = "[x]"
        elif task.is_current_stop:
            marker = "[>]"
        else:
            marker = "[ ]"
        print(f"  {marker} {task.address}")
        print(f"      {task.full_address}")
        if not task.is_route_point or task.original_trip_id:
            print(
                f"      T:{short_id(task.trip_id, task.original_trip_id)}"
                f"  {task.point_type.label}"
            )
        if task.is_current_stop:
            if task.customer_name:
                print(f"      Contact: {task.customer_name} {task.customer_phone}")
            lat = getattr(task, "latitude", None)
            lng = getattr(task, "longitude", None)
            print(f"      Directions: {directions_url(task.full_address, lat, lng)}")
        print()


def _print_trip_view(route: Route, tasks):
    print(f"\n{'=' * 70}")
    print(f"  ROUTE #{short_id(route.id)}  TRIP VIEW  [{route.status.value}]")
    print(f"{'=' * 70}\n")

    task = current_task(tasks)
    if task is not None:
        print(f"  Next: {task.point_type.label} at {task.full_address}")
        print(f"        T:{short_id(task.trip_id)}\n")

    completed = [t.is_completed for t in tasks if not t.is_route_point]
    index_of = {(s.trip_id, s.point_type): i for i, s in reversed(list(enumerate(route.stops)))}
    for group in group_stops_by_trip(route):
        print(f"  Trip T:{short_id(group.trip_id)}")
        for stop in group.stops:
            done = completed[index_of[(stop.trip_id, stop.point_type)]]
            print(f"    {'[x]' if done else '[ ]'} {stop.short_address}")
            print(f"        {stop.address}")
        print()


def _read_image(path):
    """Return a data URI for the image at *path*, typed by its extension."""
    content_type = mimetypes.guess_type(path)[0] or "image/jpeg"
    with open(path, "rb") as f:
        encoded = base64.b64encode(f.read()).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


def _load_route(session: DriverSession, route_id: str) -> Route:
    route = session.refresh().find_route(route_id)
    if route is None:
        raise FieldOpsError(f"Route {route_id} not found.")
    return route


def _cmd_login(args, settings):
    IdentityClient.from_settings(settings).send_otp(args.phone)
    print("OTP Sent Successfully")


def _cmd_verify(args, settings):
    token = IdentityClient.from_settings(settings).verify_otp(args.phone, args.otp)
    print("User logged in.")
    if token:
        print(f"Set FIELD_OPS_TOKEN={token} to reuse this session.")


def _cmd_routes(args, settings):
    snapshot = DriverSession(BackendClient.from_settings(settings)).refresh()
    first_name = (snapshot.user or {}).get("firstName") or "User"
    print(f"Hello, {first_name}!\n")

    active = snapshot.active_routes()
    history = snapshot.history_routes()
    if not active and not history:
        print("No routes assigned.")
        return
    if active:
        print("Active")
        for route in active:
            _print_route_card(route)
        print()
    if history:
        print("History")
        for route in history:
            _print_route_card(route)


def _cmd_route(args, settings):
    session = DriverSession(BackendClient.from_settings(settings))
    route = _load_route(session, args.route_id)
    tasks = derive_tasks(route, session.snapshot.registry().customer_details)
    if args.view == "trip":
        _print_trip_view(route, tasks)
    else:
        _print_task_view(route, tasks)


def _cmd_complete(args, settings):
    session = DriverSession(BackendClient.from_settings(settings))
    route = _load_route(session, args.route_id)
    tasks = derive_tasks(route, session.snapshot.registry().customer_details)
    task = current_task(tasks)
    image = _read_image(args.image) if args.image else None

    result = complete_task(session, route.id, task, args.otp, image)
    print(f"{task.point_type.label} at {task.address} completed.")
    if result.route_ended:
        print("Route completed.")


def _cmd_geofence(args, settings):
    snapshot = DriverSession(BackendClient.from_settings(settings)).refresh()
    if not snapshot.has_geofence:
        print("No hub geofence configured for this driver.")
        return
    distance = haversine_km(
        args.lat, args.lng, float(snapshot.operation_lat), float(snapshot.operation_lng)
    )
    radius = float(snapshot.geofence_radius_km)
    status = "inside" if distance <= radius else "outside"
    print(f"{distance:.2f} km from hub, {status} the {radius:.2f} km geofence.")


def _read_images(pairs, label):
    """Parse ``KEY=FILE`` pairs into a key-to-data-URI map."""
    images = {}
    for pair in pairs or []:
        key, sep, path = pair.partition("=")
        if not sep or not key or not path:
            raise FieldOpsError(f"{label} must be given as KEY=FILE, got {pair!r}.")
        images[key] = _read_image(path)
    return images


def _read_photos(pairs):
    return {side.capitalize(): uri for side, uri in _read_images(pairs, "Photo").items()}


def _cmd_vehicles(args, settings):
    vehicles = BackendClient.from_settings(settings).fetch_user_vehicles()
    if not vehicles:
        print("No vehicles available.")
        return
    for vehicle in vehicles:
        print(
            f"  {vehicle.get('id')}  {vehicle.get('registrationNumber', '--')}"
            f"  ({vehicle.get('usageType', '--')})"
        )


def _cmd_check_in(args, settings):
    client = BackendClient.from_settings(settings)
    session = DriverSession(client)
    session.refresh()
    vehicle = next(
        (v for v in client.fetch_user_vehicles() if str(v.get("id")) == args.vehicle),
        None,
    )
    if vehicle is None:
        raise FieldOpsError(f"Vehicle {args.vehicle} not found.")
    check_in(session, vehicle, args.lat, args.lng,
             address={"latitude": args.lat, "longitude": args.lng},
             photos=_read_photos(args.photo))
    print("Check-in successful!")


def _cmd_check_out(args, settings):
    session = DriverSession(BackendClient.from_settings(settings))
    session.refresh()
    check_out(session, args.lat, args.lng,
              address={"latitude": args.lat, "longitude": args.lng},
              photos=_read_photos(args.photo),
              total_cash=args.cash)
    print("Check-out successful!")


def _cmd_onboard(args, settings):
    client = IdentityClient.from_settings(settings)
    if args.otp:
        client.verify_onboarding_otp(args.phone, args.otp)
        print("OTP Verified Successfully")
    else:
        client.send_onboarding_otp(args.phone)
        print("OTP Sent Successfully")


def _cmd_register(args, settings):
    with open(args.info, encoding="utf-8") as f:
        try:
            info = json.load(f)
        except ValueError as exc:
            raise FieldOpsError(f"{args.info} is not valid JSON: {exc}") from exc
    if not isinstance(info, dict):
        raise FieldOpsError(f"{args.info} must hold a JSON object.")
    documents = _read_images(args.document, "Document")
    token = register(BackendClient.from_settings(settings), info, documents, args.hub_code)
    print("Registration completed successfully!")
    print(f"Set FIELD_OPS_TOKEN={token} to reuse this session.")


def _write_media(data_uri, path):
    with open(path, "wb") as f:
        f.write(decode_data_uri(data_uri))
    print(f"  Saved to {path}")


def _cmd_profile(args, settings):
    profile = load_profile(
        BackendClient.from_settings(settings),
        IdentityClient.from_settings(settings) if args.logo_out else None,
    )
    print(profile.name)
    print(f"  Since {profile.since or '--'}")
    for label, value in (
        ("Gender", profile.gender),
        ("Phone", profile.phone_number),
        ("Email", profile.email),
        ("Permanent address", profile.permanent_address),
        ("Mailing address", profile.mailing_address),
    ):
        print(f"  {label + ':':<19} {value or '--'}")

    if profile.photo is None:
        print("  Photo: not available")
    elif args.photo_out:
        _write_media(profile.photo, args.photo_out)
    if args.logo_out and profile.logo is not None:
        _write_media(profile.logo, args.logo_out)


def _cmd_trip(args, settings):
    trip = BackendClient.from_settings(settings).get_trip(args.trip_id)
    print(f"Trip T:{short_id(trip.get('id', args.trip_id))}  [{trip.get('status', '--')}]")
    print(f"  Date:       {format_date(trip.get('tripStartDate'))}")
    print(f"  Drive time: {drive_time(trip.get('tripStartDate'), trip.get('tripEndDate'))} Hrs")
    for label, key in (("From", "startAddress"), ("To", "endAddress")):
        address = trip.get(key) or {}
        if address.get("address"):
            print(f"  {label + ':':<11} {address['address']}")
    points = trip.get("dataPoints") or []
    if points:
        print(f"  Track:      {len(points)} points")


def main():
    parser = argparse.ArgumentParser(
        description="Driver field operations: routes, stops and hub check-in.",
    )
    parser.add_argument(
        "--identity-url",
        help="Identity service URL (overrides FIELD_OPS_IDENTITY_URL env var).",
    )
    parser.add_argument(
        "--backend-url",
        help="Backend service URL (overrides FIELD_OPS_BACKEND_URL env var).",
    )
    parser.add_argument(
        "--token",
        help="Auth token (overrides FIELD_OPS_TOKEN env var).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    login = sub.add_parser("login", help="Send a login OTP to a phone number.")
    login.add_argument("--phone", required=True)
    login.set_defaults(func=_cmd_login)

    verify = sub.add_parser("verify", help="Verify a login OTP.")
    verify.add_argument("--phone", required=True)
    verify.add_argument("--otp", required=True)
    verify.set_defaults(func=_cmd_verify)

    routes = sub.add_parser("routes", help="List active and past routes.")
    routes.set_defaults(func=_cmd_routes)

    route = sub.add_parser("route", help="Show a route's timeline.")
    route.add_argument("route_id", help="Full route ID or its last four characters.")
    route.add_argument("--view", choices=["task", "trip"], default="task")
    route.set_defaults(func=_cmd_route)

    complete = sub.add_parser("complete", help="Mark the route's current task complete.")
    complete.add_argument("route_id")
    complete.add_argument("--otp", required=True, help="Six-digit code from the customer.")
    complete.add_argument("--image", metavar="FILE", help="Parcel photo (required for pickups).")
    complete.set_defaults(func=_cmd_complete)

    geofence = sub.add_parser("geofence", help="Check a position against the hub geofence.")
    geofence.add_argument("--lat", type=float, required=True)
    geofence.add_argument("--lng", type=float, required=True)
    geofence.set_defaults(func=_cmd_geofence)

    trip = sub.add_parser("trip", help="Show a single trip.")
    trip.add_argument("trip_id")
    trip.set_defaults(func=_cmd_trip)

    vehicles = sub.add_parser("vehicles", help="List vehicles available to the driver.")
    vehicles.set_defaults(func=_cmd_vehicles)

    photo_help = "Vehicle photo as SIDE=FILE (Front, Right, Left, Back); repeatable."
    check_in_cmd = sub.add_parser("check-in", help="Check in at the hub with a vehicle.")
    check_in_cmd.add_argument("--vehicle", required=True, help="Vehicle ID.")
    check_in_cmd.add_argument("--lat", type=float, required=True)
    check_in_cmd.add_argument("--lng", type=float, required=True)
    check_in_cmd.add_argument("--photo", action="append", help=photo_help)
    check_in_cmd.set_defaults(func=_cmd_check_in)

    check_out_cmd = sub.add_parser("check-out", help="Check out of the trip in progress.")
    check_out_cmd.add_argument("--lat", type=float, required=True)
    check_out_cmd.add_argument("--lng", type=float, required=True)
    check_out_cmd.add_argument("--photo", action="append", help=photo_help)
    check_out_cmd.add_argument("--cash", help="Cash collected (cargo trips).")
    check_out_cmd.set_defaults(func=_cmd_check_out)

    onboard = sub.add_parser("onboard", help="Send or verify an onboarding OTP.")
    onboard.add_argument("--phone", required=True)
    onboard.add_argument("--otp", help="Verify this OTP instead of sending one.")
    onboard.set_defaults(func=_cmd_onboard)

    register_cmd = sub.add_parser("register", help="Register as a driver under a hub.")
    register_cmd.add_argument("--hub-code", required=True, help="Six-character code from the hub manager.")
    register_cmd.add_argument("--info", required=True, metavar="FILE",
                              help="JSON file with the driver's personal, license and contact details.")
    register_cmd.add_argument("--document", action="append",
                              help="KYC image as KEY=FILE (panCard, drivingLicense, selfie); repeatable.")
    register_cmd.set_defaults(func=_cmd_register)

    profile = sub.add_parser("profile", help="Show the driver's profile.")
    profile.add_argument("--photo-out", metavar="FILE", help="Save the driver photo here.")
    profile.add_argument("--logo-out", metavar="FILE", help="Save the organisation logo here.")
    profile.set_defaults(func=_cmd_profile)

    args = parser.parse_args()

    try:
        settings = Settings.from_env(
            identity_url=args.identity_url,
            backend_url=args.backend_url,
            token=args.token,
        )
        logging.basicConfig(
            level=getattr(logging, settings.log_level, logging.WARNING),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        args.func(args, settings)
    except FieldOpsError as exc:
        print(f"Error: {exc.message}", file=sys.stderr)
        sys.exit(1)
    except OSError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
