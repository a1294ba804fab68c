"""Display helpers shared by the CLI views."""

from datetime import datetime
from urllib.parse import quote


def short_id(value: str | None, preferred: str | None = None) -> str:
    """Return the last four characters of *preferred* or *value*, upper-cased."""
    chosen = preferred or value
    if not chosen:
        return "----"
    return chosen[-4:].upper()


def format_distance(meters: float | None) -> str:
    if meters is None:
        return "-- kms"
    return f"{meters / 1000:.0f} kms"


def format_eta(seconds: float | None) -> str:
    if seconds is None:
        return "-- hours"
    minutes = round(seconds / 60)
    if minutes < 60:
        return f"{minutes} mins"
    return f"{seconds / 3600:.1f} hours"


def _parse_iso(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def format_date(value: str | None) -> str:
    """Format an ISO timestamp as dd/mm/yyyy."""
    if not value:
        return "--/--/----"
    try:
        return _parse_iso(value).strftime("%d/%m/%Y")
    except ValueError:
        return "--/--/----"


def drive_time(start: str | None, end: str | None) -> str:
    """Return the HH:MM span between two ISO timestamps, or "--" if unusable."""
    if not start or not end:
        return "--"
    try:
        delta = _parse_iso(end) - _parse_iso(start)
    except (TypeError, ValueError):
        return "--"
    if delta.total_seconds() < 0:
        return "--"
    minutes = int(delta.total_seconds() // 60)
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def directions_url(address: str, lat: float | None = None, lng: float | None = None) -> str:
    """Return a Google Maps link to the stop, preferring coordinates."""
    if lat is not None and lng is not None:
        return (
            "https://www.google.com/maps/dir/?api=1"
            f"&destination={lat},{lng}&travelmode=driving"
        )
    return f"https://www.google.com/maps/search/?api=1&query={quote(address)}"
