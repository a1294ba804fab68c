"""Exception types raised by the field_ops clients and flows."""

import requests


class FieldOpsError(Exception):
    """Base class for errors that should be shown to the driver."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigError(FieldOpsError, ValueError):
    """A required setting is missing or invalid."""


class ApiError(FieldOpsError):
    """A backend or identity service call failed."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class CompletionError(FieldOpsError):
    """A stop completion request is not valid for the selected task."""


class CheckInError(FieldOpsError):
    """A check-in or check-out request is not allowed."""


class OnboardingError(FieldOpsError):
    """A driver registration is missing documents or details."""


class RouteParseError(FieldOpsError, ValueError):
    """A route payload from the backend cannot be understood."""


def server_message(exc: requests.RequestException, fallback: str) -> str:
    """Return the ``message`` or ``error`` field of an error response, else *fallback*."""
    response = getattr(exc, "response", None)
    if response is None:
        return fallback
    try:
        data = response.json()
    except ValueError:
        return fallback
    if isinstance(data, dict):
        for key in ("message", "error"):
            if data.get(key):
                return str(data[key])
    return fallback
