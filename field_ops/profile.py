"""Driver profile details with the driver photo and organisation logo."""

import base64
import logging
from dataclasses import dataclass

from field_ops.backend_client import BackendClient
from field_ops.errors import ApiError
from field_ops.identity_client import IdentityClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Profile:
    name: str
    since: str
    gender: str = ""
    phone_number: str = ""
    email: str = ""
    permanent_address: str = ""
    mailing_address: str = ""
    photo: str | None = None
    logo: str | None = None

    @classmethod
    def from_user(cls, user: dict, photo: str | None = None, logo: str | None = None) -> "Profile":
        name = " ".join(p for p in (user.get("firstName"), user.get("lastName")) if p)
        return cls(
            name=name or "User",
            since=user.get("dateOfJoining") or user.get("createdAt") or "",
            gender=user.get("gender") or "",
            phone_number=user.get("phoneNumber") or "",
            email=user.get("email") or "",
            permanent_address=user.get("permanentAddress") or "",
            mailing_address=user.get("mailingAddress") or "",
            photo=photo,
            logo=logo,
        )


def load_profile(backend: BackendClient, identity: IdentityClient | None = None) -> Profile:
    """Fetch the driver and their media.

    Missing or unreachable media leaves ``photo`` or ``logo`` as None; only
    the driver record itself is required.
    """
    user = backend.fetch_user()
    org_id = user.get("organisationId")
    photo = logo = None
    if org_id and user.get("id"):
        try:
            photo = backend.fetch_driver_image(org_id, user["id"])
        except ApiError as exc:
            logger.info("[PROFILE] No driver photo for %s: %s", user["id"], exc.message)
    if org_id and identity is not None:
        try:
            logo = identity.fetch_organisation_logo(org_id)
        except ApiError as exc:
            logger.info("[PROFILE] No logo for organisation %s: %s", org_id, exc.message)
    return Profile.from_user(user, photo=photo, logo=logo)


def decode_data_uri(data_uri: str) -> bytes:
    """Return the raw bytes of a base64 ``data:`` URI."""
    _, _, encoded = data_uri.partition(",")
    return base64.b64decode(encoded)
