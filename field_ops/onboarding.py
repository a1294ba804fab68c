"""Driver registration: KYC documents, hub code and the registration payload."""

import re
import time

from field_ops.backend_client import BackendClient
from field_ops.errors import OnboardingError

HUB_CODE_LENGTH = 6
REQUIRED_DOCUMENTS = ("panCard", "drivingLicense", "selfie")
KYC_DOCUMENTS = ("panCard", "drivingLicense")
DEFAULT_COUNTRY = "India"
DEFAULT_MIME = "image/jpeg"

_HUB_CODE_RE = re.compile(r"^[A-Z0-9]+$")
_DATA_URI_RE = re.compile(r"^data:([^;,]+)[;,]")


def normalize_hub_code(code: str | None) -> str:
    """Return the upper-cased hub code.

    Raises:
        OnboardingError: If the code is missing, not alphanumeric or not
            exactly six characters.
    """
    value = (code or "").strip().upper()
    if not value:
        raise OnboardingError("Hub code is required for registration")
    if len(value) != HUB_CODE_LENGTH or not _HUB_CODE_RE.match(value):
        raise OnboardingError(
            f"Hub code must be {HUB_CODE_LENGTH} letters or digits, got {code!r}."
        )
    return value


def mime_type(data_uri: str) -> str:
    """Return the media type of a ``data:`` URI, or image/jpeg."""
    match = _DATA_URI_RE.match(data_uri or "")
    return match.group(1) if match else DEFAULT_MIME


def missing_documents(documents: dict | None) -> list[str]:
    return [key for key in REQUIRED_DOCUMENTS if not (documents or {}).get(key)]


def build_registration_payload(info: dict, documents: dict) -> dict:
    """Assemble the registration body from collected details and document images.

    Args:
        info: Driver details: names, contact, dates, ``license``,
            addresses and ``emergencyContact``.
        documents: ``panCard``, ``drivingLicense`` and ``selfie`` as data URIs.

    Raises:
        OnboardingError: If any required document is missing.
    """
    missing = missing_documents(documents)
    if missing:
        raise OnboardingError(
            f"Please upload all the documents (missing: {', '.join(missing)})."
        )

    kyc = [
        {"documentType": mime_type(documents[key]), "documentNumber": documents[key]}
        for key in KYC_DOCUMENTS
    ]
    license_info = info.get("license") or {}
    contact = info.get("emergencyContact") or {}
    return {
        "firstName": info.get("firstName") or "",
        "lastName": info.get("lastName") or "",
        "driverCountry": info.get("driverCategory") or info.get("country") or DEFAULT_COUNTRY,
        "photoType": DEFAULT_MIME,
        "photo": documents["selfie"],
        "phoneNumber": info.get("phoneNumber") or "",
        "gender": info.get("gender") or "",
        "email": info.get("email") or "",
        "dateOfBirth": info.get("dateOfBirth") or "",
        "dateOfJoining": info.get("dateOfJoining") or "",
        "license": {
            "number": license_info.get("number") or "",
            "issuedOn": license_info.get("issuedOn") or int(time.time() * 1000),
            "expiresOn": license_info.get("expiresOn") or "",
            "category": license_info.get("category") or "",
        },
        "permanentAddress": info.get("permanentAddress") or "N/A",
        "mailingAddress": info.get("mailingAddress") or "N/A",
        "emergencyContact": {
            "name": contact.get("name") or "N/A",
            "phoneNumber": contact.get("phoneNumber") or "",
            "relationship": contact.get("relationShip") or contact.get("relationship") or "N/A",
        },
        "kyc": kyc,
    }


def register(client: BackendClient, info: dict, documents: dict, hub_code: str | None) -> str:
    """Register the driver under a hub and return the new auth token.

    Raises:
        OnboardingError: If the hub code or a document is missing or invalid.
        ApiError: If the backend rejects the registration.
    """
    code = normalize_hub_code(hub_code)
    payload = build_registration_payload(info, documents)
    return client.register_driver(payload, code)
