"""Identity service client: OTP login, onboarding OTP and organisation media."""

import logging

from field_ops.base_client import ServiceClient
from field_ops.config import Settings

logger = logging.getLogger(__name__)


class IdentityClient(ServiceClient):
    """Client for the driver identity service."""

    @classmethod
    def from_settings(cls, settings: Settings) -> "IdentityClient":
        return cls(settings.identity_url, token=settings.token, timeout=settings.timeout)

    def send_otp(self, phone_number: str) -> None:
        self._post("/auth/otp/send", "Failed to Send OTP", {"phoneNumber": phone_number})

    def verify_otp(self, phone_number: str, otp: str) -> str:
        """Verify a login OTP and keep the returned auth token.

        Returns:
            The auth token, or an empty string if the service sent none.
        """
        data = self._post(
            "/auth/otp/verify",
            "Failed to verify OTP",
            {"phoneNumber": phone_number, "otp": otp},
        )
        token = data.get("auth_token") or ""
        if token:
            self.set_token(token)
            logger.info("[AUTH] Driver logged in")
        return token

    def send_onboarding_otp(self, phone_number: str) -> None:
        self._post(
            "/auth/otp/onboard/send",
            "Failed to Send OTP",
            {"phoneNumber": phone_number},
        )

    def verify_onboarding_otp(self, phone_number: str, otp: str) -> dict:
        return self._post(
            "/auth/otp/onboard/verify",
            "Failed to verify OTP",
            {"phoneNumber": phone_number, "otp": otp},
        )

    def fetch_organisation_logo(self, organisation_id: str) -> str:
        return self._get_data_uri(
            f"/media/org/{organisation_id}",
            "Failed to fetch organisation logo",
        )
