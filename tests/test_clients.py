"""
Tests for the identity and backend HTTP clients
"""
import pytest
import requests

from conftest import make_response
from field_ops.backend_client import BackendClient
from field_ops.config import Settings
from field_ops.errors import ApiError, ConfigError
from field_ops.identity_client import IdentityClient

BACKEND = "https://backend.example.com/"
IDENTITY = "https://identity.example.com"


class TestBackendClient:

    def test_fetch_user_uses_base_url_and_timeout(self, http_session):
        http_session.request.return_value = make_response({"id": "driver-1"})
        client = BackendClient(BACKEND, token="tok", timeout=5, session=http_session)

        assert client.fetch_user() == {"id": "driver-1"}
        http_session.request.assert_called_once_with(
            "GET", "https://backend.example.com/user", timeout=5, params=None,
        )
        assert http_session.headers["Authorization"] == "Bearer tok"
        assert http_session.headers["Content-Type"] == "application/json"

    def test_no_authorization_header_without_token(self, http_session):
        BackendClient(BACKEND, session=http_session)
        assert "Authorization" not in http_session.headers

    def test_complete_route_point_body(self, http_session):
        http_session.request.return_value = make_response({"routeEnded": True})
        client = BackendClient(BACKEND, session=http_session)

        ended = client.complete_route_point(
            route_id="route-1",
            trip_id="trip-A",
            point_type="start",
            otp="123456",
            original_trip_id=None,
            parcel_image="data:image/jpeg;base64,AAAA",
        )

        assert ended is True
        method, url = http_session.request.call_args.args
        assert (method, url) == ("POST", "https://backend.example.com/route/complete-point")
        assert http_session.request.call_args.kwargs["json"] == {
            "routeId": "route-1",
            "tripId": "trip-A",
            "originalTripId": None,
            "pointType": "start",
            "otp": "123456",
            "parcelImage": "data:image/jpeg;base64,AAAA",
        }

    def test_route_ended_defaults_to_false(self, http_session):
        http_session.request.return_value = make_response({})
        client = BackendClient(BACKEND, session=http_session)
        assert client.complete_route_point("r", "t", "end", "123456") is False

    def test_server_message_becomes_api_error(self, http_session):
        http_session.request.return_value = make_response(
            {"message": "Invalid OTP"}, status_code=400,
        )
        client = BackendClient(BACKEND, session=http_session)

        with pytest.raises(ApiError) as exc_info:
            client.complete_route_point("r", "t", "end", "000000")

        assert exc_info.value.message == "Invalid OTP"
        assert exc_info.value.status_code == 400

    def test_fallback_message_without_server_message(self, http_session):
        resp = make_response(status_code=500)
        resp.json.side_effect = ValueError("not json")
        http_session.request.return_value = resp
        client = BackendClient(BACKEND, session=http_session)

        with pytest.raises(ApiError, match="Failed to fetch user"):
            client.fetch_user()

    def test_connection_error_uses_fallback(self, http_session):
        http_session.request.side_effect = requests.ConnectionError("down")
        client = BackendClient(BACKEND, session=http_session)

        with pytest.raises(ApiError) as exc_info:
            client.get_trip("trip-A")

        assert exc_info.value.message == "Failed to fetch trip"
        assert exc_info.value.status_code is None

    def test_empty_post_response(self, http_session):
        http_session.request.return_value = make_response(content=b"")
        client = BackendClient(BACKEND, session=http_session)
        assert client.check_out({"tripId": "trip-A"}) == {}

    def test_driver_image_as_data_uri(self, http_session):
        http_session.request.return_value = make_response(
            content=b"\x89PNG", headers={"Content-Type": "image/png"},
        )
        client = BackendClient(BACKEND, session=http_session)

        uri = client.fetch_driver_image("org-9", "driver-1")

        assert uri == "data:image/png;base64,iVBORw=="
        assert http_session.request.call_args.args[1] == (
            "https://backend.example.com/media/org-9/Drivers/driver-1"
        )
        assert http_session.request.call_args.kwargs["params"] == {"photoField": "photo"}

    def test_register_driver_keeps_token(self, http_session):
        http_session.request.return_value = make_response({"token": "jwt-new"})
        client = BackendClient(BACKEND, session=http_session)

        assert client.register_driver({"firstName": "Ada"}, "HUB123") == "jwt-new"
        method, url = http_session.request.call_args.args
        assert (method, url) == ("POST", "https://backend.example.com/user/register")
        assert http_session.request.call_args.kwargs["params"] == {"hubCode": "HUB123"}
        assert http_session.request.call_args.kwargs["json"] == {"firstName": "Ada"}
        assert http_session.headers["Authorization"] == "Bearer jwt-new"

    @pytest.mark.parametrize(
        "body, expected",
        [
            ({"error": "Hub not found"}, "Hub not found"),
            ({}, "Registration failed. Please try again."),
        ],
    )
    def test_register_driver_without_token(self, http_session, body, expected):
        http_session.request.return_value = make_response(body)
        client = BackendClient(BACKEND, session=http_session)

        with pytest.raises(ApiError) as exc_info:
            client.register_driver({}, "HUB123")

        assert exc_info.value.message == expected
        assert "Authorization" not in http_session.headers

    def test_register_driver_error_field(self, http_session):
        http_session.request.return_value = make_response(
            {"error": "Phone number already registered"}, status_code=409,
        )
        client = BackendClient(BACKEND, session=http_session)

        with pytest.raises(ApiError, match="Phone number already registered"):
            client.register_driver({}, "HUB123")

    def test_vehicles_list_or_wrapped(self, http_session):
        client = BackendClient(BACKEND, session=http_session)

        http_session.request.return_value = make_response([{"id": "v1"}])
        assert client.fetch_user_vehicles() == [{"id": "v1"}]

        http_session.request.return_value = make_response({"vehicles": [{"id": "v2"}]})
        assert client.fetch_user_vehicles() == [{"id": "v2"}]


class TestIdentityClient:

    def test_verify_otp_keeps_token(self, http_session):
        http_session.request.return_value = make_response({"auth_token": "jwt-1"})
        client = IdentityClient(IDENTITY, session=http_session)

        assert client.verify_otp("+2348000000000", "123456") == "jwt-1"
        assert client.token == "jwt-1"
        assert http_session.headers["Authorization"] == "Bearer jwt-1"
        assert http_session.request.call_args.kwargs["json"] == {
            "phoneNumber": "+2348000000000",
            "otp": "123456",
        }

    def test_send_otp_failure_message(self, http_session):
        http_session.request.return_value = make_response({}, status_code=429)
        client = IdentityClient(IDENTITY, session=http_session)

        with pytest.raises(ApiError, match="Failed to Send OTP"):
            client.send_otp("+2348000000000")

    def test_organisation_logo(self, http_session):
        http_session.request.return_value = make_response(
            content=b"\x89PNG", headers={"Content-Type": "image/png"},
        )
        client = IdentityClient(IDENTITY, session=http_session)

        assert client.fetch_organisation_logo("org-9") == "data:image/png;base64,iVBORw=="
        assert http_session.request.call_args.args[1] == f"{IDENTITY}/media/org/org-9"

    def test_onboarding_paths(self, http_session):
        client = IdentityClient(IDENTITY, session=http_session)

        client.send_onboarding_otp("+234")
        assert http_session.request.call_args.args[1] == f"{IDENTITY}/auth/otp/onboard/send"
        client.verify_onboarding_otp("+234", "111111")
        assert http_session.request.call_args.args[1] == f"{IDENTITY}/auth/otp/onboard/verify"


class TestSettings:

    def test_arguments_override_environment(self, monkeypatch):
        monkeypatch.setenv("FIELD_OPS_IDENTITY_URL", "https://env-identity")
        monkeypatch.setenv("FIELD_OPS_BACKEND_URL", "https://env-backend")
        monkeypatch.setenv("FIELD_OPS_TIMEOUT", "12")

        settings = Settings.from_env(backend_url="https://arg-backend/", token="t")

        assert settings.identity_url == "https://env-identity"
        assert settings.backend_url == "https://arg-backend"
        assert settings.token == "t"
        assert settings.timeout == 12.0

    def test_missing_urls(self, monkeypatch):
        monkeypatch.delenv("FIELD_OPS_IDENTITY_URL", raising=False)
        monkeypatch.delenv("FIELD_OPS_BACKEND_URL", raising=False)

        with pytest.raises(ConfigError, match="FIELD_OPS_BACKEND_URL"):
            Settings.from_env()

    @pytest.mark.parametrize("value", ["abc", "0", "-3"])
    def test_bad_timeout(self, monkeypatch, value):
        monkeypatch.setenv("FIELD_OPS_TIMEOUT", value)
        with pytest.raises(ConfigError, match="FIELD_OPS_TIMEOUT"):
            Settings.from_env(identity_url="https://i", backend_url="https://b")

    def test_clients_from_settings(self, monkeypatch):
        monkeypatch.delenv("FIELD_OPS_TIMEOUT", raising=False)
        settings = Settings.from_env(identity_url="https://i", backend_url="https://b", token="x")

        assert BackendClient.from_settings(settings).base_url == "https://b"
        assert IdentityClient.from_settings(settings).token == "x"
