"""Shared HTTP plumbing for the identity and backend service clients."""

import base64
import logging

import requests

from field_ops.config import DEFAULT_TIMEOUT
from field_ops.errors import ApiError, server_message

logger = logging.getLogger(__name__)


class ServiceClient:
    """Base class holding a JSON ``requests.Session`` for one service."""

    def __init__(
        self,
        base_url: str,
        token: str = "",
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})
        self.token = ""
        if token:
            self.set_token(token)

    def set_token(self, token: str) -> None:
        """Attach a bearer token to every subsequent request."""
        self.token = token
        self.session.headers["Authorization"] = f"Bearer {token}"

    def _request(
        self,
        method: str,
        path: str,
        fallback: str,
        **kwargs,
    ) -> requests.Response:
        """Send a request and translate failures into ApiError.

        Args:
            method: HTTP method.
            path: Path relative to the service base URL.
            fallback: Message used when the server supplies none.

        Returns:
            The successful response.
        """
        url = f"{self.base_url}{path}"
        logger.debug("[HTTP] %s %s", method, url)
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
            resp.raise_for_status()
        except requests.RequestException as exc:
            status = getattr(getattr(exc, "response", None), "status_code", None)
            message = server_message(exc, fallback)
            logger.warning("[HTTP] %s %s failed (%s): %s", method, url, status, message)
            raise ApiError(message, status_code=status) from exc
        return resp

    def _get(self, path: str, fallback: str, params: dict | None = None) -> dict:
        return self._request("GET", path, fallback, params=params).json()

    def _post(
        self,
        path: str,
        fallback: str,
        body: dict | None = None,
        params: dict | None = None,
    ) -> dict:
        resp = self._request("POST", path, fallback, json=body or {}, params=params)
        if not resp.content:
            return {}
        return resp.json()

    def _get_data_uri(self, path: str, fallback: str, params: dict | None = None) -> str:
        """Fetch binary media and return it as a ``data:`` URI."""
        resp = self._request(
            "GET",
            path,
            fallback,
            params=params,
            headers={"Accept": "application/json, text/plain, */*"},
        )
        content_type = resp.headers.get("Content-Type", "application/octet-stream")
        encoded = base64.b64encode(resp.content).decode("ascii")
        return f"data:{content_type};base64,{encoded}"
