"""
Generic REST transport for the auth API.

Thin wrapper over a shared requests.Session: joins paths onto the base URL,
applies the configured timeout, and turns connection-level failures into
TransportError. Status codes are returned untouched for the caller to classify.
No retries.
"""

import logging
from typing import Any

import requests

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """Raised when a request could not be completed at the transport level."""


def bearer_headers(api_key: str, bearer: str) -> dict[str, str]:
    """Headers carrying the apikey plus a bearer credential."""
    return {
        "apikey": api_key,
        "Authorization": f"Bearer {bearer}",
    }


class HttpClient:
    """Issues requests against one base URL over a shared session."""

    def __init__(
        self,
        base_url: str,
        session: requests.Session | None = None,
        timeout: float = 10.0,
    ):
        """
        Args:
            base_url: URL every request path is joined onto
            session: Session to share with other transports (new one if omitted)
            timeout: Per-request timeout in seconds

        Raises:
            ValueError: If base_url is empty
        """
        if not base_url:
            raise ValueError("base_url is required")

        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def url_for(self, path: str) -> str:
        return f"{self.base_url}/{path.lstrip('/')}"

    def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        json: Any = None,
        params: dict[str, str] | None = None,
    ) -> requests.Response:
        """
        Send one request and return the response whatever its status.

        Raises:
            TransportError: Connection refused, timeout, or body read failure
        """
        url = self.url_for(path)

        try:
            response = self.session.request(
                method,
                url,
                headers=headers,
                json=json,
                params=params,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise TransportError(f"{method} {url} failed: {e}") from e

        logger.debug(f"{method} {url} -> {response.status_code}")
        return response
