from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import quote

import requests

from ..core.constants import DEFAULT_API_TIMEOUT_SECONDS
from ..core.exceptions import RemoteFailure

logger = logging.getLogger(__name__)


def path_segment(value: Any) -> str:
    """Quote one URL path segment ("Class 1" -> "Class%201")."""
    return quote(str(value), safe="")


class ApiClient:
    """Thin JSON client for the school REST API.

    Every transport error or non-2xx answer becomes RemoteFailure; retrying is
    left to the caller.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_API_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
        headers: Optional[dict] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        if headers:
            self._session.headers.update(headers)

    def get(self, path: str, params: Optional[dict] = None) -> Any:
        return self._request("GET", path, params=params)

    def post(self, path: str, payload: dict) -> Any:
        return self._request("POST", path, json=payload)

    def put(self, path: str, payload: dict) -> Any:
        return self._request("PUT", path, json=payload)

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self._base_url}/{path.lstrip('/')}"
        try:
            response = self._session.request(method, url, timeout=self._timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise RemoteFailure(f"Could not reach {url}") from e

        if response.status_code >= 400:
            message = self._error_message(response)
            logger.error(f"{method} {url} returned {response.status_code}: {message}")
            raise RemoteFailure(message)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise RemoteFailure(f"{method} {url} returned invalid JSON") from e

    @staticmethod
    def _error_message(response) -> str:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return f"Server error ({response.status_code})"
