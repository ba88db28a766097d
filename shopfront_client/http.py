from __future__ import annotations

import logging
from typing import Any

import requests

from shopfront_client.config import AppSettings

logger = logging.getLogger(__name__)


class ApiHttpError(RuntimeError):
    def __init__(self, status_code: int, message: str, server_message: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.server_message = server_message


class InvalidResponseError(RuntimeError):
    pass


class HttpClient:
    """JSON transport for the shop API.

    Non-2xx responses raise ``ApiHttpError``; a 2xx body that is not JSON raises
    ``InvalidResponseError``. Transport failures surface as the
    ``requests.RequestException`` raised by the session. Every call is a single
    attempt.
    """

    def __init__(self, settings: AppSettings, session: requests.Session | None = None):
        self._settings = settings
        self._session = session if session is not None else requests.Session()
        self._session.headers.update(
            {
                "Accept": "application/json",
                "Content-Type": "application/json",
            }
        )

    def post_json(self, path: str, payload: dict[str, Any], token: str | None = None) -> Any:
        url = f"{self._settings.base_url}{path}"
        logger.debug("POST %s", url)
        response = self._session.post(
            url,
            headers=self._auth_headers(token),
            json=payload,
            timeout=self._settings.timeout_seconds,
        )
        return self._handle_response(response)

    def get_json(
        self,
        path: str,
        token: str | None = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        url = f"{self._settings.base_url}{path}"
        logger.debug("GET %s", url)
        response = self._session.get(
            url,
            headers=self._auth_headers(token),
            params=params,
            timeout=self._settings.timeout_seconds,
        )
        return self._handle_response(response)

    @staticmethod
    def _auth_headers(token: str | None) -> dict[str, str]:
        if token is None:
            return {}
        return {"Authorization": f"Bearer {token}"}

    @staticmethod
    def _handle_response(response: requests.Response) -> Any:
        if response.ok:
            if not response.content:
                return {}
            try:
                return response.json()
            except ValueError as exc:
                raise InvalidResponseError(
                    f"HTTP {response.status_code}: response body is not JSON"
                ) from exc

        logger.info("Request to %s failed with HTTP %s", response.url, response.status_code)
        raise ApiHttpError(
            status_code=response.status_code,
            message=f"HTTP {response.status_code}: {response.text[:500]}",
            server_message=HttpClient._extract_server_message(response),
        )

    @staticmethod
    def _extract_server_message(response: requests.Response) -> str | None:
        try:
            body = response.json()
        except ValueError:
            return None
        if not isinstance(body, dict):
            return None
        message = body.get("message")
        if isinstance(message, str) and message.strip():
            return message
        return None
