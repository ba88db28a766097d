from __future__ import annotations

import logging
from typing import Any

import requests

from shopfront_client.config import AppSettings
from shopfront_client.http import ApiHttpError, HttpClient, InvalidResponseError
from shopfront_client.models import AuthResult, AuthSuccess, Failure, FailureKind, UserIdentity

logger = logging.getLogger(__name__)

SIGNIN_FAILED_MESSAGE = "Signin failed"
SIGNUP_FAILED_MESSAGE = "Signup failed"
NETWORK_ERROR_MESSAGE = "Network error. Please try again."
SIGNIN_REQUIRED_FIELDS_MESSAGE = "Email and password are required"
SIGNUP_REQUIRED_FIELDS_MESSAGE = (
    "Email, username are required and password must be at least 6 characters"
)
MIN_PASSWORD_LENGTH = 6


class AuthApi:
    def __init__(self, settings: AppSettings, http_client: HttpClient):
        self._settings = settings
        self._http_client = http_client

    def sign_in(self, email: str, password: str) -> AuthResult:
        if not email.strip() or not password:
            return Failure(SIGNIN_REQUIRED_FIELDS_MESSAGE, FailureKind.VALIDATION_ERROR)

        payload = {"email": email.strip(), "password": password}
        return self._authenticate(self._settings.signin_path, payload, SIGNIN_FAILED_MESSAGE)

    def sign_up(self, email: str, username: str, password: str) -> AuthResult:
        if not email.strip() or not username.strip() or len(password) < MIN_PASSWORD_LENGTH:
            return Failure(SIGNUP_REQUIRED_FIELDS_MESSAGE, FailureKind.VALIDATION_ERROR)

        payload = {"email": email.strip(), "username": username.strip(), "password": password}
        return self._authenticate(self._settings.signup_path, payload, SIGNUP_FAILED_MESSAGE)

    def _authenticate(self, path: str, payload: dict[str, Any], fallback_message: str) -> AuthResult:
        try:
            body = self._http_client.post_json(path, payload)
        except ApiHttpError as exc:
            if exc.status_code >= 500:
                logger.warning("Authentication service error on %s (HTTP %s)", path, exc.status_code)
                kind = FailureKind.REQUEST_FAILED
            else:
                logger.info("Authentication rejected for %s (HTTP %s)", mask_email(payload["email"]), exc.status_code)
                kind = FailureKind.AUTH_REJECTED
            return Failure(exc.server_message or fallback_message, kind)
        except InvalidResponseError as exc:
            logger.warning("Authentication response from %s was not JSON: %s", path, exc)
            return Failure(fallback_message, FailureKind.INVALID_RESPONSE)
        except requests.RequestException as exc:
            logger.warning("Authentication request to %s failed: %s", path, exc)
            return Failure(NETWORK_ERROR_MESSAGE, FailureKind.NETWORK_ERROR)

        try:
            result = self._parse_grant(body)
        except ValueError as exc:
            logger.warning("Authentication response from %s is malformed: %s", path, exc)
            return Failure(fallback_message, FailureKind.INVALID_RESPONSE)

        logger.info("Authenticated %s", mask_email(result.user.email))
        return result

    def _parse_grant(self, body: Any) -> AuthSuccess:
        if not isinstance(body, dict):
            raise ValueError("Authentication response must be an object")

        credential = body.get(self._settings.credential_field)
        if not isinstance(credential, str) or not credential:
            raise ValueError(f"Authentication response is missing '{self._settings.credential_field}'")

        return AuthSuccess(user=UserIdentity.from_payload(body.get("user")), credential=credential)


def mask_email(email: str) -> str:
    value = email.strip()
    if "@" not in value:
        return "***"

    local, domain = value.split("@", 1)
    if not local:
        return f"@{domain}"
    return f"{local[0]}***@{domain}"
