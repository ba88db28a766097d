from __future__ import annotations

import logging
from typing import Any, Callable, TypeVar, Union

import requests

from shopfront_client.apis.auth_api import NETWORK_ERROR_MESSAGE
from shopfront_client.config import AppSettings
from shopfront_client.credential_store import CredentialStore
from shopfront_client.http import ApiHttpError, HttpClient, InvalidResponseError
from shopfront_client.models import Failure, FailureKind, Product, Success, UserIdentity

logger = logging.getLogger(__name__)

T = TypeVar("T")

SIGN_IN_FIRST_MESSAGE = "Please sign in first to view products"
PRODUCTS_FAILED_MESSAGE = "Failed to fetch products"
PROFILE_FAILED_MESSAGE = "Failed to fetch profile"

_AUTHORIZATION_STATUSES = (401, 403)


class ProductsApi:
    """Credential-gated reads against the shop API.

    The credential is read from the store on every call. A rejected credential
    is reported as a failure; the session is left as it is.
    """

    def __init__(
        self,
        settings: AppSettings,
        http_client: HttpClient,
        credential_store: CredentialStore,
    ):
        self._settings = settings
        self._http_client = http_client
        self._credential_store = credential_store

    def fetch_products(self) -> Union[Success[tuple[Product, ...]], Failure]:
        return self._get_protected(self._settings.products_path, _parse_products, PRODUCTS_FAILED_MESSAGE)

    def fetch_profile(self) -> Union[Success[UserIdentity], Failure]:
        return self._get_protected(self._settings.me_path, UserIdentity.from_payload, PROFILE_FAILED_MESSAGE)

    def _get_protected(
        self,
        path: str,
        parse: Callable[[Any], T],
        fallback_message: str,
    ) -> Union[Success[T], Failure]:
        token = self._credential_store.get()
        if not token:
            return Failure(SIGN_IN_FIRST_MESSAGE, FailureKind.PRECONDITION_FAILED)

        try:
            body = self._http_client.get_json(path, token=token)
        except ApiHttpError as exc:
            if exc.status_code in _AUTHORIZATION_STATUSES:
                logger.info("Credential rejected by %s (HTTP %s)", path, exc.status_code)
                kind = FailureKind.AUTHORIZATION_REJECTED
            else:
                kind = FailureKind.REQUEST_FAILED
            return Failure(exc.server_message or fallback_message, kind)
        except InvalidResponseError as exc:
            logger.warning("Response from %s was not JSON: %s", path, exc)
            return Failure(fallback_message, FailureKind.INVALID_RESPONSE)
        except requests.RequestException as exc:
            logger.warning("Request to %s failed: %s", path, exc)
            return Failure(NETWORK_ERROR_MESSAGE, FailureKind.NETWORK_ERROR)

        try:
            return Success(parse(body))
        except ValueError as exc:
            logger.warning("Response from %s is malformed: %s", path, exc)
            return Failure(fallback_message, FailureKind.INVALID_RESPONSE)


def _parse_products(body: Any) -> tuple[Product, ...]:
    if not isinstance(body, list):
        raise ValueError("Products response must be a list")
    return tuple(Product.from_payload(item) for item in body)
