from __future__ import annotations

from typing import Union

from shopfront_client.apis import ProductsApi
from shopfront_client.credential_store import CredentialStore
from shopfront_client.models import Authenticated, Failure, Product, SessionView, Success, UserIdentity
from shopfront_client.session import SessionStateMachine


class ShopfrontService:
    def __init__(
        self,
        session: SessionStateMachine,
        products_api: ProductsApi,
        credential_store: CredentialStore,
    ):
        self._session = session
        self._products_api = products_api
        self._credential_store = credential_store

    def session_view(self) -> SessionView:
        return self._session.view

    def sign_in(self, email: str, password: str) -> SessionView:
        return self._session.sign_in(email, password)

    def sign_up(self, email: str, username: str, password: str) -> SessionView:
        return self._session.sign_up(email, username, password)

    def sign_out(self) -> SessionView:
        return self._session.sign_out()

    def last_auth_failure(self) -> Failure | None:
        return self._session.last_failure

    def has_stored_credential(self) -> bool:
        return self._credential_store.get() is not None

    def fetch_products(self) -> Union[Success[tuple[Product, ...]], Failure]:
        return self._products_api.fetch_products()

    def fetch_profile(self) -> Union[Success[UserIdentity], Failure]:
        return self._products_api.fetch_profile()

    def credential_for_clipboard(self) -> str | None:
        view = self._session.view
        if isinstance(view, Authenticated):
            return view.credential
        return None
