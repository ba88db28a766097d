from __future__ import annotations

import logging

from shopfront_client.apis.auth_api import AuthApi
from shopfront_client.credential_store import CredentialStore
from shopfront_client.models import Anonymous, Authenticated, AuthResult, AuthSuccess, Failure, SessionView

logger = logging.getLogger(__name__)


class SessionStateMachine:
    """Owns the in-memory session and mirrors its credential into the store.

    Starts ``Anonymous``. A successful sign-in or sign-up (from either state)
    yields ``Authenticated`` and stores the credential. A failed attempt while
    anonymous yields ``Anonymous`` carrying the failure message; while
    authenticated it leaves the session and the stored credential untouched and
    is reported through ``last_failure``. ``sign_out`` is the only way back to
    ``Anonymous`` and does nothing when already anonymous.
    """

    def __init__(self, auth_api: AuthApi, credential_store: CredentialStore):
        self._auth_api = auth_api
        self._credential_store = credential_store
        self._view: SessionView = Anonymous()
        self._last_failure: Failure | None = None

    @property
    def view(self) -> SessionView:
        return self._view

    @property
    def last_failure(self) -> Failure | None:
        """Failure of the most recent sign-in or sign-up, cleared by a success or sign-out."""
        return self._last_failure

    @property
    def is_authenticated(self) -> bool:
        return isinstance(self._view, Authenticated)

    def sign_in(self, email: str, password: str) -> SessionView:
        return self._apply(self._auth_api.sign_in(email, password))

    def sign_up(self, email: str, username: str, password: str) -> SessionView:
        return self._apply(self._auth_api.sign_up(email, username, password))

    def sign_out(self) -> SessionView:
        if isinstance(self._view, Anonymous):
            return self._view

        self._view = Anonymous()
        self._last_failure = None
        self._credential_store.clear()
        logger.info("Signed out")
        return self._view

    def _apply(self, result: AuthResult) -> SessionView:
        if isinstance(result, AuthSuccess):
            self._last_failure = None
            self._view = Authenticated(user=result.user, credential=result.credential)
            self._credential_store.put(result.credential)
            return self._view

        self._last_failure = result
        if isinstance(self._view, Authenticated):
            # Only sign_out leaves Authenticated; the active session and its stored credential stay.
            logger.info("Re-authentication failed (%s); keeping the current session", result.kind.value)
            return self._view

        self._view = Anonymous(last_error=result.message)
        return self._view
