from __future__ import annotations

import logging
import os
from typing import Protocol

from msal_extensions import FilePersistence, FilePersistenceWithDataProtection

logger = logging.getLogger(__name__)

CREDENTIAL_SLOT_NAME = "token"


class CredentialStore(Protocol):
    def put(self, credential: str) -> None: ...

    def get(self) -> str | None: ...

    def clear(self) -> None: ...


class InMemoryCredentialStore:
    def __init__(self, credential: str | None = None):
        self._credential = credential or None

    def put(self, credential: str) -> None:
        self._credential = credential or None

    def get(self) -> str | None:
        return self._credential

    def clear(self) -> None:
        self._credential = None


class FileCredentialStore:
    """Single credential slot persisted to one file.

    Uses DPAPI-protected persistence where the platform offers it and plain file
    persistence otherwise. A slot that cannot be read or written is treated as
    empty; storage errors are logged and never raised.
    """

    def __init__(self, path: str):
        self._persistence = self._build_persistence(path)

    @staticmethod
    def _build_persistence(path: str):
        directory = os.path.dirname(path)
        if directory:
            try:
                os.makedirs(directory, exist_ok=True)
            except OSError as exc:
                # Later reads and writes fail too, which the store reports as an empty slot.
                logger.warning("Credential directory %s is unavailable: %s", directory, exc)
        try:
            return FilePersistenceWithDataProtection(path)
        except Exception:
            logger.debug("Data protection unavailable; storing %s slot unencrypted", CREDENTIAL_SLOT_NAME)
            return FilePersistence(path)

    @property
    def location(self) -> str:
        return self._persistence.get_location()

    def put(self, credential: str) -> None:
        if not credential:
            self.clear()
            return
        try:
            self._persistence.save(credential)
        except OSError as exc:
            logger.warning("Could not persist credential to %s: %s", self.location, exc)

    def get(self) -> str | None:
        try:
            credential = self._persistence.load()
        except OSError:
            # msal_extensions raises PersistenceNotFound (an OSError) for a missing file.
            return None
        except ValueError as exc:
            logger.warning("Stored credential at %s is unreadable: %s", self.location, exc)
            return None
        return credential or None

    def clear(self) -> None:
        try:
            os.remove(self.location)
        except FileNotFoundError:
            return
        except OSError as exc:
            logger.warning("Could not remove stored credential at %s: %s", self.location, exc)
