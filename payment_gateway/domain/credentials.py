"""Credential store - known username/password pairs"""

import logging
import threading
from typing import List

from payment_gateway.domain.exceptions import CredentialAlreadyExistsError
from payment_gateway.domain.models import Credential, ensure_storable_text
from payment_gateway.domain.ports import SnapshotStore

logger = logging.getLogger(__name__)


class CredentialStore:
    """
    In-memory credential collection backed by a SnapshotStore.

    Passwords are compared in the clear. Duplicate usernames found at load
    time are kept; authenticate() uses the first entry for a username.
    """

    def __init__(self, store: SnapshotStore, credentials: List[Credential] | None = None):
        self._store = store
        self._credentials: List[Credential] = list(credentials or [])
        self._lock = threading.Lock()

    @classmethod
    def load(cls, store: SnapshotStore) -> "CredentialStore":
        """Read all credentials; StoreError propagates and aborts startup"""
        credentials = store.load_credentials()

        seen = set()
        for credential in credentials:
            if credential.username in seen:
                logger.warning(
                    "Duplicate username in credential store, first entry wins",
                    extra={"username": credential.username},
                )
            seen.add(credential.username)

        return cls(store, credentials)

    def authenticate(self, username: str, password: str) -> bool:
        with self._lock:
            for credential in self._credentials:
                if credential.username == username:
                    return credential.password == password
        return False

    def add_credential(self, username: str, password: str) -> None:
        """
        Register a new credential and persist the full snapshot.

        Raises:
            CredentialAlreadyExistsError: username already registered
            InvalidRecordError: username or password cannot be stored as-is
            StoreError: snapshot write failed (memory left unchanged)
        """
        ensure_storable_text("username", username, separators=":")
        ensure_storable_text("password", password)

        with self._lock:
            if any(c.username == username for c in self._credentials):
                raise CredentialAlreadyExistsError(f"User {username} already exists")

            staged = self._credentials + [Credential(username=username, password=password)]
            self._store.save_credentials(staged)
            self._credentials = staged

        logger.info("Credential added", extra={"username": username})

    def usernames(self) -> List[str]:
        with self._lock:
            return [c.username for c in self._credentials]
