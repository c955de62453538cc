"""Port interfaces between the payment core and its collaborators.

Driven ports only: the pipeline calls out through these, and the
infrastructure package (or tests) supply implementations.

- SnapshotStore: durable full-snapshot storage for credentials and accounts
- Signer: produces the Signature block attached to responses
- ReferenceGenerator: produces RefNo / UTRNo / PONum identifiers
"""

from abc import ABC, abstractmethod
from typing import Dict, List

from payment_gateway.domain.models import Account, Credential


class SnapshotStore(ABC):
    """Durable store read in full at startup and overwritten in full on mutation.

    Implementations raise StoreError for any read or write failure. A save
    either replaces the whole snapshot or leaves the previous one intact.
    """

    @abstractmethod
    def load_credentials(self) -> List[Credential]:
        """Read every stored credential, in stored order."""

    @abstractmethod
    def save_credentials(self, credentials: List[Credential]) -> None:
        """Replace the stored credentials with the given list."""

    @abstractmethod
    def load_accounts(self) -> List[Account]:
        """Read every stored account."""

    @abstractmethod
    def save_accounts(self, accounts: List[Account]) -> None:
        """Replace the stored accounts with the given list."""


class Signer(ABC):
    """Signs outbound payment responses."""

    @abstractmethod
    def sign(self, payload: Dict) -> Dict[str, str]:
        """Return the Signature block for a response payload."""


class ReferenceGenerator(ABC):
    """Generates transaction reference identifiers."""

    @abstractmethod
    def generate(self, prefix: str, length: int) -> str:
        """Return prefix followed by `length` generated characters."""
