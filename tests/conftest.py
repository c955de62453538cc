"""Pytest fixtures for testing"""

import base64
from pathlib import Path
from typing import Any, Callable, Dict

import pytest
from fastapi.testclient import TestClient

from payment_gateway.api.main import create_app
from payment_gateway.config import Settings
from payment_gateway.domain.credentials import CredentialStore
from payment_gateway.domain.ledger import AccountLedger
from payment_gateway.domain.pipeline import PaymentPipeline
from payment_gateway.domain.ports import ReferenceGenerator
from payment_gateway.infrastructure.flatfile.store import FlatFileStore

ADMIN_SECRET = "test-admin-secret"


class SequentialReferenceGenerator(ReferenceGenerator):
    """Deterministic references: prefix followed by zero-padded counter"""

    def __init__(self):
        self.counter = 0

    def generate(self, prefix: str, length: int) -> str:
        self.counter += 1
        return prefix + str(self.counter).zfill(length)


def basic_auth(username: str, password: str) -> str:
    token = base64.b64encode(f"{username}:{password}".encode()).decode()
    return f"Basic {token}"


@pytest.fixture
def auth() -> Callable[[str, str], str]:
    """Build an `Authorization: Basic` header value"""
    return basic_auth


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Flat-file store seeded with two users and three accounts"""
    (tmp_path / "users.txt").write_text("corp1:pass1\ncorp2:pass2\n")
    (tmp_path / "accounts.txt").write_text(
        "ACC1|500000|corp1\n"
        "ACC2|1000|corp2\n"
        "ACC3|150000.50|corp1\n"
    )
    return tmp_path


@pytest.fixture
def store(data_dir: Path) -> FlatFileStore:
    return FlatFileStore(data_dir / "users.txt", data_dir / "accounts.txt")


@pytest.fixture
def ledger(store: FlatFileStore) -> AccountLedger:
    return AccountLedger.load(store)


@pytest.fixture
def credentials(store: FlatFileStore) -> CredentialStore:
    return CredentialStore.load(store)


@pytest.fixture
def pipeline(ledger: AccountLedger, credentials: CredentialStore) -> PaymentPipeline:
    return PaymentPipeline(ledger, credentials, references=SequentialReferenceGenerator())


@pytest.fixture
def settings(data_dir: Path) -> Settings:
    return Settings(
        store_backend="file",
        users_file=str(data_dir / "users.txt"),
        accounts_file=str(data_dir / "accounts.txt"),
        admin_secret=ADMIN_SECRET,
    )


@pytest.fixture
def client(settings: Settings) -> TestClient:
    """Create FastAPI test client over the seeded flat-file store"""
    app = create_app(settings)
    return TestClient(app)


@pytest.fixture
def admin_headers() -> Dict[str, str]:
    return {"X-Admin-Secret": ADMIN_SECRET}


@pytest.fixture
def make_payment() -> Callable[..., Dict[str, Any]]:
    """Build a Single_Payment_Corp_Req envelope; keyword args override Body fields"""

    def _make(header: Dict[str, Any] | None = None, **body_overrides: Any) -> Dict[str, Any]:
        payment_header = {
            "TranID": "T1",
            "Corp_ID": "corp1",
            "Maker_ID": "maker1",
            "Checker_ID": "checker1",
            "Approver_ID": "approver1",
        }
        payment_header.update(header or {})
        body = {
            "Debit_Acct_No": "ACC1",
            "Debit_Acct_Name": "Corp One",
            "Debit_IFSC": "BANK0000001",
            "Amount": 250000,
            "Mode_of_Pay": "RTGS",
            "Ben_IFSC": "BANK0000002",
            "Ben_Acct_No": "BEN1",
            "Ben_Name": "Beneficiary",
            "Ben_Email": "ben@example.com",
            "Ben_Mobile": "9999999999",
        }
        body.update(body_overrides)
        return {"Single_Payment_Corp_Req": {"Header": payment_header, "Body": body}}

    return _make
