"""SQL-backed snapshot store for credentials and accounts"""

import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from payment_gateway.domain.exceptions import StoreError
from payment_gateway.domain.models import Account, Credential
from payment_gateway.domain.ports import SnapshotStore
from payment_gateway.infrastructure.database.models import CredentialRow, DebitAccountRow
from payment_gateway.infrastructure.database.session import create_session_factory
from payment_gateway.infrastructure.observability.metrics import store_write_failures_counter

logger = logging.getLogger(__name__)


class SqlSnapshotStore(SnapshotStore):
    """Snapshot store over any SQLAlchemy database.

    Each save deletes and re-inserts the whole table in one transaction.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    @classmethod
    def from_url(cls, database_url: str) -> "SqlSnapshotStore":
        try:
            return cls(create_session_factory(database_url))
        except SQLAlchemyError as e:
            raise StoreError(f"Cannot open database: {e}") from e

    def load_credentials(self) -> List[Credential]:
        db = self.session_factory()
        try:
            rows = db.query(CredentialRow).order_by(CredentialRow.id).all()
            return [Credential(username=r.username, password=r.password) for r in rows]
        except SQLAlchemyError as e:
            raise StoreError(f"Cannot read credentials: {e}") from e
        finally:
            db.close()

    def save_credentials(self, credentials: List[Credential]) -> None:
        self._replace(
            CredentialRow,
            [CredentialRow(username=c.username, password=c.password) for c in credentials],
        )

    def load_accounts(self) -> List[Account]:
        db = self.session_factory()
        try:
            rows = db.query(DebitAccountRow).order_by(DebitAccountRow.account_number).all()
            return [
                Account(account_number=r.account_number, balance=r.balance, owner=r.owner)
                for r in rows
            ]
        except SQLAlchemyError as e:
            raise StoreError(f"Cannot read accounts: {e}") from e
        finally:
            db.close()

    def save_accounts(self, accounts: List[Account]) -> None:
        self._replace(
            DebitAccountRow,
            [
                DebitAccountRow(account_number=a.account_number, balance=a.balance, owner=a.owner)
                for a in accounts
            ],
        )

    def _replace(self, model, rows: list) -> None:
        db = self.session_factory()
        try:
            db.query(model).delete()
            db.add_all(rows)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            store_write_failures_counter.inc()
            logger.error("Store write failed", extra={"table": model.__tablename__, "error": str(e)})
            raise StoreError(f"Cannot write {model.__tablename__}: {e}") from e
        finally:
            db.close()
