"""Account ledger - balances and owners of debit accounts"""

import logging
import threading
from decimal import Decimal
from typing import Dict, List, Optional

from payment_gateway.domain.exceptions import (
    AccountAlreadyExistsError,
    AccountNotFoundError,
    InsufficientFundsError,
    InvalidAmountError,
)
from payment_gateway.domain.models import MONEY_PLACES, Account, ensure_storable_text, fits_money_places
from payment_gateway.domain.ports import SnapshotStore

logger = logging.getLogger(__name__)


class AccountLedger:
    """
    In-memory account collection backed by a SnapshotStore.

    Mutations stage a new snapshot, write it to the store, and only then
    commit it in memory. If the write raises, the in-memory state is the
    one before the call. A single lock covers every read-check-write
    sequence, including the durable write.
    """

    def __init__(self, store: SnapshotStore, accounts: List[Account] | None = None):
        self._store = store
        self._accounts: Dict[str, Account] = {a.account_number: a for a in accounts or []}
        self._lock = threading.Lock()

    @classmethod
    def load(cls, store: SnapshotStore) -> "AccountLedger":
        """Read all accounts; StoreError propagates and aborts startup"""
        return cls(store, store.load_accounts())

    def get_account(self, account_number: str) -> Optional[Account]:
        with self._lock:
            return self._accounts.get(account_number)

    def accounts(self) -> List[Account]:
        with self._lock:
            return list(self._accounts.values())

    def debit(self, account_number: str, amount: Decimal) -> Decimal:
        """
        Deduct `amount` from an account and persist the new balance.

        Returns:
            The balance after the debit

        Raises:
            AccountNotFoundError: unknown account number
            InvalidAmountError: amount is not positive or has too many decimal places
            InsufficientFundsError: amount exceeds the current balance
            StoreError: snapshot write failed (balance unchanged)
        """
        if not fits_money_places(amount) or amount <= 0:
            raise InvalidAmountError(
                f"Debit amount must be positive with at most {MONEY_PLACES} decimal places, got {amount}"
            )

        with self._lock:
            account = self._accounts.get(account_number)
            if account is None:
                raise AccountNotFoundError(f"Account {account_number} not found")

            # Re-checked here: the validation chain read the balance without the lock
            if amount > account.balance:
                raise InsufficientFundsError(
                    f"Account {account_number} balance {account.balance} is below {amount}"
                )

            updated = Account(
                account_number=account.account_number,
                balance=account.balance - amount,
                owner=account.owner,
            )
            staged = dict(self._accounts)
            staged[account_number] = updated

            self._store.save_accounts(list(staged.values()))
            self._accounts = staged

        logger.info(
            "Account debited",
            extra={"account_number": account_number, "amount": str(amount), "balance": str(updated.balance)},
        )
        return updated.balance

    def add_account(self, account_number: str, balance: Decimal, owner: str) -> Account:
        """
        Register a new account and persist the full snapshot.

        Raises:
            AccountAlreadyExistsError: account number already registered
            InvalidAmountError: opening balance is negative or has too many decimal places
            InvalidRecordError: account number or owner cannot be stored as-is
            StoreError: snapshot write failed (ledger unchanged)
        """
        if not fits_money_places(balance) or balance < 0:
            raise InvalidAmountError(
                f"Opening balance must be non-negative with at most {MONEY_PLACES} decimal places, got {balance}"
            )
        ensure_storable_text("account number", account_number, separators="|")
        ensure_storable_text("owner", owner, separators="|")

        with self._lock:
            if account_number in self._accounts:
                raise AccountAlreadyExistsError(f"Account {account_number} already exists")

            account = Account(account_number=account_number, balance=balance, owner=owner)
            staged = dict(self._accounts)
            staged[account_number] = account

            self._store.save_accounts(list(staged.values()))
            self._accounts = staged

        logger.info("Account added", extra={"account_number": account_number, "owner": owner})
        return account
