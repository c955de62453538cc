"""Line-oriented flat file store for credentials and accounts"""

import logging
import os
import tempfile
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import List

from payment_gateway.domain.exceptions import StoreError
from payment_gateway.domain.models import Account, Credential
from payment_gateway.domain.ports import SnapshotStore
from payment_gateway.infrastructure.observability.metrics import store_write_failures_counter

logger = logging.getLogger(__name__)


class FlatFileStore(SnapshotStore):
    """
    Stores credentials and accounts in two text files.

    File formats (one record per line, blank lines ignored):
    - users file:    username:password
    - accounts file: acctNo|balance|owner

    Saves write a temporary file next to the target and swap it in with
    os.replace, so a failed write never truncates the previous snapshot.
    """

    def __init__(self, users_file: str | Path, accounts_file: str | Path):
        self.users_file = Path(users_file)
        self.accounts_file = Path(accounts_file)

    def load_credentials(self) -> List[Credential]:
        credentials = []
        for line_no, line in self._read_lines(self.users_file):
            username, sep, password = line.partition(":")
            if not sep or not username:
                raise StoreError(f"{self.users_file}:{line_no}: expected 'username:password'")
            credentials.append(Credential(username=username, password=password))
        return credentials

    def save_credentials(self, credentials: List[Credential]) -> None:
        lines = [f"{c.username}:{c.password}" for c in credentials]
        self._write_lines(self.users_file, lines)

    def load_accounts(self) -> List[Account]:
        accounts = []
        for line_no, line in self._read_lines(self.accounts_file):
            parts = line.split("|")
            if len(parts) != 3 or not parts[0]:
                raise StoreError(f"{self.accounts_file}:{line_no}: expected 'acctNo|balance|owner'")
            account_number, balance, owner = parts
            try:
                amount = Decimal(balance)
            except InvalidOperation as e:
                raise StoreError(f"{self.accounts_file}:{line_no}: invalid balance {balance!r}") from e
            if not amount.is_finite():
                raise StoreError(f"{self.accounts_file}:{line_no}: invalid balance {balance!r}")
            accounts.append(Account(account_number=account_number, balance=amount, owner=owner))
        return accounts

    def save_accounts(self, accounts: List[Account]) -> None:
        lines = [f"{a.account_number}|{a.balance}|{a.owner}" for a in accounts]
        self._write_lines(self.accounts_file, lines)

    def _read_lines(self, path: Path):
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise StoreError(f"Cannot read {path}: {e}") from e
        for line_no, raw in enumerate(text.splitlines(), start=1):
            line = raw.strip()
            if line:
                yield line_no, line

    def _write_lines(self, path: Path, lines: List[str]) -> None:
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write("\n".join(lines))
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            store_write_failures_counter.inc()
            logger.error("Store write failed", extra={"path": str(path), "error": str(e)})
            raise StoreError(f"Cannot write {path}: {e}") from e
