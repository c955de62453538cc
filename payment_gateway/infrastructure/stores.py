"""Selects the durable store backend from configuration"""

from payment_gateway.config import Settings
from payment_gateway.domain.ports import SnapshotStore
from payment_gateway.infrastructure.database.repositories import SqlSnapshotStore
from payment_gateway.infrastructure.flatfile.store import FlatFileStore


def build_store(settings: Settings) -> SnapshotStore:
    """Return the SnapshotStore named by settings.store_backend"""
    if settings.store_backend == "sql":
        return SqlSnapshotStore.from_url(settings.database_url)
    return FlatFileStore(settings.users_file, settings.accounts_file)
