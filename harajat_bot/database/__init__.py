"""Storage backend selector for Harajat Bot.

The primary backend (Firestore) is tried once at startup; when it cannot be
reached the process uses SQLite for its whole lifetime.
"""

import logging
from dataclasses import dataclass

from ..config import BotConfig
from .base import ExpenseStorage
from .sqlite import SqliteExpenseStorage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StorageSelection:
    """The backend chosen at startup and why it was chosen."""

    storage: ExpenseStorage
    reason: str

    @property
    def is_fallback(self) -> bool:
        return self.storage.name == SqliteExpenseStorage.name


def select_storage(config: BotConfig, firestore_client=None) -> StorageSelection:
    """Pick the backend the bot will use until it exits."""
    if not config.use_firestore:
        reason = "USE_FIRESTORE is disabled"
    else:
        try:
            from .firestore import FirestoreExpenseStorage

            storage = FirestoreExpenseStorage(
                project=config.firestore_project,
                collection=config.firestore_collection,
                db_client=firestore_client,
            )
            storage.ping()
        except Exception as exc:  # noqa: BLE001 - any failure selects the fallback
            reason = f"Firestore unavailable: {exc}"
            logger.warning("⚠️ %s, falling back to SQLite", reason)
        else:
            logger.info("📊 Using Firestore storage (collection %s)", config.firestore_collection)
            return StorageSelection(storage, "Firestore reachable")

    storage = SqliteExpenseStorage(config.sqlite_path)
    logger.info("💾 Using SQLite storage at %s (%s)", config.sqlite_path, reason)
    return StorageSelection(storage, reason)


def create_storage(config: BotConfig, firestore_client=None) -> ExpenseStorage:
    return select_storage(config, firestore_client).storage


__all__ = ["ExpenseStorage", "SqliteExpenseStorage", "StorageSelection", "create_storage", "select_storage"]
