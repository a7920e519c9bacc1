"""Firestore-backed expense storage with the same contract as the SQLite one."""

import logging
from contextlib import contextmanager
from datetime import date, datetime
from typing import Callable, List, Optional

from google.api_core.exceptions import GoogleAPIError

from ..errors import StorageError
from ..models import Expense
from .base import ExpenseStorage, utcnow

logger = logging.getLogger(__name__)

PING_TIMEOUT = 5.0


def _get_firestore_client(project: Optional[str] = None):
    """Lazy-import and create a Firestore client."""
    from google.cloud import firestore
    return firestore.Client(project=project)


class FirestoreExpenseStorage(ExpenseStorage):
    """Stores every expense as a document of one top-level collection.

    ``date`` is written as an ISO ``YYYY-MM-DD`` string so range filters and
    ordering compare lexicographically; ``created_at`` is a timestamp.
    """

    name = "firestore"

    def __init__(
        self,
        project: Optional[str] = None,
        collection: str = "expenses",
        db_client=None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self._db = db_client or _get_firestore_client(project)
        self._collection_name = collection
        self._clock = clock

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @property
    def _col(self):
        return self._db.collection(self._collection_name)

    def _owner_query(self, owner_id: int):
        return self._col.where("user_id", "==", owner_id)

    @staticmethod
    def _newest_first(query):
        return (
            query
            .order_by("date", direction="DESCENDING")
            .order_by("created_at", direction="DESCENDING")
        )

    @contextmanager
    def _wrap_errors(self, operation: str):
        try:
            yield
        except GoogleAPIError as exc:
            logger.error("Firestore %s failed: %s", operation, exc)
            raise StorageError(f"Firestore {operation} failed: {exc}") from exc

    @staticmethod
    def _to_expense(doc) -> Expense:
        d = doc.to_dict()
        return Expense(
            id=doc.id,
            owner_id=d.get("user_id"),
            category=d.get("category", ""),
            description=d.get("description", ""),
            amount=d.get("amount", 0),
            date=date.fromisoformat(d["date"]),
            created_at=d.get("created_at"),
        )

    def ping(self, timeout: float = PING_TIMEOUT) -> None:
        """Read at most one document to prove the backend is reachable."""
        try:
            list(self._col.limit(1).stream(timeout=timeout))
        except Exception as exc:  # noqa: BLE001 - credentials, network, API
            raise StorageError(f"Firestore is unreachable: {exc}") from exc

    # ------------------------------------------------------------------
    # Expense CRUD
    # ------------------------------------------------------------------

    def add_expense(self, owner_id: int, category: str, description: str, amount: float, expense_date: date) -> Expense:
        if amount <= 0:
            raise StorageError("Amount must be positive.")
        created_at = self._clock()
        with self._wrap_errors("add"):
            _, ref = self._col.add(
                {
                    "user_id": owner_id,
                    "category": category,
                    "description": description,
                    "amount": amount,
                    "date": expense_date.isoformat(),
                    "created_at": created_at,
                }
            )
        return Expense(
            id=ref.id,
            owner_id=owner_id,
            category=category,
            description=description,
            amount=amount,
            date=expense_date,
            created_at=created_at,
        )

    def get_last_expense(self, owner_id: int) -> Optional[Expense]:
        with self._wrap_errors("get_last"):
            docs = list(
                self._owner_query(owner_id)
                .order_by("created_at", direction="DESCENDING")
                .limit(1)
                .stream()
            )
        return self._to_expense(docs[0]) if docs else None

    def delete_expense(self, expense_id: str, owner_id: int) -> int:
        try:
            ref = self._col.document(str(expense_id))
        except ValueError:
            # Empty ids or ids containing "/" are not valid document paths
            return 0
        with self._wrap_errors("delete"):
            snapshot = ref.get()
            if not snapshot.exists or snapshot.to_dict().get("user_id") != owner_id:
                return 0
            ref.delete()
        return 1

    def get_expenses_count(self, owner_id: int) -> int:
        with self._wrap_errors("count"):
            results = self._owner_query(owner_id).count(alias="total").get()
        return int(results[0][0].value) if results else 0

    def get_paginated_expenses(self, owner_id: int, limit: int, offset: int) -> List[Expense]:
        with self._wrap_errors("paginate"):
            docs = (
                self._newest_first(self._owner_query(owner_id))
                .offset(offset)
                .limit(limit)
                .stream()
            )
            return [self._to_expense(doc) for doc in docs]

    def get_period_report(self, owner_id: int, start_date: date, end_date: Optional[date] = None) -> List[Expense]:
        q = self._owner_query(owner_id).where("date", ">=", start_date.isoformat())
        if end_date is not None:
            q = q.where("date", "<=", end_date.isoformat())
        with self._wrap_errors("period_report"):
            return [self._to_expense(doc) for doc in self._newest_first(q).stream()]


__all__ = ["FirestoreExpenseStorage"]
