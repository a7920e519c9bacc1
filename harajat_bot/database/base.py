"""Storage contract implemented by every expense backend."""

from abc import ABC, abstractmethod
from datetime import date, datetime, timezone
from typing import List, Optional

from ..models import Expense


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ExpenseStorage(ABC):
    """Persists expense records scoped by owner (the Telegram chat id).

    Listing and report queries return records ordered by date descending,
    then by creation descending. ``get_last_expense`` orders by creation only,
    so a back-dated record created last is still "the last expense".
    """

    name = "abstract"

    @abstractmethod
    def ping(self) -> None:
        """Raise StorageError unless the backend answers a trivial read."""

    @abstractmethod
    def add_expense(self, owner_id: int, category: str, description: str, amount: float, expense_date: date) -> Expense:
        """Persist a new record and return it with its backend-assigned id."""

    @abstractmethod
    def get_last_expense(self, owner_id: int) -> Optional[Expense]:
        """Most recently created record of ``owner_id``, or None."""

    @abstractmethod
    def delete_expense(self, expense_id: str, owner_id: int) -> int:
        """Delete the record matching both id and owner. Returns 0 or 1."""

    @abstractmethod
    def get_expenses_count(self, owner_id: int) -> int:
        ...

    @abstractmethod
    def get_paginated_expenses(self, owner_id: int, limit: int, offset: int) -> List[Expense]:
        ...

    @abstractmethod
    def get_period_report(self, owner_id: int, start_date: date, end_date: Optional[date] = None) -> List[Expense]:
        """Records with ``start_date <= date`` and, if given, ``date <= end_date``."""


__all__ = ["ExpenseStorage", "utcnow"]
