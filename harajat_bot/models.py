"""Expense record shared by both storage backends."""

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(frozen=True)
class Expense:
    id: str
    owner_id: int
    category: str
    description: str
    amount: float
    date: date
    created_at: datetime


__all__ = ["Expense"]
