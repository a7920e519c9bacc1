"""SQLite-backed expense storage, used when Firestore is unavailable."""

import logging
import sqlite3
from contextlib import contextmanager
from datetime import date, datetime
from typing import Callable, List, Optional

from ..errors import StorageError
from ..models import Expense
from .base import ExpenseStorage, utcnow

logger = logging.getLogger(__name__)

_COLUMNS = "id, user_id, category, description, amount, date, created_at"


class SqliteExpenseStorage(ExpenseStorage):
    """Manages expense rows in a single local SQLite file."""

    name = "sqlite"

    def __init__(self, db_path: str = "expenses.db", clock: Callable[[], datetime] = utcnow):
        self.db_path = db_path
        self._clock = clock
        self._init_db()

    def _init_db(self) -> None:
        """Create the expenses table and its indexes if they don't exist."""
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute('''
                CREATE TABLE IF NOT EXISTS expenses (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    user_id INTEGER NOT NULL,
                    category TEXT NOT NULL,
                    description TEXT,
                    amount REAL NOT NULL CHECK (amount > 0),
                    date DATE NOT NULL,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            ''')
            cursor.execute('CREATE INDEX IF NOT EXISTS idx_expenses_user_date ON expenses (user_id, date DESC)')
            cursor.execute('CREATE INDEX IF NOT EXISTS idx_expenses_user_category ON expenses (user_id, category)')
            conn.commit()

    @contextmanager
    def _connect(self):
        """Open a connection for one operation and translate driver errors."""
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot open database {self.db_path}: {exc}") from exc
        try:
            yield conn
        except sqlite3.Error as exc:
            logger.error("SQLite error on %s: %s", self.db_path, exc)
            raise StorageError(str(exc)) from exc
        finally:
            conn.close()

    def ping(self) -> None:
        with self._connect() as conn:
            conn.execute("SELECT 1").fetchone()

    @staticmethod
    def _row_to_expense(row) -> Expense:
        expense_id, user_id, category, description, amount, day, created_at = row
        created = datetime.fromisoformat(created_at) if created_at else None
        return Expense(
            id=str(expense_id),
            owner_id=user_id,
            category=category,
            description=description or "",
            amount=amount,
            date=date.fromisoformat(str(day)[:10]),
            created_at=created,
        )

    def add_expense(self, owner_id: int, category: str, description: str, amount: float, expense_date: date) -> Expense:
        created_at = self._clock()
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute('''
                INSERT INTO expenses (user_id, category, description, amount, date, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
            ''', (owner_id, category, description, amount, expense_date.isoformat(), created_at.isoformat()))
            conn.commit()
            expense_id = cursor.lastrowid

        return Expense(
            id=str(expense_id),
            owner_id=owner_id,
            category=category,
            description=description,
            amount=amount,
            date=expense_date,
            created_at=created_at,
        )

    def get_last_expense(self, owner_id: int) -> Optional[Expense]:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f'SELECT {_COLUMNS} FROM expenses WHERE user_id = ? ORDER BY id DESC LIMIT 1',
                (owner_id,),
            )
            row = cursor.fetchone()
        return self._row_to_expense(row) if row else None

    def delete_expense(self, expense_id: str, owner_id: int) -> int:
        try:
            row_id = int(expense_id)
        except (TypeError, ValueError):
            return 0
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute('DELETE FROM expenses WHERE id = ? AND user_id = ?', (row_id, owner_id))
            conn.commit()
            return cursor.rowcount

    def get_expenses_count(self, owner_id: int) -> int:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute('SELECT COUNT(*) FROM expenses WHERE user_id = ?', (owner_id,))
            row = cursor.fetchone()
        return row[0] if row else 0

    def get_paginated_expenses(self, owner_id: int, limit: int, offset: int) -> List[Expense]:
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(f'''
                SELECT {_COLUMNS} FROM expenses
                WHERE user_id = ?
                ORDER BY date DESC, id DESC
                LIMIT ? OFFSET ?
            ''', (owner_id, limit, offset))
            rows = cursor.fetchall()
        return [self._row_to_expense(row) for row in rows]

    def get_period_report(self, owner_id: int, start_date: date, end_date: Optional[date] = None) -> List[Expense]:
        query = f'SELECT {_COLUMNS} FROM expenses WHERE user_id = ? AND date >= ?'
        params = [owner_id, start_date.isoformat()]
        if end_date is not None:
            query += ' AND date <= ?'
            params.append(end_date.isoformat())
        query += ' ORDER BY date DESC, id DESC'

        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            rows = cursor.fetchall()
        return [self._row_to_expense(row) for row in rows]


__all__ = ["SqliteExpenseStorage"]
