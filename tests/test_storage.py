"""Storage contract tests, run against both SQLite and the Firestore mock."""

from datetime import date

import pytest

from harajat_bot.errors import StorageError

OWNER_A = 111
OWNER_B = 222


def _add(storage, owner=OWNER_A, category="🍔 Food", description="burger", amount=100.0, day=date(2024, 3, 10)):
    return storage.add_expense(owner, category, description, amount, day)


class TestAddExpense:
    def test_returns_record_with_id(self, storage):
        expense = _add(storage, amount=25000.5)
        assert expense.id
        assert expense.owner_id == OWNER_A
        assert expense.category == "🍔 Food"
        assert expense.description == "burger"
        assert expense.amount == 25000.5
        assert expense.date == date(2024, 3, 10)
        assert expense.created_at is not None

    def test_ids_are_unique(self, storage):
        ids = {_add(storage).id for _ in range(5)}
        assert len(ids) == 5

    def test_non_positive_amount_rejected(self, storage):
        with pytest.raises(StorageError):
            _add(storage, amount=0)
        assert storage.get_expenses_count(OWNER_A) == 0


class TestCount:
    def test_count_per_owner(self, storage):
        for _ in range(4):
            _add(storage, owner=OWNER_A)
        assert storage.get_expenses_count(OWNER_A) == 4
        assert storage.get_expenses_count(OWNER_B) == 0


class TestLastExpense:
    def test_none_when_empty(self, storage):
        assert storage.get_last_expense(OWNER_A) is None

    def test_orders_by_creation_not_date(self, storage):
        _add(storage, description="newer date", day=date(2024, 3, 14))
        back_dated = _add(storage, description="created last", day=date(2024, 1, 1))
        last = storage.get_last_expense(OWNER_A)
        assert last.id == back_dated.id
        assert last.description == "created last"

    def test_scoped_by_owner(self, storage):
        mine = _add(storage, owner=OWNER_A)
        _add(storage, owner=OWNER_B)
        assert storage.get_last_expense(OWNER_A).id == mine.id


class TestDelete:
    def test_deletes_own_record(self, storage):
        expense = _add(storage)
        assert storage.delete_expense(expense.id, OWNER_A) == 1
        assert storage.get_expenses_count(OWNER_A) == 0

    def test_never_deletes_other_owners_record(self, storage):
        expense = _add(storage, owner=OWNER_B)
        assert storage.delete_expense(expense.id, OWNER_A) == 0
        assert storage.get_expenses_count(OWNER_B) == 1

    def test_missing_id_returns_zero(self, storage):
        expense = _add(storage)
        storage.delete_expense(expense.id, OWNER_A)
        assert storage.delete_expense(expense.id, OWNER_A) == 0

    @pytest.mark.parametrize("bad_id", ["", "not/a/valid/id", "abc"])
    def test_malformed_id_returns_zero(self, storage, bad_id):
        _add(storage)
        assert storage.delete_expense(bad_id, OWNER_A) == 0
        assert storage.get_expenses_count(OWNER_A) == 1


class TestPagination:
    def test_orders_by_date_then_creation_desc(self, storage):
        first = _add(storage, description="a", day=date(2024, 3, 1))
        second = _add(storage, description="b", day=date(2024, 3, 5))
        third = _add(storage, description="c", day=date(2024, 3, 5))
        fourth = _add(storage, description="d", day=date(2024, 2, 28))

        rows = storage.get_paginated_expenses(OWNER_A, 10, 0)
        assert [r.id for r in rows] == [third.id, second.id, first.id, fourth.id]

    def test_limit_and_offset(self, storage):
        created = [_add(storage, description=str(i), day=date(2024, 3, i + 1)) for i in range(7)]
        newest_first = list(reversed(created))

        page_1 = storage.get_paginated_expenses(OWNER_A, 5, 0)
        page_2 = storage.get_paginated_expenses(OWNER_A, 5, 5)
        page_3 = storage.get_paginated_expenses(OWNER_A, 5, 10)

        assert [r.id for r in page_1] == [e.id for e in newest_first[:5]]
        assert [r.id for r in page_2] == [e.id for e in newest_first[5:]]
        assert page_3 == []

    def test_scoped_by_owner(self, storage):
        _add(storage, owner=OWNER_B)
        assert storage.get_paginated_expenses(OWNER_A, 5, 0) == []


class TestPeriodReport:
    def test_start_date_inclusive(self, storage):
        _add(storage, description="before", day=date(2024, 3, 9))
        on_start = _add(storage, description="on start", day=date(2024, 3, 10))
        later = _add(storage, description="later", day=date(2024, 3, 12))

        rows = storage.get_period_report(OWNER_A, date(2024, 3, 10))
        assert [r.id for r in rows] == [later.id, on_start.id]

    def test_end_date_inclusive(self, storage):
        _add(storage, description="jan", day=date(2024, 1, 31))
        feb_first = _add(storage, description="feb 1", day=date(2024, 2, 1))
        feb_last = _add(storage, description="feb 29", day=date(2024, 2, 29))
        _add(storage, description="mar", day=date(2024, 3, 1))

        rows = storage.get_period_report(OWNER_A, date(2024, 2, 1), date(2024, 2, 29))
        assert [r.id for r in rows] == [feb_last.id, feb_first.id]

    def test_scoped_by_owner(self, storage):
        _add(storage, owner=OWNER_B, day=date(2024, 3, 10))
        assert storage.get_period_report(OWNER_A, date(2024, 1, 1)) == []


def test_ping_reachable_backend(storage):
    storage.ping()


def test_sqlite_ping_fails_on_unusable_path(tmp_path):
    from harajat_bot.database import SqliteExpenseStorage

    db_path = tmp_path / "gone" / "expenses.db"
    db_path.parent.mkdir()
    sqlite = SqliteExpenseStorage(str(db_path))
    db_path.unlink()
    db_path.parent.rmdir()
    with pytest.raises(StorageError):
        sqlite.ping()
