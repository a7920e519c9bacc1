import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from harajat_bot.bot import ExpenseBot
from harajat_bot.config import BotConfig
from harajat_bot.database import SqliteExpenseStorage
from tests.helpers import TODAY, FailingStorage, TickingClock


# ============== Shared Fixtures ==============


@pytest.fixture()
def config():
    return BotConfig(token="123:TEST")


@pytest.fixture()
def sqlite_storage(tmp_path):
    """A fresh SQLite backend in a temp directory."""
    return SqliteExpenseStorage(str(tmp_path / "test_expenses.db"), clock=TickingClock())


@pytest.fixture()
def mock_firestore_client():
    """Create a fresh in-memory MockFirestoreClient."""
    from tests.mock_firestore import MockFirestoreClient
    return MockFirestoreClient()


@pytest.fixture()
def firestore_storage(mock_firestore_client):
    """A FirestoreExpenseStorage backed by the in-memory mock."""
    from harajat_bot.database.firestore import FirestoreExpenseStorage
    return FirestoreExpenseStorage(db_client=mock_firestore_client, clock=TickingClock())


@pytest.fixture(params=["sqlite", "firestore"])
def storage(request):
    """Each storage contract test runs against both backends."""
    return request.getfixturevalue(f"{request.param}_storage")


@pytest.fixture()
def bot_instance(config, sqlite_storage):
    """ExpenseBot wired to SQLite with a fixed 'today'."""
    return ExpenseBot(config, sqlite_storage, today=lambda: TODAY)


@pytest.fixture()
def failing_bot(config):
    return ExpenseBot(config, FailingStorage(), today=lambda: TODAY)
