"""Startup backend selection: Firestore when reachable, SQLite otherwise."""

from dataclasses import replace

from harajat_bot.database import SqliteExpenseStorage, create_storage, select_storage
from harajat_bot.database.firestore import FirestoreExpenseStorage


class BrokenFirestoreClient:
    def collection(self, name):
        raise RuntimeError("could not load default credentials")


def _config(config, tmp_path, **overrides):
    return replace(config, sqlite_path=str(tmp_path / "fallback.db"), **overrides)


def test_reachable_firestore_is_used(config, tmp_path, mock_firestore_client):
    storage = create_storage(_config(config, tmp_path), firestore_client=mock_firestore_client)
    assert isinstance(storage, FirestoreExpenseStorage)
    assert storage.name == "firestore"


def test_unreachable_firestore_falls_back_to_sqlite(config, tmp_path, caplog):
    storage = create_storage(_config(config, tmp_path), firestore_client=BrokenFirestoreClient())
    assert isinstance(storage, SqliteExpenseStorage)
    assert storage.db_path == str(tmp_path / "fallback.db")
    assert "falling back to SQLite" in caplog.text


def test_firestore_disabled(config, tmp_path, mock_firestore_client):
    storage = create_storage(_config(config, tmp_path, use_firestore=False), firestore_client=mock_firestore_client)
    assert isinstance(storage, SqliteExpenseStorage)


def test_fallback_storage_is_usable(config, tmp_path):
    from datetime import date

    storage = create_storage(_config(config, tmp_path), firestore_client=BrokenFirestoreClient())
    storage.add_expense(1, "🍔 Food", "burger", 100.0, date(2024, 3, 15))
    assert storage.get_expenses_count(1) == 1


def test_selection_records_reason(config, tmp_path, mock_firestore_client):
    chosen = select_storage(_config(config, tmp_path), firestore_client=mock_firestore_client)
    assert chosen.reason == "Firestore reachable"
    assert not chosen.is_fallback

    fallback = select_storage(_config(config, tmp_path), firestore_client=BrokenFirestoreClient())
    assert fallback.is_fallback
    assert fallback.reason.startswith("Firestore unavailable:")
    assert "could not load default credentials" in fallback.reason

    disabled = select_storage(_config(config, tmp_path, use_firestore=False))
    assert disabled.is_fallback
    assert disabled.reason == "USE_FIRESTORE is disabled"
