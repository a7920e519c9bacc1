"""Dummy Telegram objects and storage doubles shared by the tests."""

from datetime import date, datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

from harajat_bot.database import ExpenseStorage
from harajat_bot.errors import StorageError

CHAT_ID = 12345
OTHER_CHAT_ID = 67890
TODAY = date(2024, 3, 15)

class TickingClock:
    """Returns a strictly increasing timestamp on every call."""

    def __init__(self, start=datetime(2024, 3, 15, 9, 0, tzinfo=timezone.utc)):
        self._now = start

    def __call__(self):
        self._now += timedelta(seconds=1)
        return self._now


class DummyMessage:
    """Mock message object for testing."""
    def __init__(self, text=None, chat_id=CHAT_ID, message_id=1):
        self.text = text
        self.texts = []
        self.chat_id = chat_id
        self.message_id = message_id
        self.deleted = False

    async def reply_text(self, text, **kwargs):
        self.texts.append({"text": text, "kwargs": kwargs})
        return MagicMock()

    async def delete(self):
        self.deleted = True
        return True


class DummyChat:
    """Mock chat object."""
    def __init__(self, chat_id=CHAT_ID):
        self.id = chat_id


class DummyUpdate:
    """Mock update object for a text message."""
    def __init__(self, text=None, chat_id=CHAT_ID):
        self.message = DummyMessage(text, chat_id)
        self.effective_chat = DummyChat(chat_id)
        self.callback_query = None


class DummyCallbackQuery:
    """Mock callback query object."""
    def __init__(self, data, chat_id=CHAT_ID, message_id=7):
        self.data = data
        self.message = DummyMessage(chat_id=chat_id, message_id=message_id)
        self.answered = False

    async def answer(self):
        self.answered = True

    async def edit_message_text(self, text, **kwargs):
        self.message.texts.append({"text": text, "kwargs": kwargs})


class DummyCallbackUpdate:
    def __init__(self, data, chat_id=CHAT_ID):
        self.callback_query = DummyCallbackQuery(data, chat_id)
        self.effective_chat = DummyChat(chat_id)
        self.message = None


class DummyContext:
    """Mock context object for testing."""
    def __init__(self, args=None):
        self.args = args or []
        self.error = None
        self.bot = MagicMock()
        self.bot.send_message = AsyncMock()
        self.bot.send_photo = AsyncMock()

    def sent_texts(self):
        return [call.kwargs["text"] for call in self.bot.send_message.call_args_list]


class FailingStorage(ExpenseStorage):
    """Every call fails the way an unreachable backend would."""

    name = "failing"

    def _fail(self, *args, **kwargs):
        raise StorageError("backend is down")

    add_expense = _fail
    get_last_expense = _fail
    delete_expense = _fail
    get_expenses_count = _fail
    get_paginated_expenses = _fail
    get_period_report = _fail
    ping = _fail
