"""Keyboard factory helpers."""

from datetime import date
from typing import List, Optional

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, KeyboardButton, ReplyKeyboardMarkup, ReplyKeyboardRemove

from ..constants import BTN_CANCEL, MAIN_MENU_LAYOUT
from ..report import Page
from .actions import (
    CancelDeleteAction,
    ChartAction,
    DeleteAction,
    ListAction,
    MenuAction,
    ReportAction,
    ReportKind,
    encode_action,
)


def _button(text: str, action) -> InlineKeyboardButton:
    return InlineKeyboardButton(text, callback_data=encode_action(action))


class KeyboardFactory:
    """Builds reply and inline keyboards."""

    def __init__(self, categories: List[str]):
        self.categories = categories

    @staticmethod
    def main_menu() -> ReplyKeyboardMarkup:
        keyboard = [[KeyboardButton(label) for label in row] for row in MAIN_MENU_LAYOUT]
        return ReplyKeyboardMarkup(keyboard, resize_keyboard=True)

    def categories_keyboard(self) -> ReplyKeyboardMarkup:
        keyboard = [[KeyboardButton(category)] for category in self.categories]
        keyboard.append([KeyboardButton(BTN_CANCEL)])
        return ReplyKeyboardMarkup(keyboard, resize_keyboard=True, one_time_keyboard=True)

    @staticmethod
    def remove() -> ReplyKeyboardRemove:
        return ReplyKeyboardRemove()

    @staticmethod
    def confirm_delete_keyboard(expense_id: str, owner_id: int) -> InlineKeyboardMarkup:
        keyboard = [[
            _button("✅ Yes, delete", DeleteAction(expense_id, owner_id)),
            _button("❌ Cancel", CancelDeleteAction(owner_id)),
        ]]
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def listing_keyboard(page: Page, owner_id: int) -> Optional[InlineKeyboardMarkup]:
        row = []
        if page.has_previous:
            row.append(_button("⬅️ Previous", ListAction(page.index - 1, owner_id)))
        if page.has_next:
            row.append(_button("Next ➡️", ListAction(page.index + 1, owner_id)))
        return InlineKeyboardMarkup([row]) if row else None

    @staticmethod
    def report_keyboard(
        page: Page,
        owner_id: int,
        kind: ReportKind,
        start: date,
        end: Optional[date] = None,
    ) -> InlineKeyboardMarkup:
        row = []
        if page.has_previous:
            row.append(_button("⬅️ Previous", ReportAction(page.index - 1, owner_id, kind, start, end)))
        if page.has_next:
            row.append(_button("Next ➡️", ReportAction(page.index + 1, owner_id, kind, start, end)))
        keyboard = [row] if row else []
        keyboard.append([_button("📊 Chart", ChartAction(owner_id, kind, start, end))])
        return InlineKeyboardMarkup(keyboard)

    @staticmethod
    def settings_keyboard() -> InlineKeyboardMarkup:
        keyboard = [
            [_button("🔄 Show category examples", MenuAction.EXAMPLES)],
            [_button("📊 Today's statistics", MenuAction.STATS_TODAY)],
            [_button("⬅️ Main menu", MenuAction.MAIN_MENU)],
        ]
        return InlineKeyboardMarkup(keyboard)


__all__ = ["KeyboardFactory"]
