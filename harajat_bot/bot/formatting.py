"""Message texts and number/date formatting."""

from datetime import date
from typing import Dict, Optional, Sequence

from ..models import Expense
from ..report import Page, ReportSummary
from .actions import ReportKind


def format_amount(amount: float) -> str:
    """``15000.5`` -> ``"15 000.5"``; at most two fractional digits, none if whole."""
    text = f"{amount:,.2f}".rstrip("0").rstrip(".")
    return text.replace(",", " ")


def format_date(value: date) -> str:
    return value.strftime("%d.%m.%Y")


def report_title(kind: ReportKind, start: date, end: Optional[date] = None) -> str:
    if kind is ReportKind.TODAY:
        return "📅 Today's expenses"
    if kind is ReportKind.WEEK:
        return "📊 Weekly report (7 days)"
    if kind is ReportKind.MONTH:
        return "📈 Monthly report (30 days)"
    return f"📅 Report for {start:%Y-%m}"


WELCOME_TEXT = (
    "👋 Hi! This is the expense tracking bot.\n\n"
    "Use the main menu to track and manage your expenses.\n\n"
    "ℹ️ How to use:\n"
    "1. Tap \"➕ Add expense\"\n"
    "2. Choose a category\n"
    "3. Write a short description (e.g. burger, taxi)\n"
    "4. Enter the amount (e.g. 25000)\n\n"
    "📊 Reports:\n"
    "• Today's expenses\n"
    "• Weekly report (7 days)\n"
    "• Monthly report (30 days)"
)

HELP_TEXT = (
    "ℹ️ HELP\n\n"
    "Main functions:\n"
    "➕ Add expense - record a new expense\n"
    "📊 Weekly report - report for the last 7 days\n"
    "📈 Monthly report - report for the last 30 days\n"
    "📅 Today's report - today's expenses\n"
    "🗑 Delete last expense - remove the most recent expense\n"
    "📋 All expenses - every expense you have recorded\n\n"
    "Extra commands:\n"
    "/add - add an expense\n"
    "/cancel - stop adding an expense\n"
    "/today - today's expenses\n"
    "/monthly [month] - report for a given month\n"
    "/delete_last - delete the last expense\n"
    "/all_expenses - all expenses\n\n"
    "Example: /monthly 2024-01"
)


def render_examples(category_examples: Dict[str, str]) -> str:
    text = "🔄 Category examples:\n\n"
    for category, example in category_examples.items():
        text += f"{category}:\n{example}\n\n"
    return text.rstrip() + "\n"


def render_saved(expense: Expense, currency: str) -> str:
    return (
        "✅ Expense saved!\n\n"
        f"🏷 Category: {expense.category}\n"
        f"📝 Description: {expense.description}\n"
        f"💰 Amount: {format_amount(expense.amount)} {currency}\n"
        f"📅 Date: {expense.date.isoformat()}"
    )


def render_delete_prompt(expense: Expense, currency: str) -> str:
    return (
        "🗑 Delete last expense\n\n"
        f"📅 Date: {format_date(expense.date)}\n"
        f"🏷 Category: {expense.category}\n"
        f"📝 Description: {expense.description}\n"
        f"💰 Amount: {format_amount(expense.amount)} {currency}\n\n"
        "Do you really want to delete it?"
    )


def _render_entry(index: int, expense: Expense, currency: str) -> str:
    return (
        f"{index}. {format_date(expense.date)}\n"
        f"   {expense.category}\n"
        f"   {expense.description}\n"
        f"   💰 {format_amount(expense.amount)} {currency}\n"
    )


def render_listing(expenses: Sequence[Expense], total_count: int, page: Page, currency: str) -> str:
    message = "📋 All expenses\n\n"
    message += f"📊 Total: {total_count} expense(s)\n"
    message += f"📄 Page: {page.index + 1}/{page.total_pages}\n\n"
    if not expenses:
        message += "❗ This page is empty."
        return message
    for i, expense in enumerate(expenses):
        message += _render_entry(page.offset + i + 1, expense, currency) + "\n"
    return message.rstrip() + "\n"


def render_report(title: str, summary: ReportSummary, currency: str) -> str:
    if summary.is_empty:
        return f"{title}\n\n❗ No expenses in this period."

    message = f"{title}\n\n"
    message += "📊 Statistics:\n"
    message += f"💰 Total: {format_amount(summary.grand_total)} {currency}\n"
    message += f"📝 Number of expenses: {summary.record_count}\n"

    medals = ("🥇 Top", "🥈 Second")
    for medal, entry in zip(medals, summary.top):
        message += f"{medal}: {entry.category} ({format_amount(entry.total)} {currency})\n"

    message += "\n📋 By category:\n"
    for i, entry in enumerate(summary.categories, start=1):
        message += f"{i}. {entry.category} — {format_amount(entry.total)} {currency} ({entry.percentage:.1f}%)\n"

    page = summary.page
    message += f"\n📅 Latest expenses ({page.index + 1}/{page.total_pages}):\n"
    if not summary.page_records:
        message += "\n❗ This page is empty.\n"
    for i, expense in enumerate(summary.page_records):
        message += "\n" + _render_entry(page.offset + i + 1, expense, currency)
    return message


__all__ = [
    "HELP_TEXT",
    "WELCOME_TEXT",
    "format_amount",
    "format_date",
    "render_delete_prompt",
    "render_examples",
    "render_listing",
    "render_report",
    "render_saved",
    "report_title",
]
