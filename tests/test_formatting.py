from datetime import date, datetime

import pytest

from harajat_bot.bot.actions import ReportKind
from harajat_bot.bot.formatting import format_amount, format_date, render_listing, render_report, report_title
from harajat_bot.models import Expense
from harajat_bot.report import ReportAggregator, paginate


@pytest.mark.parametrize(
    "amount,expected",
    [(15000, "15 000"), (15000.5, "15 000.5"), (0.01, "0.01"), (1234567.89, "1 234 567.89"), (400.0, "400")],
)
def test_format_amount(amount, expected):
    assert format_amount(amount) == expected


def test_format_date():
    assert format_date(date(2024, 3, 5)) == "05.03.2024"


def test_report_titles():
    start = date(2024, 2, 1)
    assert report_title(ReportKind.TODAY, start) == "📅 Today's expenses"
    assert report_title(ReportKind.WEEK, start) == "📊 Weekly report (7 days)"
    assert report_title(ReportKind.MONTH, start) == "📈 Monthly report (30 days)"
    assert report_title(ReportKind.MONTHLY, start, date(2024, 2, 29)) == "📅 Report for 2024-02"


def _expense(idx, category, amount):
    return Expense(str(idx), 1, category, f"item {idx}", amount, date(2024, 3, 10), datetime(2024, 3, 10, 9, 0, idx))


def test_render_report_sections():
    records = [_expense(1, "🍔 Food", 100.0), _expense(2, "🚕 Transport", 300.0)]
    summary = ReportAggregator(5).summarize(records)
    text = render_report("📅 Today's expenses", summary, "so'm")

    assert text.startswith("📅 Today's expenses\n\n📊 Statistics:")
    assert "🥈 Second: 🍔 Food (100 so'm)" in text
    assert "📋 By category:" in text
    assert "📅 Latest expenses (1/1):" in text
    assert "item 2" in text


def test_render_empty_report():
    summary = ReportAggregator(5).summarize([])
    assert render_report("T", summary, "so'm") == "T\n\n❗ No expenses in this period."


def test_render_listing_numbers_continue_across_pages():
    rows = [_expense(6, "🍔 Food", 10.0)]
    text = render_listing(rows, 6, paginate(6, 1, 5), "so'm")
    assert "📄 Page: 2/2" in text
    assert "6. 10.03.2024" in text
