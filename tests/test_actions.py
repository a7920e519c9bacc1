"""Tests for inline button callback encoding."""

from datetime import date

import pytest

from harajat_bot.bot.actions import (
    CancelDeleteAction,
    ChartAction,
    DeleteAction,
    ListAction,
    MenuAction,
    ReportAction,
    ReportKind,
    decode_action,
    encode_action,
)


@pytest.mark.parametrize(
    "action",
    [
        DeleteAction(expense_id="42", owner_id=12345),
        DeleteAction(expense_id="AbCdEfGhIjKlMnOpQrSt", owner_id=-1001234567890),
        CancelDeleteAction(owner_id=12345),
        ListAction(page=3, owner_id=12345),
        ReportAction(page=1, owner_id=12345, kind=ReportKind.WEEK, start=date(2024, 3, 8)),
        ReportAction(
            page=0, owner_id=-1001234567890, kind=ReportKind.MONTHLY,
            start=date(2024, 2, 1), end=date(2024, 2, 29),
        ),
        ChartAction(owner_id=12345, kind=ReportKind.TODAY, start=date(2024, 3, 15)),
        MenuAction.MAIN_MENU,
    ],
)
def test_actions_survive_encoding(action):
    data = encode_action(action)
    assert len(data.encode("utf-8")) <= 64
    assert decode_action(data) == action


def test_delete_payload_format():
    assert encode_action(DeleteAction(expense_id="7", owner_id=5)) == "delete:7:5"


def test_oversized_payload_rejected():
    with pytest.raises(ValueError):
        encode_action(DeleteAction(expense_id="x" * 60, owner_id=12345))


@pytest.mark.parametrize(
    "data",
    [
        "",
        "unknown",
        "delete:1",
        "delete:1:notanumber",
        "all:-1:12345",
        "all:two:12345",
        "report:0:12345:not-a-date:week",
        "report:0:12345:2024-03-01:yearly",
        "chart:12345",
    ],
)
def test_malformed_payloads_decode_to_none(data):
    assert decode_action(data) is None
