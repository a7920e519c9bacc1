"""Typed inline-button actions and their ``callback_data`` encoding.

Telegram limits ``callback_data`` to 64 bytes, so actions are serialized as
short colon-separated strings only when a keyboard is built, and parsed back
into dataclasses as soon as a callback query arrives.
"""

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional, Union

logger = logging.getLogger(__name__)

MAX_CALLBACK_BYTES = 64


class ReportKind(Enum):
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    MONTHLY = "monthly"


@dataclass(frozen=True)
class DeleteAction:
    expense_id: str
    owner_id: int

    def encode(self) -> str:
        return f"delete:{self.expense_id}:{self.owner_id}"


@dataclass(frozen=True)
class CancelDeleteAction:
    owner_id: int

    def encode(self) -> str:
        return f"cancel_delete:{self.owner_id}"


@dataclass(frozen=True)
class ListAction:
    page: int
    owner_id: int

    def encode(self) -> str:
        return f"all:{self.page}:{self.owner_id}"


@dataclass(frozen=True)
class ReportAction:
    page: int
    owner_id: int
    kind: ReportKind
    start: date
    end: Optional[date] = None

    def encode(self) -> str:
        data = f"report:{self.page}:{self.owner_id}:{self.start.isoformat()}:{self.kind.value}"
        if self.end is not None:
            data += f":{self.end.isoformat()}"
        return data


@dataclass(frozen=True)
class ChartAction:
    owner_id: int
    kind: ReportKind
    start: date
    end: Optional[date] = None

    def encode(self) -> str:
        data = f"chart:{self.owner_id}:{self.start.isoformat()}:{self.kind.value}"
        if self.end is not None:
            data += f":{self.end.isoformat()}"
        return data


class MenuAction(Enum):
    EXAMPLES = "examples"
    STATS_TODAY = "stats_today"
    MAIN_MENU = "main_menu"

    def encode(self) -> str:
        return self.value


Action = Union[DeleteAction, CancelDeleteAction, ListAction, ReportAction, ChartAction, MenuAction]


def encode_action(action: Action) -> str:
    data = action.encode()
    if len(data.encode("utf-8")) > MAX_CALLBACK_BYTES:
        raise ValueError(f"callback_data too long ({len(data)} chars): {data}")
    return data


def _page(raw: str) -> int:
    page = int(raw)
    if page < 0:
        raise ValueError("negative page")
    return page


def _optional_date(parts, index) -> Optional[date]:
    if len(parts) > index and parts[index]:
        return date.fromisoformat(parts[index])
    return None


def decode_action(data: str) -> Optional[Action]:
    """Parse ``callback_data``. Unknown or malformed payloads return None."""
    if not data:
        return None
    try:
        return MenuAction(data)
    except ValueError:
        pass

    parts = data.split(":")
    tag = parts[0]
    try:
        if tag == "delete" and len(parts) == 3:
            return DeleteAction(expense_id=parts[1], owner_id=int(parts[2]))
        if tag == "cancel_delete" and len(parts) == 2:
            return CancelDeleteAction(owner_id=int(parts[1]))
        if tag == "all" and len(parts) == 3:
            return ListAction(page=_page(parts[1]), owner_id=int(parts[2]))
        if tag == "report" and len(parts) in (5, 6):
            return ReportAction(
                page=_page(parts[1]),
                owner_id=int(parts[2]),
                start=date.fromisoformat(parts[3]),
                kind=ReportKind(parts[4]),
                end=_optional_date(parts, 5),
            )
        if tag == "chart" and len(parts) in (4, 5):
            return ChartAction(
                owner_id=int(parts[1]),
                start=date.fromisoformat(parts[2]),
                kind=ReportKind(parts[3]),
                end=_optional_date(parts, 4),
            )
    except ValueError as exc:
        logger.warning("Malformed callback data %r: %s", data, exc)
        return None

    logger.debug("Unknown callback data %r", data)
    return None


__all__ = [
    "Action",
    "CancelDeleteAction",
    "ChartAction",
    "DeleteAction",
    "ListAction",
    "MenuAction",
    "ReportAction",
    "ReportKind",
    "decode_action",
    "encode_action",
]
