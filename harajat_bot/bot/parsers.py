"""Parsing helpers for user-typed amounts, descriptions and months."""

import calendar
import re
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Tuple

from ..errors import ValidationError

_WHITESPACE = re.compile(r"\s")
_NOT_AMOUNT_CHAR = re.compile(r"[^0-9.]")
_MONTH_ARG = re.compile(r"^[0-9]{4}-[0-9]{2}$")
_CENT = Decimal("0.01")


def format_limit(value) -> str:
    return f"{value:,}".replace(",", " ")


def parse_amount(text: str, max_amount) -> float:
    """Normalise a typed amount like ``"15 000"``, ``"12,5"`` or ``"1.000.50"``.

    Whitespace is dropped, the first comma becomes a decimal point, every
    other non-digit is removed, and when several points remain only the last
    one is kept. The result is rounded to two fractional digits.
    """
    if not text or not isinstance(text, str):
        raise ValidationError("Amount is missing")

    clean = _WHITESPACE.sub("", text)
    if clean.startswith("-"):
        raise ValidationError("Amount must be greater than 0")
    clean = clean.replace(",", ".", 1)
    clean = _NOT_AMOUNT_CHAR.sub("", clean)

    if clean.count(".") > 1:
        last_dot = clean.rfind(".")
        clean = clean[:last_dot].replace(".", "") + clean[last_dot:]

    if not clean or clean == ".":
        raise ValidationError("Amount has an invalid format")

    try:
        amount = Decimal(clean)
    except InvalidOperation as exc:
        raise ValidationError("Amount must be a number") from exc

    if amount <= 0:
        raise ValidationError("Amount must be greater than 0")
    if amount > Decimal(max_amount):
        raise ValidationError(f"Amount must not exceed {format_limit(max_amount)}")

    rounded = amount.quantize(_CENT, rounding=ROUND_HALF_UP)
    if rounded <= 0:
        raise ValidationError("Amount must be greater than 0")
    return float(rounded)


def validate_description(text: str, max_length: int) -> str:
    description = (text or "").strip()
    if not description:
        raise ValidationError("Description is empty")
    if len(description) > max_length:
        raise ValidationError(f"Description is too long. Maximum is {max_length} characters")
    return description


def parse_month(arg: str) -> Tuple[date, date]:
    """``"2024-02"`` -> (2024-02-01, 2024-02-29)."""
    if not arg or not _MONTH_ARG.match(arg):
        raise ValidationError("Invalid format. Usage: /monthly 2024-01")
    year, month = (int(part) for part in arg.split("-"))
    if not 1 <= month <= 12 or year < 1:
        raise ValidationError("Invalid format. Usage: /monthly 2024-01")
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


__all__ = ["parse_amount", "validate_description", "parse_month", "format_limit"]
