"""Category totals, rankings and paging for period reports."""

import math
from collections import OrderedDict
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Sequence, Tuple

from .models import Expense

_CENT = Decimal("0.01")
_TENTH = Decimal("0.1")


@dataclass(frozen=True)
class CategoryTotal:
    category: str
    total: float
    percentage: float


@dataclass(frozen=True)
class Page:
    index: int
    total_pages: int
    offset: int

    @property
    def has_previous(self) -> bool:
        return self.index > 0

    @property
    def has_next(self) -> bool:
        return self.index < self.total_pages - 1


@dataclass(frozen=True)
class ReportSummary:
    grand_total: float
    record_count: int
    categories: List[CategoryTotal]
    page: Page
    page_records: List[Expense] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.record_count == 0

    @property
    def top(self) -> List[CategoryTotal]:
        """The one or two biggest categories."""
        return self.categories[:2]


def _to_decimal(amount) -> Decimal:
    return Decimal(str(amount))


def paginate(total_count: int, page: int, page_size: int) -> Page:
    """Page ``page`` of ``total_count`` items. Out-of-range pages are allowed."""
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    if page < 0:
        raise ValueError("page must not be negative")
    total_pages = math.ceil(total_count / page_size)
    return Page(index=page, total_pages=total_pages, offset=page * page_size)


def daily_totals(records: Sequence[Expense]) -> List[Tuple[str, float]]:
    """Per-day spending, oldest day first (chart input)."""
    per_day = {}
    for record in records:
        key = record.date.isoformat()
        per_day[key] = per_day.get(key, Decimal(0)) + _to_decimal(record.amount)
    return [(day, float(total.quantize(_CENT))) for day, total in sorted(per_day.items())]


class ReportAggregator:
    """Turns an ordered list of records into a report summary."""

    def __init__(self, page_size: int):
        self.page_size = page_size

    @staticmethod
    def category_totals(records: Sequence[Expense]) -> "OrderedDict[str, Decimal]":
        totals: "OrderedDict[str, Decimal]" = OrderedDict()
        for record in records:
            totals[record.category] = totals.get(record.category, Decimal(0)) + _to_decimal(record.amount)
        return totals

    @staticmethod
    def _percentage(part: Decimal, whole: Decimal) -> float:
        if not whole:
            return 0.0
        return float((part / whole * 100).quantize(_TENTH, rounding=ROUND_HALF_UP))

    def summarize(self, records: Sequence[Expense], page: int = 0) -> ReportSummary:
        page_info = paginate(len(records), page, self.page_size)
        if not records:
            return ReportSummary(grand_total=0.0, record_count=0, categories=[], page=page_info)

        totals = self.category_totals(records)
        grand_total = sum(totals.values(), Decimal(0))

        # sorted() is stable, so equal totals keep first-seen order
        ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
        categories = [
            CategoryTotal(
                category=category,
                total=float(total.quantize(_CENT)),
                percentage=self._percentage(total, grand_total),
            )
            for category, total in ranked
        ]

        start = page_info.offset
        return ReportSummary(
            grand_total=float(grand_total.quantize(_CENT)),
            record_count=len(records),
            categories=categories,
            page=page_info,
            page_records=list(records[start:start + self.page_size]),
        )


__all__ = ["CategoryTotal", "Page", "ReportSummary", "ReportAggregator", "paginate", "daily_totals"]
