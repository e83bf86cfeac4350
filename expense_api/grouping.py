# expense_api/grouping.py
"""
Day grouping for expense listings.

group_by_day() buckets records by the calendar day of ``date_of_expense``
and sums ``amount`` per day. Buckets come out in first-seen order, so a
descending input yields newest day first; the records inside a bucket are
always re-sorted newest first, whatever the input order was.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Tuple


@dataclass
class DayBucket:
    day: date
    total: Decimal = Decimal("0")
    records: List[Any] = field(default_factory=list)

    def add(self, record) -> None:
        self.records.append(record)
        self.total += Decimal(str(record.amount))


def day_key(value: datetime) -> date:
    # aware timestamps are read in UTC, naive ones as stored
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.date()


def group_by_day(expenses: Iterable) -> List[DayBucket]:
    buckets: Dict[date, DayBucket] = {}
    for e in expenses:
        key = day_key(e.date_of_expense)
        if key not in buckets:
            buckets[key] = DayBucket(day=key)
        buckets[key].add(e)

    out: List[DayBucket] = []
    for bucket in buckets.values():
        bucket.records.sort(key=lambda r: r.date_of_expense, reverse=True)
        out.append(bucket)
    return out


def _month_start(year: int, month: int) -> datetime:
    # month may be out of 1..12; roll it across years (13 -> next January)
    y, m = divmod(month - 1, 12)
    return datetime(year + y, m + 1, 1)


def month_window(month: int, year: int) -> Tuple[datetime, datetime]:
    """First instant of ``month`` and first instant of the month after it.

    Raises ValueError or OverflowError when the start is not representable;
    an unrepresentable end (after December 9999) is capped at ``datetime.max``.
    """
    start = _month_start(year, month)
    try:
        end = _month_start(year, month + 1)
    except (ValueError, OverflowError):
        end = datetime.max
    return start, end


def current_month_window(now: datetime | None = None) -> Tuple[datetime, datetime]:
    now = now or datetime.now()
    return month_window(now.month, now.year)
