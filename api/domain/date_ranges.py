# SPDX-License-Identifier: Apache-2.0

"""
Reporting period arithmetic.

Pure functions mapping named periods (``7d``, ``6m``, ``all``...) to concrete
date ranges, computing the prior comparison period and approximating how many
times a recurring charge falls inside a window. Also holds the pt-BR money
formatting used by the dashboard comparisons.
"""

import calendar
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Union

from models.enums import BillingCycle, Period

EPOCH = datetime(1970, 1, 1)

# Token -> (days, months); months are calendar months with day clamping
_PERIOD_SPANS = {
    Period.ONE_DAY.value: (1, 0),
    Period.SEVEN_DAYS.value: (7, 0),
    Period.FOURTEEN_DAYS.value: (14, 0),
    Period.THIRTY_DAYS.value: (30, 0),
    Period.NINETY_DAYS.value: (90, 0),
    Period.ONE_MONTH.value: (0, 1),
    Period.THREE_MONTHS.value: (0, 3),
    Period.SIX_MONTHS.value: (0, 6),
    Period.ONE_YEAR.value: (0, 12),
}

DEFAULT_SPAN = _PERIOD_SPANS[Period.THIRTY_DAYS.value]

NO_CHANGE_THRESHOLD = 0.5


@dataclass(frozen=True)
class DateRange:
    """Date interval; both bounds are None for the "all time" period."""
    start: Optional[datetime]
    end: Optional[datetime]

    @property
    def is_unbounded(self) -> bool:
        return self.start is None or self.end is None

    @property
    def length(self) -> Optional[timedelta]:
        if self.is_unbounded:
            return None
        return self.end - self.start


@dataclass(frozen=True)
class Comparison:
    """Period-over-period change of one metric."""
    previous: float
    percent_change: float
    direction: str
    tone: str
    text: str


def add_months(value: datetime, months: int) -> datetime:
    """Shift by calendar months, clamping the day to the target month's length."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def _token(period: Union[Period, str, None]) -> str:
    return getattr(period, "value", period) or ""


def _shift(now: datetime, span, direction: int) -> datetime:
    days, months = span
    if months:
        return add_months(now, direction * months)
    return now + timedelta(days=direction * days)


def calculate_date_range(period: Union[Period, str], now: Optional[datetime] = None) -> DateRange:
    """
    Resolve a period token into a backwards window ending now.

    Args:
        period: Period token, e.g. ``7d`` or ``6m``
        now: Reference instant, defaults to the current UTC time

    Returns:
        DateRange with ``start <= end``, or an unbounded range for ``all``.
        Unknown tokens fall back to the last 30 days.
    """
    now = now or datetime.utcnow()
    token = _token(period)

    if token == Period.ALL.value:
        return DateRange(None, None)
    if token == Period.CUSTOM.value:
        return DateRange(now, now)

    span = _PERIOD_SPANS.get(token, DEFAULT_SPAN)
    return DateRange(_shift(now, span, -1), now)


def calculate_future_date_range(period: Union[Period, str], now: Optional[datetime] = None) -> DateRange:
    """Resolve a period token into a forward window starting now (payables view)."""
    now = now or datetime.utcnow()
    token = _token(period)

    if token == Period.ALL.value:
        return DateRange(None, None)
    if token == Period.CUSTOM.value:
        return DateRange(now, now)

    span = _PERIOD_SPANS.get(token, DEFAULT_SPAN)
    return DateRange(now, _shift(now, span, 1))


def calculate_comparison_range(date_range: DateRange) -> DateRange:
    """
    Return the interval of identical length immediately preceding ``date_range``.

    An unbounded range has no prior period, so the result is unbounded too.
    """
    if date_range.is_unbounded:
        return DateRange(None, None)

    return DateRange(date_range.start - date_range.length, date_range.start)


def get_date_range_filter(period: Union[Period, str], now: Optional[datetime] = None) -> DateRange:
    """Concrete query bounds for a period; ``all`` spans from the epoch to now."""
    now = now or datetime.utcnow()
    date_range = calculate_date_range(period, now)
    return DateRange(date_range.start or EPOCH, date_range.end or now)


def count_recurrence_in_period(
    billing_cycle: Union[BillingCycle, str],
    start: Optional[datetime],
    end: Optional[datetime]
) -> int:
    """
    Count how many monthly or annual anchors fall inside ``[start, end]``.

    Both boundary months (or years) are counted, so January 1st to March 1st
    holds three monthly anchors. One-time charges and unbounded windows count
    once; an inverted window holds none.
    """
    if start is None or end is None:
        return 1

    cycle = getattr(billing_cycle, "value", billing_cycle)
    if cycle not in (BillingCycle.MONTHLY.value, BillingCycle.ANNUAL.value):
        return 1

    if start > end:
        return 0

    if cycle == BillingCycle.MONTHLY.value:
        return (end.year - start.year) * 12 + (end.month - start.month) + 1

    return end.year - start.year + 1


def format_brl(value: float) -> str:
    """Format a value as Brazilian reais, e.g. ``R$ 1.234,56``."""
    sign = "-" if value < 0 else ""
    integer, cents = f"{abs(value):,.2f}".split(".")
    return f"{sign}R$ {integer.replace(',', '.')},{cents}"


def format_comparison(current: float, previous: float, is_expense: bool = False) -> Comparison:
    """
    Describe the change of a metric against the prior period.

    Changes below half a percent read as "no change". For revenue an increase
    is positive and a decrease negative; for expenses an increase is only a
    warning and a decrease is positive. A zero previous value yields a 0%
    change.
    """
    diff = current - previous
    percent_change = 0.0 if previous == 0 else (diff / previous) * 100

    if abs(percent_change) < NO_CHANGE_THRESHOLD:
        return Comparison(
            previous=previous,
            percent_change=percent_change,
            direction="flat",
            tone="neutral",
            text="→ Sem mudança vs período anterior"
        )

    increased = diff > 0
    if is_expense:
        tone = "warning" if increased else "positive"
    else:
        tone = "positive" if increased else "negative"

    icon = "↑" if increased else "↓"
    sign = "+" if increased else ""

    return Comparison(
        previous=previous,
        percent_change=round(percent_change, 1),
        direction="up" if increased else "down",
        tone=tone,
        text=(
            f"{icon} {sign}{abs(percent_change):.1f}% vs período anterior "
            f"({sign}{format_brl(abs(diff))})"
        )
    )
