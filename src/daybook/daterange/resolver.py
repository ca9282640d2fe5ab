"""
Turns a parsed specifier into a concrete date range relative to "today".
"""

import enum
from dataclasses import dataclass
from datetime import date
from datetime import timedelta

from dateutil.relativedelta import relativedelta

from daybook.daterange.parser import DateRangeSpecifier
from daybook.daterange.parser import Offset
from daybook.daterange.parser import OffsetKind
from daybook.models import DateOverflow


class StepUnit(enum.Enum):
    NONE = "none"
    DAY = "day"
    MONTH = "month"
    YEAR = "year"


@dataclass(frozen=True)
class ResolvedRange:
    """Anchor, inclusive end date and the unit used to walk between them."""

    anchor: date
    end: date
    step: StepUnit
    years: int = 0
    months: int = 0
    days: int = 0


def _resolve_offset(offset: Offset, anchor_part: int, today_part: int) -> int:
    """Resolve one offset to a non-negative count.

    Auto compares a single date component (year, month or day-of-month), not
    the full interval between the two dates.
    """
    if offset.kind is OffsetKind.ABSENT:
        return 0
    if offset.kind is OffsetKind.EXPLICIT:
        return offset.value
    return max(0, today_part - anchor_part)


def add_months(d: date, months: int) -> date:
    """Add months to d, clamping to the last day of the target month.

    Raises OverflowError or ValueError when the result is out of range.
    """
    return d + relativedelta(months=months)


def _select_step(years: int, months: int, days: int) -> StepUnit:
    if days > 0:
        return StepUnit.DAY
    if months > 0:
        return StepUnit.MONTH
    if years > 0:
        return StepUnit.YEAR
    return StepUnit.NONE


def resolve(spec: DateRangeSpecifier, today: date) -> ResolvedRange:
    """
    Resolve a parsed specifier against today.

    The end date is built in a fixed order: years, then months, then days.
    When the specifier has a years offset, the months step adds the years
    count rather than the months count.

    Raises:
        DateOverflow: the end date is outside the range of ``datetime.date``.
    """
    anchor = spec.anchor
    years = _resolve_offset(spec.years, anchor.year, today.year)
    months = _resolve_offset(spec.months, anchor.month, today.month)
    days = _resolve_offset(spec.days, anchor.day, today.day)

    end = anchor
    try:
        if years > 0:
            end = add_months(end, 12 * years)
        if months > 0:
            end = add_months(end, years if spec.years.is_present else months)
        if days > 0:
            end = end + timedelta(days=days)
    except (OverflowError, ValueError) as e:
        raise DateOverflow(spec.text, f"end date out of range ({e})") from None

    return ResolvedRange(
        anchor=anchor,
        end=end,
        step=_select_step(years, months, days),
        years=years,
        months=months,
        days=days,
    )
