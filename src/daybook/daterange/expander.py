"""
Lazy expansion of a resolved range into concrete dates.
"""

from collections.abc import Iterator
from datetime import date
from datetime import timedelta

from dateutil.relativedelta import relativedelta

from daybook.daterange.resolver import ResolvedRange
from daybook.daterange.resolver import StepUnit

_STEPS = {
    StepUnit.DAY: timedelta(days=1),
    StepUnit.MONTH: relativedelta(months=1),
    StepUnit.YEAR: relativedelta(years=1),
}


def expand(resolved: ResolvedRange) -> Iterator[date]:
    """Yield every date from anchor to end inclusive, one step unit apart.

    Steps are taken from the previous date, so a month-end anchor drifts
    once it is clamped (Jan 31 -> Feb 29 -> Mar 29).  Stepping past the last
    representable date ends the sequence.
    """
    if resolved.step is StepUnit.NONE:
        yield resolved.anchor
        return

    step = _STEPS[resolved.step]
    current = resolved.anchor
    while current <= resolved.end:
        yield current
        try:
            current = current + step
        except (OverflowError, ValueError):
            return
