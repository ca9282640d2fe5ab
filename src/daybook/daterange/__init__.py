"""
CalendarExpander — thin orchestrator over parse → resolve → expand.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from dataclasses import field
from datetime import date

from daybook.daterange.expander import expand
from daybook.daterange.parser import DateRangeSpecifier
from daybook.daterange.parser import Offset
from daybook.daterange.parser import OffsetKind
from daybook.daterange.parser import parse_specifier
from daybook.daterange.resolver import ResolvedRange
from daybook.daterange.resolver import StepUnit
from daybook.daterange.resolver import resolve
from daybook.models import ExpansionStats
from daybook.models import SpecifierError

__all__ = [
    "CalendarExpander",
    "DateRangeSpecifier",
    "ExpandedEntry",
    "ExpansionResult",
    "Offset",
    "OffsetKind",
    "ResolvedRange",
    "StepUnit",
    "expand",
    "iter_dates",
    "parse_specifier",
    "resolve",
]


def iter_dates(text: str, today: date) -> Iterator[date]:
    """Parse, resolve and expand a single specifier.

    Parse and resolve errors are raised eagerly, before the first date.
    """
    return expand(resolve(parse_specifier(text), today))


@dataclass
class ExpandedEntry:
    specifier: str
    events: list
    dates: list[date]


@dataclass
class ExpansionResult:
    entries: list[ExpandedEntry] = field(default_factory=list)
    errors: list[SpecifierError] = field(default_factory=list)
    stats: ExpansionStats = field(default_factory=ExpansionStats)


class CalendarExpander:
    """Expands every entry of a calendar against one reference date."""

    def __init__(self, today: date, fail_fast: bool = True):
        self.today = today
        self.fail_fast = fail_fast
        self.logger = logging.getLogger(__name__)

    def run(self, calendar: dict[str, list]) -> ExpansionResult:
        """Expand entries in document order.

        With fail_fast the first SpecifierError propagates; otherwise the
        entry is skipped and the error recorded on the result.
        """
        result = ExpansionResult()
        for text, events in calendar.items():
            result.stats.entries += 1
            try:
                dates = list(iter_dates(text, self.today))
            except SpecifierError as e:
                result.stats.errors += 1
                if self.fail_fast:
                    raise
                self.logger.error("Skipping %s (%s): %s", text, e.kind, e.message)
                result.errors.append(e)
                continue

            self.logger.debug("%s: %d date(s) from %s", text, len(dates), dates[0])
            result.stats.dates += len(dates)
            result.entries.append(ExpandedEntry(text, events, dates))

        self.logger.info(
            "Expanded %d entries into %d date(s)", len(result.entries), result.stats.dates
        )
        return result
