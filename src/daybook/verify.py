"""
Calendar audit: resolve every specifier and report the ones that fail.
"""

import logging
from datetime import date

from rich.console import Console
from rich.table import Table

from daybook.daterange import CalendarExpander
from daybook.models import DateOverflow
from daybook.models import InvalidAnchorDate
from daybook.models import MalformedSpecifier
from daybook.models import SpecifierError

_logger = logging.getLogger(__name__)

# (error class, table title) in display order
_SECTIONS = (
    (MalformedSpecifier, "[bold red]MALFORMED[/] — specifier does not match YYYY-MM-DD grammar"),
    (InvalidAnchorDate, "[bold yellow]INVALID_ANCHOR[/] — anchor is not a real calendar date"),
    (DateOverflow, "[bold magenta]OVERFLOW[/] — end date outside the representable range"),
)


def group_errors(errors: list[SpecifierError]) -> dict[type, list[SpecifierError]]:
    grouped: dict[type, list[SpecifierError]] = {cls: [] for cls, _ in _SECTIONS}
    for err in errors:
        grouped.setdefault(type(err), []).append(err)
    return grouped


def run_check(calendar: dict[str, list], today: date, console: Console) -> bool:
    """Resolve every entry against today; print a report.

    Returns True when every specifier resolves.
    """
    result = CalendarExpander(today, fail_fast=False).run(calendar)
    total = result.stats.entries
    ok_count = len(result.entries)

    if not result.errors:
        console.print(
            f"[green]✓[/] All [bold]{total}[/bold] specifier(s) resolve "
            f"([bold]{result.stats.dates}[/bold] date(s) as of {today.isoformat()})."
        )
        return True

    grouped = group_errors(result.errors)
    for cls, title in _SECTIONS:
        errs = grouped.get(cls)
        if not errs:
            continue
        t = Table(title=title, show_header=True, header_style="bold")
        t.add_column("Specifier", overflow="fold", min_width=24)
        t.add_column("Events", justify="right", width=6)
        t.add_column("Detail", overflow="fold")
        for err in errs:
            t.add_row(err.specifier, str(len(calendar.get(err.specifier, []))), err.message)
        console.print(t)

    _logger.debug("check: %d/%d specifier(s) failed", len(result.errors), total)
    console.print(
        f"\n[bold]{ok_count}/{total}[/bold] specifier(s) OK"
        f"\n[bold red]{len(result.errors)}[/bold red] issue(s) found."
    )
    return False
