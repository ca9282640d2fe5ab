"""
Static HTML rendering of expanded calendar entries.

Layout under the output directory::

    index.html              every day with events, oldest first
    YYYY/MM/DD/index.html   one page per day
"""

import logging
from datetime import date
from html import escape
from pathlib import Path

from daybook.daterange import ExpandedEntry

logger = logging.getLogger(__name__)

_PAGE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title}</title>
<style>
.today {{ font-weight: bold; }}
.specifier {{ color: #777; font-family: monospace; }}
</style>
</head>
<body>
<h1>{title}</h1>
{body}
</body>
</html>
"""


def day_path(d: date) -> Path:
    """Relative directory for a day's page, zero-padded year/month/day."""
    return Path(f"{d.year:04d}") / f"{d.month:02d}" / f"{d.day:02d}"


def group_by_day(entries: list[ExpandedEntry]) -> dict[date, list[tuple[str, object]]]:
    """Map each day to its (specifier, event) pairs in document order."""
    days: dict[date, list[tuple[str, object]]] = {}
    for entry in entries:
        for d in entry.dates:
            bucket = days.setdefault(d, [])
            bucket.extend((entry.specifier, event) for event in entry.events)
    return days


def _event_list(items: list[tuple[str, object]]) -> str:
    lines = ["<ul>"]
    for specifier, event in items:
        lines.append(
            f'<li class="{escape(event.kind)}">{escape(event.describe())} '
            f'<span class="specifier">{escape(specifier)}</span></li>'
        )
    lines.append("</ul>")
    return "\n".join(lines)


def render_day(d: date, items: list[tuple[str, object]]) -> str:
    body = _event_list(items) + '\n<p><a href="../../../">All days</a></p>'
    return _PAGE.format(title=escape(f"{d:%A} {d.day} {d:%B %Y}"), body=body)


def render_index(days: dict[date, list[tuple[str, object]]], today: date) -> str:
    sections = []
    for d in sorted(days):
        cls = ' class="today"' if d == today else ""
        link = day_path(d).as_posix() + "/"
        sections.append(
            f'<h2{cls}><a href="{link}"><time datetime="{d.isoformat()}">'
            f"{d.isoformat()}</time></a></h2>\n{_event_list(days[d])}"
        )
    if not sections:
        sections.append("<p>No events.</p>")
    return _PAGE.format(title="Calendar", body="\n".join(sections))


def render_site(entries: list[ExpandedEntry], output_dir: Path, today: date) -> int:
    """Write one page per day plus the index; return the number of pages written."""
    days = group_by_day(entries)
    output_dir.mkdir(parents=True, exist_ok=True)

    for d, items in days.items():
        page_dir = output_dir / day_path(d)
        page_dir.mkdir(parents=True, exist_ok=True)
        (page_dir / "index.html").write_text(render_day(d, items), encoding="utf-8")

    (output_dir / "index.html").write_text(render_index(days, today), encoding="utf-8")
    logger.info("Rendered %d day page(s) into %s", len(days), output_dir)
    return len(days) + 1
