"""
Flat-JSON persistence for the calendar and its filtered exports.
"""

import json
import logging
from pathlib import Path

from daybook.events import EVENT_KINDS
from daybook.events import Event
from daybook.events import decode_event
from daybook.events import decode_payload
from daybook.events import encode_event
from daybook.models import CalendarFormatError

logger = logging.getLogger(__name__)

Calendar = dict[str, list[Event]]

# Filtered export file name per event kind.
EXPORT_FILES = {
    "birthday": "birthdays.json",
    "comp": "comps.json",
    "transit": "trans.json",
}


def _sorted(calendar: dict) -> dict:
    return {key: calendar[key] for key in sorted(calendar)}


def _write_json(data, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(data, fh, indent=2, ensure_ascii=False)
        fh.write("\n")


def decode_calendar(data) -> Calendar:
    """Build a Calendar from already-parsed JSON data."""
    if not isinstance(data, dict):
        raise CalendarFormatError(f"calendar must be a JSON object, got {type(data).__name__}")
    calendar: Calendar = {}
    for specifier, events in data.items():
        if not isinstance(events, list):
            raise CalendarFormatError("events must be a JSON array", specifier)
        calendar[specifier] = [decode_event(obj, specifier) for obj in events]
    return _sorted(calendar)


def encode_calendar(calendar: Calendar) -> dict:
    return {
        specifier: [encode_event(e) for e in events]
        for specifier, events in _sorted(calendar).items()
    }


def load_calendar(path: Path) -> Calendar:
    """
    Read the calendar JSON file.

    Raises:
        FileNotFoundError: path does not exist.
        CalendarFormatError: the file is unreadable, not UTF-8, not valid JSON,
            or has the wrong shape.
    """
    try:
        with path.open(encoding="utf-8") as fh:
            data = json.load(fh)
    except FileNotFoundError:
        raise
    except json.JSONDecodeError as e:
        raise CalendarFormatError(f"{path}: invalid JSON ({e})") from None
    except (OSError, UnicodeDecodeError) as e:
        raise CalendarFormatError(f"{path}: {e}") from None
    calendar = decode_calendar(data)
    logger.debug("Loaded %d calendar entries from %s", len(calendar), path)
    return calendar


def save_calendar(calendar: Calendar, path: Path) -> None:
    """Write the calendar back, keys sorted so a reload yields the same mapping."""
    _write_json(encode_calendar(calendar), path)
    logger.debug("Wrote %d calendar entries to %s", len(calendar), path)


def filter_calendar(calendar: Calendar, kind: str) -> dict[str, list]:
    """Keep only the payloads of one event kind; drop entries left empty."""
    if kind not in EVENT_KINDS:
        raise ValueError(f"unknown event kind {kind!r}")
    out = {}
    for specifier, events in _sorted(calendar).items():
        values = [e.payload() for e in events if e.kind == kind]
        if values:
            out[specifier] = values
    return out


def write_exports(calendar: Calendar, directory: Path) -> dict[str, Path]:
    """Write one filtered export per event kind and return their paths."""
    written = {}
    for kind, filename in EXPORT_FILES.items():
        path = directory / filename
        data = filter_calendar(calendar, kind)
        _write_json(data, path)
        logger.debug("Wrote %d %s entries to %s", len(data), kind, path)
        written[kind] = path
    return written


def merge_exports(parts: dict[str, dict[str, list]]) -> Calendar:
    """Rebuild a Calendar from filtered exports.

    Within an entry, events are grouped in kind order: birthdays, comps,
    then transit legs.
    """
    merged: Calendar = {}
    for kind in EVENT_KINDS:
        for specifier, payloads in parts.get(kind, {}).items():
            merged.setdefault(specifier, []).extend(
                decode_payload(kind, payload, specifier) for payload in payloads
            )
    return _sorted(merged)


def load_exports(directory: Path) -> dict[str, dict[str, list]]:
    parts = {}
    for kind, filename in EXPORT_FILES.items():
        path = directory / filename
        if path.exists():
            with path.open(encoding="utf-8") as fh:
                parts[kind] = json.load(fh)
    return parts
