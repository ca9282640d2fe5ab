"""
Pure data models and exceptions — no filesystem or CLI imports.
"""

from dataclasses import dataclass
from pathlib import Path

DEFAULT_CONFIG = Path.home() / ".config/daybook.conf"
DEFAULT_EVENTS_PATH = Path("docs/events.json")
DEFAULT_OUTPUT_DIR = Path("docs")


class DaybookError(Exception):
    """Base exception for daybook errors."""

    pass


class CalendarFormatError(DaybookError):
    """The calendar JSON does not have the expected shape."""

    def __init__(self, message: str, specifier: str | None = None):
        self.specifier = specifier
        if specifier is not None:
            message = f"{specifier!r}: {message}"
        super().__init__(message)


class SpecifierError(DaybookError):
    """A date-range specifier could not be turned into dates.

    Every subclass carries the offending specifier text so callers can
    report which calendar entry failed.
    """

    kind = "error"

    def __init__(self, specifier: str, message: str):
        self.specifier = specifier
        self.message = message
        super().__init__(f"{specifier!r}: {message}")


class MalformedSpecifier(SpecifierError):
    """The specifier text does not match the grammar."""

    kind = "malformed"


class InvalidAnchorDate(SpecifierError):
    """The anchor fields are well-formed but not a real calendar date."""

    kind = "invalid-anchor"


class DateOverflow(SpecifierError):
    """Calendar arithmetic left the representable date range."""

    kind = "overflow"


@dataclass
class BuildConfig:
    """Configuration for a site build."""

    events_path: Path
    output_dir: Path
    keep_going: bool = False
    dry_run: bool = False
    verbose: bool = False
    yes: bool = False  # Auto-confirm without prompting


@dataclass
class ExpansionStats:
    """Statistics for a calendar expansion."""

    entries: int = 0
    dates: int = 0
    errors: int = 0
