"""
Date-range specifier grammar.

    YYYY[+[YO]]-MM[+[MO]]-DD[+[DO]]

Each date component may carry a ``+`` suffix: a bare ``+`` means "repeat up
to today" (auto), ``+N`` means "repeat N times" (explicit).  No suffix means
the unit does not recur.
"""

import enum
import re
from dataclasses import dataclass
from datetime import date

from daybook.models import InvalidAnchorDate
from daybook.models import MalformedSpecifier

# [0-9] rather than \d so that non-ASCII digits are rejected.
_SPECIFIER_RE = re.compile(
    r"(?P<year>[0-9]{4})(?P<year_off>\+[0-9]*)?"
    r"-(?P<month>[0-9]{2})(?P<month_off>\+[0-9]*)?"
    r"-(?P<day>[0-9]{2})(?P<day_off>\+[0-9]*)?"
)


class OffsetKind(enum.Enum):
    ABSENT = "absent"
    EXPLICIT = "explicit"
    AUTO = "auto"


@dataclass(frozen=True)
class Offset:
    """Recurrence amount for one unit: absent, explicit(n) or auto."""

    kind: OffsetKind
    value: int | None = None

    def __post_init__(self):
        if self.kind is OffsetKind.EXPLICIT:
            if self.value is None or self.value < 0:
                raise ValueError(f"explicit offset needs a non-negative value, got {self.value!r}")
        elif self.value is not None:
            raise ValueError(f"{self.kind.value} offset cannot carry a value")

    @classmethod
    def absent(cls) -> "Offset":
        return cls(OffsetKind.ABSENT)

    @classmethod
    def auto(cls) -> "Offset":
        return cls(OffsetKind.AUTO)

    @classmethod
    def explicit(cls, value: int) -> "Offset":
        return cls(OffsetKind.EXPLICIT, value)

    @property
    def is_present(self) -> bool:
        return self.kind is not OffsetKind.ABSENT

    def __str__(self) -> str:
        if self.kind is OffsetKind.ABSENT:
            return ""
        if self.kind is OffsetKind.AUTO:
            return "+"
        return f"+{self.value}"


ABSENT = Offset.absent()
AUTO = Offset.auto()


@dataclass(frozen=True)
class DateRangeSpecifier:
    """A parsed specifier: anchor date plus one offset per unit."""

    text: str
    anchor: date
    years: Offset = ABSENT
    months: Offset = ABSENT
    days: Offset = ABSENT

    def __str__(self) -> str:
        return (
            f"{self.anchor.year:04d}{self.years}"
            f"-{self.anchor.month:02d}{self.months}"
            f"-{self.anchor.day:02d}{self.days}"
        )


def _parse_offset(text: str, suffix: str | None) -> Offset:
    if suffix is None:
        return ABSENT
    digits = suffix[1:]
    if not digits:
        return AUTO
    try:
        return Offset.explicit(int(digits))
    except ValueError:
        raise MalformedSpecifier(text, f"offset {suffix!r} is not an integer") from None


def parse_specifier(text: str) -> DateRangeSpecifier:
    """
    Parse a date-range specifier.

    Raises:
        MalformedSpecifier: text does not match the grammar.
        InvalidAnchorDate: the anchor is not a real calendar date (e.g. Feb 30).
    """
    m = _SPECIFIER_RE.fullmatch(text)
    if m is None:
        raise MalformedSpecifier(text, "expected YYYY[+[N]]-MM[+[N]]-DD[+[N]]")

    try:
        anchor = date(int(m["year"]), int(m["month"]), int(m["day"]))
    except ValueError as e:
        raise InvalidAnchorDate(text, str(e)) from None

    return DateRangeSpecifier(
        text=text,
        anchor=anchor,
        years=_parse_offset(text, m["year_off"]),
        months=_parse_offset(text, m["month_off"]),
        days=_parse_offset(text, m["day_off"]),
    )
