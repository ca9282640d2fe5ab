"""
Calendar event variants and their JSON encoding.

Events are stored externally tagged, one key per event::

    {"birthday": "Alice"}
    {"comp": "2024AB01"}
    {"transit": {"train": {"from": "EDB", "to": "BHG", "carrier": "ScotRail"}}}
"""

import enum
from dataclasses import dataclass

from daybook.models import CalendarFormatError
from daybook.stations import station_name


class LegMode(enum.Enum):
    WALK = "walk"
    BUS = "bus"
    METRO = "metro"
    TRAIN = "train"
    PLANE = "plane"


@dataclass(frozen=True)
class Birthday:
    name: str

    kind = "birthday"

    def payload(self):
        return self.name

    def describe(self) -> str:
        return f"{self.name}'s birthday"


@dataclass(frozen=True)
class Competition:
    id: str

    kind = "comp"

    def payload(self):
        return self.id

    def describe(self) -> str:
        return f"Competition {self.id}"


@dataclass(frozen=True)
class Leg:
    """One journey leg.  Train legs use CRS station codes for from/to."""

    mode: LegMode
    origin: str
    destination: str
    carrier: str | None = None

    def to_json(self) -> dict:
        body = {"from": self.origin, "to": self.destination}
        if self.carrier is not None:
            body["carrier"] = self.carrier
        return {self.mode.value: body}

    def describe(self) -> str:
        origin, destination = self.origin, self.destination
        if self.mode is LegMode.TRAIN:
            origin, destination = station_name(origin), station_name(destination)
        text = f"{self.mode.value.capitalize()}: {origin} → {destination}"
        if self.carrier:
            text += f" ({self.carrier})"
        return text


@dataclass(frozen=True)
class Transit:
    leg: Leg

    kind = "transit"

    def payload(self):
        return self.leg.to_json()

    def describe(self) -> str:
        return self.leg.describe()


Event = Birthday | Competition | Transit

EVENT_KINDS = ("birthday", "comp", "transit")


def encode_event(event: Event) -> dict:
    return {event.kind: event.payload()}


def _decode_leg(payload, specifier: str | None) -> Leg:
    if not isinstance(payload, dict) or len(payload) != 1:
        raise CalendarFormatError(f"transit leg must be a single-key object: {payload!r}", specifier)
    (mode_name, body), = payload.items()
    try:
        mode = LegMode(mode_name)
    except ValueError:
        raise CalendarFormatError(f"unknown transit mode {mode_name!r}", specifier) from None
    if not isinstance(body, dict) or not {"from", "to"} <= body.keys():
        raise CalendarFormatError(f"{mode_name} leg needs 'from' and 'to': {body!r}", specifier)
    extra = body.keys() - {"from", "to", "carrier"}
    if extra:
        raise CalendarFormatError(f"{mode_name} leg has unknown keys {sorted(extra)}", specifier)
    for key in ("from", "to", "carrier"):
        value = body.get(key)
        if value is not None and not isinstance(value, str):
            raise CalendarFormatError(f"{mode_name} leg {key!r} must be a string", specifier)
    return Leg(mode, body["from"], body["to"], body.get("carrier"))


def decode_payload(kind: str, payload, specifier: str | None = None) -> Event:
    """Build an event from its kind tag and payload."""
    if kind == "birthday":
        if not isinstance(payload, str):
            raise CalendarFormatError(f"birthday must be a name string: {payload!r}", specifier)
        return Birthday(payload)
    if kind == "comp":
        if not isinstance(payload, str):
            raise CalendarFormatError(f"comp must be an id string: {payload!r}", specifier)
        return Competition(payload)
    if kind == "transit":
        return Transit(_decode_leg(payload, specifier))
    raise CalendarFormatError(f"unknown event kind {kind!r}", specifier)


def decode_event(obj, specifier: str | None = None) -> Event:
    """Decode one externally-tagged event object.

    Raises:
        CalendarFormatError: obj is not a known, well-formed event.
    """
    if not isinstance(obj, dict) or len(obj) != 1:
        raise CalendarFormatError(f"event must be a single-key object: {obj!r}", specifier)
    (kind, payload), = obj.items()
    return decode_payload(kind, payload, specifier)
