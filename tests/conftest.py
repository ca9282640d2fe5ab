"""
Shared pytest fixtures and calendar helpers.
"""

import json
from datetime import date

import pytest

from daybook.events import Birthday
from daybook.events import Competition
from daybook.events import Leg
from daybook.events import LegMode
from daybook.events import Transit

TODAY = date(2023, 6, 10)


def make_calendar_json() -> dict:
    """Return a small calendar in its on-disk JSON form (keys deliberately unsorted)."""
    return {
        "2024-03-02": [
            {"comp": "2024GLAS01"},
            {"transit": {"train": {"from": "EDB", "to": "BHG", "carrier": "ScotRail"}}},
        ],
        "1990+-07-14": [{"birthday": "Alice"}],
        "2023-06-01+9": [
            {"transit": {"walk": {"from": "Home", "to": "Office"}}},
        ],
        "2024-05-18": [{"comp": "2024EDIN02"}, {"birthday": "Bob"}],
    }


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def calendar():
    return {
        "1990+-07-14": [Birthday("Alice")],
        "2023-06-01+9": [Transit(Leg(LegMode.WALK, "Home", "Office"))],
        "2024-03-02": [
            Competition("2024GLAS01"),
            Transit(Leg(LegMode.TRAIN, "EDB", "BHG", "ScotRail")),
        ],
        "2024-05-18": [Competition("2024EDIN02"), Birthday("Bob")],
    }


@pytest.fixture
def events_path(tmp_path):
    path = tmp_path / "docs" / "events.json"
    path.parent.mkdir()
    path.write_text(json.dumps(make_calendar_json()), encoding="utf-8")
    return path
