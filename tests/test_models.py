from datetime import date, datetime

import pytest

from models.activist import (
    Activist,
    ActivistAttendanceSummary,
    ActivistExtra,
    ActivistMembership,
    ActivistRangeOptions,
    Order,
    format_event_date,
    is_integer,
)
from models.errors import ValidationError


def make_extra():
    return ActivistExtra(
        activist=Activist(
            id=7, name="Alice", email="alice@example.org", chapter="SF",
            phone="555-0101", location=None, facebook="alice.fb", liberation_pledge=1,
        ),
        attendance=ActivistAttendanceSummary(
            first_event=date(2024, 1, 5), last_event=None, total_events=3, status="New",
        ),
        membership=ActivistMembership(
            core_staff=True, exclude_from_leaderboard=0,
            global_team_member=1, activist_level="organizer",
        ),
    )


def test_to_json_shape():
    assert make_extra().to_json() == {
        "id": 7,
        "name": "Alice",
        "email": "alice@example.org",
        "chapter": "SF",
        "phone": "555-0101",
        "location": "",
        "facebook": "alice.fb",
        "first_event": "2024-01-05",
        "last_event": "",
        "total_events": 3,
        "status": "New",
        "core_staff": 1,
        "exclude_from_leaderboard": 0,
        "liberation_pledge": 1,
        "global_team_member": 1,
        "activist_level": "organizer",
    }


def test_from_json_keeps_mutable_fields_and_drops_aggregates():
    record = ActivistExtra.from_json(make_extra().to_json())
    assert record.activist == Activist(
        id=7, name="Alice", email="alice@example.org", chapter="SF",
        phone="555-0101", location=None, facebook="alice.fb", liberation_pledge=1,
    )
    assert record.membership == ActivistMembership(1, 0, 1, "organizer")
    assert record.attendance == ActivistAttendanceSummary()


def test_composed_record_exposes_identity():
    extra = make_extra()
    assert extra.id == 7
    assert extra.name == "Alice"


def test_format_event_date():
    assert format_event_date(None) == ""
    assert format_event_date(date(2023, 12, 31)) == "2023-12-31"
    assert format_event_date(datetime(2023, 12, 31, 23, 59)) == "2023-12-31"


def test_range_options_from_dict():
    opts = ActivistRangeOptions.from_dict({"name": "Bob", "limit": 5, "order": 2})
    assert opts == ActivistRangeOptions(name="Bob", limit=5, order=Order.DESCENDING)


def test_range_options_missing_values():
    opts = ActivistRangeOptions.from_dict({"name": None})
    assert opts.name == ""
    assert opts.limit == 0
    assert opts.order == 0


@pytest.mark.parametrize("order", [1.5, 2.9, True, False, "desc", "2", [1]])
def test_range_options_reject_non_integer_order(order):
    with pytest.raises(ValidationError) as exc:
        ActivistRangeOptions.from_dict({"name": "Bob", "order": order})
    assert exc.value.operation == "list_range"
    assert exc.value.key == order


@pytest.mark.parametrize("limit", ["abc", "5", 2.5, True])
def test_range_options_reject_non_integer_limit(limit):
    with pytest.raises(ValidationError):
        ActivistRangeOptions.from_dict({"order": 1, "limit": limit})


def test_is_integer():
    assert is_integer(0)
    assert is_integer(Order.DESCENDING)
    assert not is_integer(True)
    assert not is_integer(1.0)
    assert not is_integer("1")


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "Alice"},
        {"id": 7},
        {"id": "7", "name": "Alice"},
        {"id": True, "name": "Alice"},
        {"id": 7, "name": ""},
        {"id": 7, "name": None},
        ["id", 7],
        "Alice",
    ],
)
def test_from_json_rejects_bad_payloads(payload):
    with pytest.raises(ValidationError) as exc:
        ActivistExtra.from_json(payload)
    assert exc.value.operation == "update_full"
