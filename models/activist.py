"""
models/activist.py
------------------
Domain models for activists.

The full read model (ActivistExtra) is a composition of three field groups:
identity (Activist), attendance summary and membership data.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import IntEnum
from typing import Any, Optional

from config import EVENT_DATE_FORMAT
from models.errors import ValidationError


class Order(IntEnum):
    """Sort direction for range listing, as sent by clients."""
    ASCENDING = 1
    DESCENDING = 2


@dataclass
class Activist:
    """
    Identity fields of an activist as stored in the ``activists`` table.

    Attributes:
        id: Database primary key (None for records not yet inserted).
        name: Display name, used as a secondary unique lookup key.
        email: Contact email.
        chapter: Chapter the activist belongs to.
        phone: Contact phone number.
        location: Optional free-text location (NULL in the store).
        facebook: Facebook handle or profile URL.
        liberation_pledge: 1 if the activist took the pledge, else 0.
    """
    name: str
    email: str = ""
    chapter: str = ""
    phone: str = ""
    location: Optional[str] = None
    facebook: str = ""
    liberation_pledge: int = 0
    id: Optional[int] = None


@dataclass
class ActivistAttendanceSummary:
    """Attendance aggregates. Derived from events, never stored."""
    first_event: Optional[date] = None
    last_event: Optional[date] = None
    total_events: int = 0
    status: str = ""


@dataclass
class ActivistMembership:
    core_staff: int = 0
    exclude_from_leaderboard: int = 0
    global_team_member: int = 0
    activist_level: str = ""


@dataclass
class ActivistExtra:
    """Everything the API returns for one activist."""
    activist: Activist
    attendance: ActivistAttendanceSummary = field(default_factory=ActivistAttendanceSummary)
    membership: ActivistMembership = field(default_factory=ActivistMembership)

    @property
    def id(self) -> Optional[int]:
        return self.activist.id

    @property
    def name(self) -> str:
        return self.activist.name

    def to_json(self) -> dict[str, Any]:
        """Flatten into the JSON shape: string dates, 0/1 flags, '' for NULLs."""
        a, e, m = self.activist, self.attendance, self.membership
        return {
            "id": a.id,
            "name": a.name,
            "email": a.email or "",
            "chapter": a.chapter or "",
            "phone": a.phone or "",
            "location": a.location or "",
            "facebook": a.facebook or "",
            "first_event": format_event_date(e.first_event),
            "last_event": format_event_date(e.last_event),
            "total_events": int(e.total_events or 0),
            "status": e.status,
            "core_staff": _flag(m.core_staff),
            "exclude_from_leaderboard": _flag(m.exclude_from_leaderboard),
            "liberation_pledge": _flag(a.liberation_pledge),
            "global_team_member": _flag(m.global_team_member),
            "activist_level": m.activist_level or "",
        }

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "ActivistExtra":
        """
        Build a record from a JSON payload (the update path).

        Attendance fields are read-only aggregates and are left empty.

        Raises:
            ValidationError: If the payload is not an object, or ``id`` / ``name``
                is missing or of the wrong type.
        """
        if not isinstance(data, dict):
            raise ValidationError("update_full", None, "payload must be a JSON object")
        for required in ("id", "name"):
            if required not in data:
                raise ValidationError("update_full", data.get("id"), f"missing field {required!r}")
        if not is_integer(data["id"]):
            raise ValidationError("update_full", data["id"], "id must be an integer")
        if not isinstance(data["name"], str) or not data["name"]:
            raise ValidationError("update_full", data["id"], "name must be a non-empty string")

        location = data.get("location")
        return cls(
            activist=Activist(
                id=data["id"],
                name=data["name"],
                email=data.get("email", ""),
                chapter=data.get("chapter", ""),
                phone=data.get("phone", ""),
                location=location if location else None,
                facebook=data.get("facebook", ""),
                liberation_pledge=_flag(data.get("liberation_pledge", 0)),
            ),
            membership=ActivistMembership(
                core_staff=_flag(data.get("core_staff", 0)),
                exclude_from_leaderboard=_flag(data.get("exclude_from_leaderboard", 0)),
                global_team_member=_flag(data.get("global_team_member", 0)),
                activist_level=data.get("activist_level", ""),
            ),
        )


@dataclass
class ActivistRangeOptions:
    """
    Keyset page request.

    Attributes:
        name: Anchor name; '' requests the first page.
        limit: Maximum rows; zero or negative means unlimited.
        order: Order.ASCENDING or Order.DESCENDING (validated by the repository).
    """
    name: str = ""
    limit: int = 0
    order: int = Order.ASCENDING

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ActivistRangeOptions":
        """
        Build options from a JSON payload without coercing values.

        Raises:
            ValidationError: If ``order`` or ``limit`` is not an integer.
        """
        order = data.get("order")
        limit = data.get("limit")
        order = 0 if order is None else order
        limit = 0 if limit is None else limit
        if not is_integer(order):
            raise ValidationError(
                "list_range", order, "order must be 1 (ascending) or 2 (descending)"
            )
        if not is_integer(limit):
            raise ValidationError("list_range", limit, "limit must be an integer")
        return cls(name=data.get("name") or "", limit=limit, order=order)


def format_event_date(value: Optional[date]) -> str:
    """Format an event date as YYYY-MM-DD, or "" when absent."""
    if value is None:
        return ""
    if isinstance(value, datetime):
        value = value.date()
    return value.strftime(EVENT_DATE_FORMAT)


def _flag(value: Any) -> int:
    return 1 if value else 0


def is_integer(value: Any) -> bool:
    """True for real ints; JSON floats and booleans are rejected."""
    return isinstance(value, int) and not isinstance(value, bool)
