"""
models/status.py
----------------
Derives an activist's status label from their attendance aggregates.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Callable, Optional

from config import (
    STATUS_LAPSED_AFTER_DAYS,
    STATUS_NEW_MAX_EVENTS,
    STATUS_NEW_WINDOW_DAYS,
)


class ActivistStatus(str, Enum):
    NO_ATTENDANCE = "No attendance"
    NEW = "New"
    CURRENT = "Current"
    FORMER = "Former"


# Anything with this signature can replace StatusPolicy in the repository.
StatusRule = Callable[[Optional[date], Optional[date], int], str]


def _as_date(value) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    return value


@dataclass(frozen=True)
class StatusPolicy:
    """
    Default status rule.

    Rules, evaluated in order against ``today``:
        1. No first or last event               -> "No attendance"
        2. Last event > lapsed_after_days ago   -> "Former"
        3. First event <= new_window_days ago
           and total_events < new_max_events    -> "New"
        4. Otherwise                            -> "Current"
    """
    new_window_days: int = STATUS_NEW_WINDOW_DAYS
    new_max_events: int = STATUS_NEW_MAX_EVENTS
    lapsed_after_days: int = STATUS_LAPSED_AFTER_DAYS
    today: Optional[Callable[[], date]] = None

    def __call__(
        self,
        first_event: Optional[date],
        last_event: Optional[date],
        total_events: int,
    ) -> str:
        first_event = _as_date(first_event)
        last_event = _as_date(last_event)
        if first_event is None or last_event is None:
            return ActivistStatus.NO_ATTENDANCE.value

        today = self.today() if self.today else date.today()
        if today - last_event > timedelta(days=self.lapsed_after_days):
            return ActivistStatus.FORMER.value
        if (
            today - first_event <= timedelta(days=self.new_window_days)
            and total_events < self.new_max_events
        ):
            return ActivistStatus.NEW.value
        return ActivistStatus.CURRENT.value


DEFAULT_STATUS_POLICY = StatusPolicy()
