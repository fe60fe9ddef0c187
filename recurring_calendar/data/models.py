"""
Recurring Calendar — Data Models.

Events store rules, not dates: a RecurringEvent holds a temporal expression
and is evaluated per query, while a OneTimeEvent pins a single date (used
for substitutes when a recurring instance is moved). EventException records
suppress individual recurring instances and are only ever appended.
"""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, time

from recurring_calendar.core.errors import EventValidationError
from recurring_calendar.core.expressions import TemporalExpression


def new_id() -> str:
    """Return a fresh opaque identifier."""
    return uuid.uuid4().hex


@dataclass(frozen=True, kw_only=True)
class EventBase(ABC):
    """Fields shared by recurring and one-time events."""

    title: str
    start_time: time
    end_time: time
    description: str = ""
    id: str = field(default_factory=new_id)

    def __post_init__(self) -> None:
        if self.title is None or not self.title.strip():
            raise EventValidationError("Event title must not be empty")
        if self.description is None:
            object.__setattr__(self, "description", "")
        if self.end_time <= self.start_time:
            raise EventValidationError(
                f"End time must be after start time "
                f"({self.start_time:%H:%M} - {self.end_time:%H:%M})"
            )

    @abstractmethod
    def occurs_on(self, day: date) -> bool:
        """Return True if the event takes place on ``day``."""


@dataclass(frozen=True, kw_only=True)
class RecurringEvent(EventBase):
    """An event that repeats according to a temporal expression.

    ``start_date`` / ``end_date`` bound the window in which the rule is
    evaluated; either side may be open.
    """

    rule: TemporalExpression
    start_date: date | None = None
    end_date: date | None = None

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.rule is None:
            raise EventValidationError("Recurring event needs a recurrence rule")
        if (
            self.start_date is not None
            and self.end_date is not None
            and self.end_date < self.start_date
        ):
            raise EventValidationError(
                f"End date {self.end_date} is before start date {self.start_date}"
            )

    def occurs_on(self, day: date) -> bool:
        if self.start_date is not None and day < self.start_date:
            return False
        if self.end_date is not None and day > self.end_date:
            return False
        return self.rule.includes(day)


@dataclass(frozen=True, kw_only=True)
class OneTimeEvent(EventBase):
    """An event on exactly one date."""

    event_date: date

    def occurs_on(self, day: date) -> bool:
        return self.event_date == day


@dataclass(frozen=True, kw_only=True)
class EventException:
    """Suppresses one recurring-event instance on one date.

    ``recurring_event_id`` is a lookup key only; nothing checks that the
    event still exists.
    """

    recurring_event_id: str
    exception_date: date
    reason: str = ""
    id: str = field(default_factory=new_id)

    def __post_init__(self) -> None:
        if self.reason is None:
            object.__setattr__(self, "reason", "")


@dataclass(frozen=True)
class CalendarOccurrence:
    """One resolved event instance on a specific date, as returned to callers."""

    event_id: str
    title: str
    description: str
    event_date: date
    start_time: time
    end_time: time
    is_recurring: bool
