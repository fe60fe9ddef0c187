"""Event store port — abstract interface for event persistence.

The calendar service depends on this protocol, never on a specific backend.
Implementations make no ordering promise; callers sort what they need.
"""

from __future__ import annotations

from datetime import date
from typing import Protocol

from recurring_calendar.data.models import EventException, OneTimeEvent, RecurringEvent


class EventStore(Protocol):
    """Append-only storage for events and exceptions."""

    def add_recurring_event(self, event: RecurringEvent) -> None: ...

    def add_one_time_event(self, event: OneTimeEvent) -> None: ...

    def add_exception(self, exception: EventException) -> None: ...

    def all_recurring_events(self) -> list[RecurringEvent]: ...

    def all_one_time_events(self) -> list[OneTimeEvent]: ...

    def get_recurring_event(self, event_id: str) -> RecurringEvent | None: ...

    def exceptions_for_date(self, day: date) -> list[EventException]: ...

    def exceptions_for_event(self, event_id: str) -> list[EventException]: ...
