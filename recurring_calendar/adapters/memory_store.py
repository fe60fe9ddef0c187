"""In-memory event store.

Keeps insertion-ordered lists plus lookup indexes (id → recurring event,
date → exceptions, event id → exceptions). Every read returns a fresh list,
so callers can mutate results without touching stored state.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date

from recurring_calendar.data.models import EventException, OneTimeEvent, RecurringEvent

logger = logging.getLogger(__name__)


class InMemoryEventStore:
    """EventStore backed by plain Python collections."""

    def __init__(self) -> None:
        self._recurring: list[RecurringEvent] = []
        self._recurring_by_id: dict[str, RecurringEvent] = {}
        self._one_time: list[OneTimeEvent] = []
        self._exceptions_by_date: dict[date, list[EventException]] = defaultdict(list)
        self._exceptions_by_event: dict[str, list[EventException]] = defaultdict(list)

    def add_recurring_event(self, event: RecurringEvent) -> None:
        if event is None:
            raise TypeError("event must not be None")
        self._recurring.append(event)
        # First one wins on a duplicate id, matching a linear scan.
        self._recurring_by_id.setdefault(event.id, event)
        logger.info("Recurring event added: %s '%s'", event.id, event.title)

    def add_one_time_event(self, event: OneTimeEvent) -> None:
        if event is None:
            raise TypeError("event must not be None")
        self._one_time.append(event)
        logger.info(
            "One-time event added: %s '%s' on %s", event.id, event.title, event.event_date,
        )

    def add_exception(self, exception: EventException) -> None:
        if exception is None:
            raise TypeError("exception must not be None")
        self._exceptions_by_date[exception.exception_date].append(exception)
        self._exceptions_by_event[exception.recurring_event_id].append(exception)
        logger.info(
            "Exception added: event %s suppressed on %s",
            exception.recurring_event_id, exception.exception_date,
        )

    def all_recurring_events(self) -> list[RecurringEvent]:
        return list(self._recurring)

    def all_one_time_events(self) -> list[OneTimeEvent]:
        return list(self._one_time)

    def get_recurring_event(self, event_id: str) -> RecurringEvent | None:
        return self._recurring_by_id.get(event_id)

    def exceptions_for_date(self, day: date) -> list[EventException]:
        return list(self._exceptions_by_date.get(day, ()))

    def exceptions_for_event(self, event_id: str) -> list[EventException]:
        return list(self._exceptions_by_event.get(event_id, ()))
