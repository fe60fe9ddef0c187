"""
Recurring Calendar — Calendar Service.

Resolves "what happens on date D?" against an event store:

1. Collect the exceptions recorded for D (suppressed recurring instances).
2. Evaluate each recurring event's rule for D, skipping suppressed ones.
3. Add the one-time events pinned to D (including moved instances).
4. Sort by start time.

Moving or cancelling a single instance never touches the recurring event;
it appends an exception (plus, for a move, a substitute one-time event).
The service issues no transactions, so two callers moving the same instance
at once can both succeed.
"""

from __future__ import annotations

import logging
from datetime import date, time, timedelta
from typing import TYPE_CHECKING

from recurring_calendar.core.errors import EventNotFoundError, InvalidOperationError
from recurring_calendar.data.models import (
    CalendarOccurrence,
    EventException,
    OneTimeEvent,
    RecurringEvent,
)

if TYPE_CHECKING:
    from recurring_calendar.ports.event_store import EventStore

logger = logging.getLogger(__name__)


class CalendarService:
    """Query and edit a calendar of recurring and one-time events."""

    def __init__(self, store: EventStore, rescheduled_suffix: str | None = None) -> None:
        if store is None:
            raise TypeError("store must not be None")
        if rescheduled_suffix is None:
            from recurring_calendar.config import settings
            rescheduled_suffix = settings.RESCHEDULED_SUFFIX

        self._store = store
        self._rescheduled_suffix = rescheduled_suffix

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_events_for_date(self, day: date) -> list[CalendarOccurrence]:
        """Return every occurrence on ``day``, ordered by start time.

        Ties keep emission order: recurring occurrences come before one-time
        events starting at the same time.
        """
        excluded_ids = {
            exc.recurring_event_id for exc in self._store.exceptions_for_date(day)
        }

        occurrences: list[CalendarOccurrence] = []
        for event in self._store.all_recurring_events():
            if event.id in excluded_ids or not event.occurs_on(day):
                continue
            occurrences.append(_to_occurrence(event, day, is_recurring=True))

        for event in self._store.all_one_time_events():
            if event.occurs_on(day):
                occurrences.append(_to_occurrence(event, day, is_recurring=False))

        occurrences.sort(key=lambda occ: occ.start_time)
        logger.debug(
            "%s: %d occurrence(s), %d suppressed id(s)",
            day, len(occurrences), len(excluded_ids),
        )
        return occurrences

    def get_events_for_date_range(self, start: date, end: date) -> list[CalendarOccurrence]:
        """Return occurrences for every date in [start, end], in date order.

        An inverted range (end before start) is empty, not an error.
        """
        occurrences: list[CalendarOccurrence] = []
        for offset in range((end - start).days + 1):
            occurrences.extend(self.get_events_for_date(start + timedelta(days=offset)))
        return occurrences

    def get_exceptions_for_event(self, event_id: str) -> list[EventException]:
        """Return the exceptions recorded against a recurring event (may be empty)."""
        return self._store.exceptions_for_event(event_id)

    # ------------------------------------------------------------------
    # Instance edits
    # ------------------------------------------------------------------

    def move_recurring_event_instance(
        self,
        event_id: str,
        original_date: date,
        new_date: date,
        new_start: time | None = None,
        new_end: time | None = None,
    ) -> OneTimeEvent:
        """Move one occurrence of a recurring event to another date/time.

        Suppresses the original occurrence with an exception and adds a
        substitute one-time event. Times default to the original's.

        Raises:
            EventNotFoundError: ``event_id`` is not a stored recurring event.
            InvalidOperationError: the event does not occur on ``original_date``.
            EventValidationError: the resulting times are invalid.
        """
        event = self._find_instance(event_id, original_date)

        # Built first so invalid times fail before anything is written.
        substitute = OneTimeEvent(
            title=event.title,
            description=event.description + self._rescheduled_suffix,
            event_date=new_date,
            start_time=new_start if new_start is not None else event.start_time,
            end_time=new_end if new_end is not None else event.end_time,
        )

        self._store.add_exception(EventException(
            recurring_event_id=event_id,
            exception_date=original_date,
            reason=f"Moved to {new_date.isoformat()}",
        ))
        self._store.add_one_time_event(substitute)

        logger.info(
            "Moved '%s' from %s to %s %s-%s",
            event.title, original_date, new_date,
            substitute.start_time.strftime("%H:%M"), substitute.end_time.strftime("%H:%M"),
        )
        return substitute

    def cancel_recurring_event_instance(
        self, event_id: str, day: date, reason: str = "",
    ) -> EventException:
        """Cancel one occurrence of a recurring event.

        Raises:
            EventNotFoundError: ``event_id`` is not a stored recurring event.
            InvalidOperationError: the event does not occur on ``day``.
        """
        event = self._find_instance(event_id, day)

        exception = EventException(
            recurring_event_id=event_id, exception_date=day, reason=reason,
        )
        self._store.add_exception(exception)
        logger.info("Cancelled '%s' on %s (%s)", event.title, day, reason or "no reason")
        return exception

    def _find_instance(self, event_id: str, day: date) -> RecurringEvent:
        event = self._store.get_recurring_event(event_id)
        if event is None:
            raise EventNotFoundError(f"Recurring event {event_id!r} not found")
        if not event.occurs_on(day):
            raise InvalidOperationError(
                f"Recurring event '{event.title}' does not occur on {day.isoformat()}"
            )
        return event


def _to_occurrence(
    event: RecurringEvent | OneTimeEvent, day: date, is_recurring: bool,
) -> CalendarOccurrence:
    return CalendarOccurrence(
        event_id=event.id,
        title=event.title,
        description=event.description,
        event_date=day,
        start_time=event.start_time,
        end_time=event.end_time,
        is_recurring=is_recurring,
    )
