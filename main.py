"""
Recurring Calendar — Demo entry point.

`python main.py` seeds a calendar with a few rules, moves and cancels
single instances, and logs the resulting agendas.
"""

import logging
from datetime import date, time

from recurring_calendar.config import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

from recurring_calendar.adapters.store_factory import create_event_store
from recurring_calendar.core.calendar_service import CalendarService
from recurring_calendar.core.expressions import (
    DailyExpression,
    DayOfMonthExpression,
    DayOfWeekExpression,
    DifferenceExpression,
    IntervalExpression,
    UnionExpression,
    Weekday,
)
from recurring_calendar.data.models import RecurringEvent

logger = logging.getLogger("recurring_calendar.demo")


def _log_agenda(service: CalendarService, start: date, end: date) -> None:
    occurrences = service.get_events_for_date_range(start, end)
    if not occurrences:
        logger.info("%s .. %s: no events", start, end)
    for occ in occurrences:
        logger.info(
            "%s (%s) %s-%s %s%s",
            occ.event_date, occ.event_date.strftime("%a"),
            occ.start_time.strftime("%H:%M"), occ.end_time.strftime("%H:%M"),
            occ.title, "" if occ.is_recurring else " [one-time]",
        )


def main() -> None:
    store = create_event_store()
    service = CalendarService(store)

    team_sync = RecurringEvent(
        title="Team Sync",
        description="Weekly alignment meeting",
        start_time=time(14, 0),
        end_time=time(15, 0),
        rule=DayOfWeekExpression([Weekday.FRIDAY]),
        start_date=date(2025, 1, 1),
    )
    store.add_recurring_event(team_sync)
    _log_agenda(service, date(2025, 1, 9), date(2025, 1, 11))

    service.move_recurring_event_instance(
        team_sync.id,
        original_date=date(2025, 1, 17),
        new_date=date(2025, 1, 16),
        new_start=time(15, 0),
        new_end=time(16, 0),
    )
    service.cancel_recurring_event_instance(team_sync.id, date(2025, 1, 24), "Holiday")
    _log_agenda(service, date(2025, 1, 16), date(2025, 1, 31))

    weekends = DayOfWeekExpression([Weekday.SATURDAY, Weekday.SUNDAY])
    store.add_recurring_event(RecurringEvent(
        title="Gym Class",
        start_time=time(6, 30),
        end_time=time(7, 30),
        rule=UnionExpression(
            DayOfWeekExpression([Weekday.MONDAY]),
            DayOfWeekExpression([Weekday.WEDNESDAY]),
        ),
        start_date=date(2025, 2, 1),
    ))
    store.add_recurring_event(RecurringEvent(
        title="Daily Stand-up",
        start_time=time(9, 0),
        end_time=time(9, 15),
        rule=DifferenceExpression(DailyExpression(), weekends),
        start_date=date(2025, 2, 3),
    ))
    store.add_recurring_event(RecurringEvent(
        title="Monthly Report",
        start_time=time(17, 0),
        end_time=time(18, 0),
        rule=DayOfMonthExpression([1]),
        start_date=date(2025, 2, 1),
    ))
    store.add_recurring_event(RecurringEvent(
        title="Water Plants",
        start_time=time(18, 0),
        end_time=time(18, 15),
        rule=IntervalExpression(date(2025, 2, 1), 3),
    ))
    _log_agenda(service, date(2025, 2, 1), date(2025, 2, 10))


if __name__ == "__main__":
    main()
