"""Shared test fixtures and configuration.

Pins environment variables before any recurring_calendar import so a
developer's .env can't change test behavior, and provides stores and a
calendar service.
"""

import os

# Patch env vars BEFORE any recurring_calendar imports
os.environ.setdefault("EVENT_STORE", "memory")
os.environ.setdefault("DATABASE_PATH", ":memory:")
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ.setdefault("RESCHEDULED_SUFFIX", " (Rescheduled)")

from datetime import date, time

import pytest


@pytest.fixture
def tmp_db_path(tmp_path):
    """Return a temporary SQLite DB path."""
    return str(tmp_path / "test_calendar.db")


@pytest.fixture
def memory_store():
    from recurring_calendar.adapters.memory_store import InMemoryEventStore
    return InMemoryEventStore()


@pytest.fixture
def sqlite_store(tmp_db_path):
    """Return a SqliteEventStore backed by a temp file."""
    from recurring_calendar.adapters.sqlite_store import SqliteEventStore
    return SqliteEventStore(db_path=tmp_db_path)


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_db_path):
    """Every EventStore implementation, for contract tests."""
    if request.param == "memory":
        from recurring_calendar.adapters.memory_store import InMemoryEventStore
        return InMemoryEventStore()
    from recurring_calendar.adapters.sqlite_store import SqliteEventStore
    return SqliteEventStore(db_path=tmp_db_path)


@pytest.fixture
def service(store):
    from recurring_calendar.core.calendar_service import CalendarService
    return CalendarService(store, rescheduled_suffix=" (Rescheduled)")


@pytest.fixture
def team_sync():
    """Weekly "Team Sync" on Fridays, 14:00-15:00, from 2025-01-01."""
    from recurring_calendar.core.expressions import DayOfWeekExpression, Weekday
    from recurring_calendar.data.models import RecurringEvent
    return RecurringEvent(
        title="Team Sync",
        description="Weekly alignment meeting",
        start_time=time(14, 0),
        end_time=time(15, 0),
        rule=DayOfWeekExpression([Weekday.FRIDAY]),
        start_date=date(2025, 1, 1),
    )
