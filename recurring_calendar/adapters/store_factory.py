"""Event store factory — creates the right store based on config."""

from __future__ import annotations

from recurring_calendar.config import settings
from recurring_calendar.ports.event_store import EventStore


def create_event_store(db_path: str | None = None) -> EventStore:
    """Return the event store matching the EVENT_STORE setting.

    Args:
        db_path: SQLite file to use instead of DATABASE_PATH (sqlite only).
    """
    kind = settings.EVENT_STORE.lower()

    if kind == "memory":
        from recurring_calendar.adapters.memory_store import InMemoryEventStore

        return InMemoryEventStore()

    if kind == "sqlite":
        from recurring_calendar.adapters.sqlite_store import SqliteEventStore

        return SqliteEventStore(db_path=db_path)

    raise ValueError(f"Unknown EVENT_STORE: {kind!r}")
