"""
Recurring Calendar — SQLite Event Store.

Persists recurring events (with their rule as JSON), one-time events and
exceptions in SQLite so a calendar survives restarts. Rows are append-only;
``seq`` keeps insertion order.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, time
from pathlib import Path

from recurring_calendar.core.errors import EventStoreError, EventValidationError
from recurring_calendar.core.rule_schema import rule_from_json, rule_to_json
from recurring_calendar.data.models import EventException, OneTimeEvent, RecurringEvent

logger = logging.getLogger(__name__)

_MEMORY = ":memory:"


class SqliteEventStore:
    """SQLite-backed EventStore."""

    def __init__(self, db_path: str | None = None) -> None:
        if db_path is None:
            from recurring_calendar.config import settings
            db_path = settings.DATABASE_PATH

        self._db_path = db_path
        # An in-memory database only lives as long as its connection.
        self._shared_conn: sqlite3.Connection | None = None
        if db_path == _MEMORY:
            self._shared_conn = self._open()
        else:
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _open(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection inside a transaction; file connections are closed after."""
        conn = self._shared_conn if self._shared_conn is not None else self._open()
        try:
            with conn:
                yield conn
        finally:
            if conn is not self._shared_conn:
                conn.close()

    def _init_db(self) -> None:
        """Create the event tables and indexes if they don't exist."""
        with self._connect() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS recurring_events (
                    seq          INTEGER PRIMARY KEY AUTOINCREMENT,
                    id           TEXT NOT NULL,
                    title        TEXT NOT NULL,
                    description  TEXT NOT NULL DEFAULT '',
                    start_time   TEXT NOT NULL,
                    end_time     TEXT NOT NULL,
                    rule_json    TEXT NOT NULL,
                    start_date   TEXT,
                    end_date     TEXT
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS one_time_events (
                    seq          INTEGER PRIMARY KEY AUTOINCREMENT,
                    id           TEXT NOT NULL,
                    title        TEXT NOT NULL,
                    description  TEXT NOT NULL DEFAULT '',
                    event_date   TEXT NOT NULL,
                    start_time   TEXT NOT NULL,
                    end_time     TEXT NOT NULL
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS event_exceptions (
                    seq                 INTEGER PRIMARY KEY AUTOINCREMENT,
                    id                  TEXT NOT NULL,
                    recurring_event_id  TEXT NOT NULL,
                    exception_date      TEXT NOT NULL,
                    reason              TEXT NOT NULL DEFAULT ''
                )
            """)
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_recurring_id ON recurring_events (id)"
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_exceptions_date "
                "ON event_exceptions (exception_date)"
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_exceptions_event "
                "ON event_exceptions (recurring_event_id)"
            )
        logger.debug("Event tables initialized at %s", self._db_path)

    @staticmethod
    def _row_to_recurring(row: sqlite3.Row) -> RecurringEvent:
        try:
            rule = rule_from_json(row["rule_json"])
        except EventValidationError as exc:
            raise EventStoreError(
                f"Stored rule for recurring event {row['id']} is unreadable"
            ) from exc
        return RecurringEvent(
            id=row["id"],
            title=row["title"],
            description=row["description"],
            start_time=time.fromisoformat(row["start_time"]),
            end_time=time.fromisoformat(row["end_time"]),
            rule=rule,
            start_date=date.fromisoformat(row["start_date"]) if row["start_date"] else None,
            end_date=date.fromisoformat(row["end_date"]) if row["end_date"] else None,
        )

    @staticmethod
    def _row_to_one_time(row: sqlite3.Row) -> OneTimeEvent:
        return OneTimeEvent(
            id=row["id"],
            title=row["title"],
            description=row["description"],
            event_date=date.fromisoformat(row["event_date"]),
            start_time=time.fromisoformat(row["start_time"]),
            end_time=time.fromisoformat(row["end_time"]),
        )

    @staticmethod
    def _row_to_exception(row: sqlite3.Row) -> EventException:
        return EventException(
            id=row["id"],
            recurring_event_id=row["recurring_event_id"],
            exception_date=date.fromisoformat(row["exception_date"]),
            reason=row["reason"],
        )

    def add_recurring_event(self, event: RecurringEvent) -> None:
        """Insert a recurring event, storing its rule as JSON."""
        if event is None:
            raise TypeError("event must not be None")
        rule_json = rule_to_json(event.rule)
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO recurring_events
                    (id, title, description, start_time, end_time,
                     rule_json, start_date, end_date)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    event.id, event.title, event.description,
                    event.start_time.isoformat(), event.end_time.isoformat(),
                    rule_json,
                    event.start_date.isoformat() if event.start_date else None,
                    event.end_date.isoformat() if event.end_date else None,
                ),
            )
        logger.info("Recurring event added: %s '%s'", event.id, event.title)

    def add_one_time_event(self, event: OneTimeEvent) -> None:
        """Insert a one-time event."""
        if event is None:
            raise TypeError("event must not be None")
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO one_time_events
                    (id, title, description, event_date, start_time, end_time)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    event.id, event.title, event.description,
                    event.event_date.isoformat(),
                    event.start_time.isoformat(), event.end_time.isoformat(),
                ),
            )
        logger.info(
            "One-time event added: %s '%s' on %s", event.id, event.title, event.event_date,
        )

    def add_exception(self, exception: EventException) -> None:
        """Append an exception. Exceptions are never updated or deleted."""
        if exception is None:
            raise TypeError("exception must not be None")
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO event_exceptions
                    (id, recurring_event_id, exception_date, reason)
                VALUES (?, ?, ?, ?)
                """,
                (
                    exception.id, exception.recurring_event_id,
                    exception.exception_date.isoformat(), exception.reason,
                ),
            )
        logger.info(
            "Exception added: event %s suppressed on %s",
            exception.recurring_event_id, exception.exception_date,
        )

    def all_recurring_events(self) -> list[RecurringEvent]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM recurring_events ORDER BY seq"
            ).fetchall()
        return [self._row_to_recurring(r) for r in rows]

    def all_one_time_events(self) -> list[OneTimeEvent]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM one_time_events ORDER BY seq"
            ).fetchall()
        return [self._row_to_one_time(r) for r in rows]

    def get_recurring_event(self, event_id: str) -> RecurringEvent | None:
        """Fetch a single recurring event by id (first inserted on duplicates)."""
        with self._connect() as conn:
            row = conn.execute(
                "SELECT * FROM recurring_events WHERE id = ? ORDER BY seq LIMIT 1",
                (event_id,),
            ).fetchone()
        if row is None:
            return None
        return self._row_to_recurring(row)

    def exceptions_for_date(self, day: date) -> list[EventException]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM event_exceptions WHERE exception_date = ? ORDER BY seq",
                (day.isoformat(),),
            ).fetchall()
        return [self._row_to_exception(r) for r in rows]

    def exceptions_for_event(self, event_id: str) -> list[EventException]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM event_exceptions WHERE recurring_event_id = ? ORDER BY seq",
                (event_id,),
            ).fetchall()
        return [self._row_to_exception(r) for r in rows]
